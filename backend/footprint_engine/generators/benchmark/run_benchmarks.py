"""
Script to run benchmarks and generate comparison reports.
"""
import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from typing import List
from .runner import BenchmarkRunner, BenchmarkResult
from .test_cases import ALL_TYPOLOGIES

logger = logging.getLogger(__name__)


def plot_results(results: List[BenchmarkResult], output_dir: Path):
    """Generate visualization plots of benchmark results."""
    if not results:
        logger.warning("No results to plot!")
        return

    # Convert results to DataFrame
    df = pd.DataFrame([
        {
            'case': r.case_name,
            'typology': r.typology,
            'seed': r.seed,
            'runtime': r.runtime_seconds,
            'footprints': r.footprint_count,
            'built_area': r.built_area,
            'coverage': r.coverage,
            'compactness': r.mean_compactness,
            'overlap': r.overlap_area,
            'violations': r.violations
        }
        for r in results
    ])

    # Create plots directory
    plots_dir = output_dir / 'plots'
    plots_dir.mkdir(exist_ok=True)

    # Runtime comparison
    plt.figure(figsize=(10, 6))
    sns.boxplot(data=df, x='case', y='runtime', hue='typology')
    plt.title('Generation Runtime Comparison')
    plt.xticks(rotation=45)
    plt.tight_layout()
    plt.savefig(plots_dir / 'runtime_comparison.png')
    plt.close()

    # Quality metrics
    fig, axes = plt.subplots(2, 2, figsize=(15, 15))
    fig.suptitle('Footprint Quality Comparison')

    sns.barplot(data=df, x='case', y='coverage', hue='typology', ax=axes[0, 0])
    axes[0, 0].set_title('Plot Coverage')
    axes[0, 0].tick_params(labelrotation=45)

    sns.barplot(data=df, x='case', y='compactness', hue='typology', ax=axes[0, 1])
    axes[0, 1].set_title('Mean Compactness')
    axes[0, 1].tick_params(labelrotation=45)

    sns.barplot(data=df, x='case', y='footprints', hue='typology', ax=axes[1, 0])
    axes[1, 0].set_title('Footprint Count')
    axes[1, 0].tick_params(labelrotation=45)

    sns.barplot(data=df, x='case', y='violations', hue='typology', ax=axes[1, 1])
    axes[1, 1].set_title('Dimension Violations')
    axes[1, 1].tick_params(labelrotation=45)

    plt.tight_layout()
    plt.savefig(plots_dir / 'quality_metrics.png')
    plt.close()

    # Save raw data
    df.to_csv(output_dir / 'benchmark_results.csv', index=False)

    # Generate summary stats
    summary = df.groupby(['case', 'typology']).agg({
        'runtime': ['mean', 'std'],
        'built_area': ['mean', 'std'],
        'coverage': 'mean',
        'compactness': 'mean',
        'overlap': 'max',
        'violations': 'sum'
    }).round(3)

    summary.to_csv(output_dir / 'summary_stats.csv')


def main():
    parser = argparse.ArgumentParser(description='Run footprint generator benchmarks')
    parser.add_argument('--output', type=str, default='benchmark_results',
                        help='Output directory for results')
    parser.add_argument('--seeds', type=int, default=3,
                        help='Number of seeds per case and typology')
    parser.add_argument('--typology', action='append', choices=ALL_TYPOLOGIES,
                        help='Typology to run (repeatable, default all)')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    # Create output directory
    output_dir = Path(args.output)
    output_dir.mkdir(exist_ok=True)

    runner = BenchmarkRunner()
    results = runner.run_benchmark(typologies=args.typology, seeds_per_case=args.seeds)

    with open(output_dir / 'benchmark_results.json', 'w') as f:
        json.dump([asdict(r) for r in results], f, indent=2)

    # Generate plots and save results
    plot_results(results, output_dir)

    logger.info(f"Benchmark results saved to {output_dir}")


if __name__ == '__main__':
    main()
