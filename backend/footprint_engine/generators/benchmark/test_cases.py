"""
Standard plots for benchmarking the footprint generators.
Each case provides a metric plot polygon, a setback policy and the
typologies worth running on it.
"""
from typing import Dict, List
from shapely.geometry import Polygon, box
from ...schemas.plot import SetbackPolicy

ALL_TYPOLOGIES = ['tower', 'perimeter', 'lamella', 'lshaped', 'ushaped', 'tshaped', 'hshaped']


class BenchmarkCase:
    def __init__(self,
                 name: str,
                 plot: Polygon,
                 setback: SetbackPolicy,
                 typologies: List[str] = None,
                 params: Dict = None):
        self.name = name
        self.plot = plot
        self.setback = setback
        self.typologies = typologies or ALL_TYPOLOGIES
        self.params = params or {}

    def get_params(self, typology: str, seed: int) -> Dict:
        """Raw parameter mapping for one typology run."""
        return {**self.params, 'typology': typology, 'seed': seed}


def create_rectangular_case() -> BenchmarkCase:
    """60m x 40m plot with a uniform 6m setback."""
    plot = box(0, 0, 60, 40)
    return BenchmarkCase('rectangular_60x40', plot, SetbackPolicy(uniform=6.0))


def create_lshaped_case() -> BenchmarkCase:
    """L-shaped plot with road access on the south side."""
    coords = [(0, 0), (120, 0), (120, 50), (50, 50), (50, 110), (0, 110), (0, 0)]
    plot = Polygon(coords)
    setback = SetbackPolicy(front=9.0, rear=6.0, side=4.5, road_access_sides=['S'])
    return BenchmarkCase('lshaped_plot', plot, setback)


def create_trapezoid_case() -> BenchmarkCase:
    """Trapezoid with a slanted east boundary."""
    coords = [(0, 0), (140, 0), (100, 80), (0, 80), (0, 0)]
    plot = Polygon(coords)
    return BenchmarkCase('trapezoid', plot, SetbackPolicy(uniform=5.0),
                         params={'max_footprint': 2500.0})


def create_pentagon_case() -> BenchmarkCase:
    """Irregular pentagon with peripheral parking and road."""
    coords = [(0, 0), (150, 10), (170, 90), (70, 150), (-10, 80), (0, 0)]
    plot = Polygon(coords)
    setback = SetbackPolicy(uniform=3.0, peripheral={'parking_width': 5.0, 'road_width': 6.0})
    return BenchmarkCase('irregular_pentagon', plot, setback,
                         params={'orientation': 30.0, 'max_building_length': 50.0})


# List of all available benchmark cases
BENCHMARK_CASES = [
    create_rectangular_case(),
    create_lshaped_case(),
    create_trapezoid_case(),
    create_pentagon_case()
]
