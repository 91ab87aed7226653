"""
Tunable thresholds shared by the footprint generators.
"""
from dataclasses import dataclass
from typing import Tuple


@dataclass
class FootprintPolicy:
    # outline analysis
    outline_tolerance: float = 0.5  # meters, simplification before corner/edge search
    min_corner_turn: float = 20.0  # degrees, smaller turns are not corners
    t_min_edge_factor: float = 1.5  # T anchors need edge >= factor * min_building_length
    opposite_angle_tolerance: float = 45.0  # degrees away from antiparallel
    opposite_min_separation: float = 0.3  # fraction of plot minor dimension

    # wings and depth variants
    depth_multipliers: Tuple[float, float, float] = (0.75, 1.0, 1.5)  # compact, standard, deep
    depth_jitter: float = 0.1  # +/- fraction applied to the target depth
    max_depth_ratio: float = 0.4  # depth <= ratio * plot minor dimension
    auto_depth_ratio: float = 0.12
    auto_depth_ratio_h: float = 0.10
    auto_depth_range: Tuple[float, float] = (10.0, 14.0)
    wing_exclusion: float = 0.1  # meters, outward buffer when removing wing overlap

    # segmentation
    dimension_tolerance: float = 1.0  # meters
    segment_stop_length: float = 20.0  # meters of remaining run below which a reject ends the scan
    max_iterations: int = 20

    # area capping
    max_shrink_attempts: int = 15
    shrink_steps: Tuple[float, float, float] = (2.0, 1.0, 0.2)  # >2x, >1.5x, fine

    # acceptance ratios
    tower_inside_ratio: float = 0.99
    template_within_ratio: float = 0.99
    template_fallback_scale: float = 0.7
    template_variance: float = 0.1

    # collisions and clearances
    collision_epsilon: float = 1.0  # m^2
    corner_clearance: float = 1.5  # meters

    # area floors
    min_buildable_area: float = 1.0  # m^2
    peripheral_min_area: float = 100.0  # m^2
    min_part_area: float = 10.0  # m^2

    # grid / sweep phases, as fractions of the stride
    grid_phases: Tuple[Tuple[float, float], ...] = ((0.0, 0.0), (0.5, 0.0), (0.0, 0.5), (0.5, 0.5))
    sweep_phases: Tuple[float, ...] = (0.0, 1.0 / 3.0, 2.0 / 3.0)

    def shrink_step(self, area: float, max_area: float) -> float:
        coarse, medium, fine = self.shrink_steps
        if area > 2.0 * max_area:
            return coarse
        if area > 1.5 * max_area:
            return medium
        return fine
