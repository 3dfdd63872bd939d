"""Road-aligned lattice sampling of candidate waypoints."""

from typing import List

from loguru import logger

from ..config import DpPolyPathConfig
from ..core.data_structures import SLPoint, TrajectoryPoint


class PathSampler:
    """Samples lateral candidates at speed-adaptive longitudinal stations.

    Args:
        config: Planner configuration
    """

    def __init__(self, config: DpPolyPathConfig):
        self.config = config

    def level_distance(self, init_speed: float) -> float:
        """Spacing between levels, clamped to [step_length_min, step_length_max]."""
        return max(self.config.step_length_min,
                   min(init_speed, self.config.step_length_max))

    def lateral_offsets(self) -> List[float]:
        """Offsets symmetric around the centre line."""
        num = self.config.sample_points_num_each_level // 2
        return [self.config.lateral_sample_offset * j for j in range(-num, num + 1)]

    def sample_path_waypoints(
        self,
        reference_line,
        init_point: TrajectoryPoint
    ) -> List[List[SLPoint]]:
        """Sample the waypoint levels ahead of the vehicle.

        Args:
            reference_line: Reference line to sample along
            init_point: Current vehicle state

        Returns:
            Non-empty levels ordered by increasing s; may be an empty list when
            the vehicle is already at the end of the reference line

        Raises:
            ProjectionFailure: If the vehicle position cannot be projected
        """
        init_sl_point = reference_line.project_to_frenet(
            init_point.path_point.x, init_point.path_point.y
        )

        reference_line_length = reference_line.length
        level_distance = self.level_distance(init_point.v)
        offsets = self.lateral_offsets()

        levels: List[List[SLPoint]] = []
        accumulated_s = init_sl_point.s
        for _ in range(self.config.sample_level):
            if accumulated_s >= reference_line_length:
                break
            accumulated_s += level_distance
            s = min(accumulated_s, reference_line_length)

            level_points = [
                SLPoint(s=s, l=l) for l in offsets
                if reference_line.is_on_road(SLPoint(s=s, l=l))
            ]
            if level_points:
                levels.append(level_points)
            else:
                logger.debug(f"No drivable waypoint at s={s:.2f}, level dropped")

        logger.debug(f"Sampled {len(levels)} levels from s={init_sl_point.s:.2f} "
                     f"with step {level_distance:.2f}m")
        return levels
