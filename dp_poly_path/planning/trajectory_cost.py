"""Default cost of a lattice edge.

The road graph only relies on ``calculate(curve, start_s, end_s)``; any
object with that method can replace this evaluator.
"""

import math
from dataclasses import dataclass
from typing import List

import numpy as np
from loguru import logger

from ..config import DpPolyPathConfig, VehicleParam
from ..core.exceptions import ProjectionFailure
from ..core.geometry import OrientedBox
from .quintic_polynomial import QuinticPolynomialCurve1d


@dataclass(frozen=True)
class SLBoundary:
    """Extent of an obstacle footprint in the Frenet frame."""
    start_s: float
    end_s: float
    start_l: float
    end_l: float


class TrajectoryCost:
    """Smoothness and static-obstacle cost of a lateral curve segment.

    Args:
        config: Planner configuration (cost weights)
        reference_line: Reference line used to project obstacles
        vehicle_param: Ego dimensions
        decision_data: Obstacles of the current cycle
    """

    def __init__(
        self,
        config: DpPolyPathConfig,
        reference_line,
        vehicle_param: VehicleParam,
        decision_data=None
    ):
        self.config = config
        self.vehicle_param = vehicle_param
        self.obstacle_boundaries: List[SLBoundary] = []

        if decision_data is not None:
            for obstacle in decision_data.static_obstacles:
                try:
                    boundary = self.sl_boundary(obstacle.perception_bounding_box, reference_line)
                except ProjectionFailure as e:
                    logger.warning(f"Obstacle {obstacle.id} skipped in path cost: {e}")
                    continue
                self.obstacle_boundaries.append(boundary)

    @staticmethod
    def sl_boundary(box: OrientedBox, reference_line) -> SLBoundary:
        """Frenet extent of a box around its projected centre.

        Only the centre has to project, so boxes hanging over either end of
        the reference line keep their full extent.

        Raises:
            ProjectionFailure: If the box centre cannot be projected
        """
        center = reference_line.project_to_frenet(box.center_x, box.center_y)
        dtheta = box.heading - reference_line.reference_point_at(center.s).heading
        cos_d, sin_d = abs(math.cos(dtheta)), abs(math.sin(dtheta))
        half_s = box.half_length * cos_d + box.half_width * sin_d
        half_l = box.half_length * sin_d + box.half_width * cos_d
        return SLBoundary(
            start_s=center.s - half_s,
            end_s=center.s + half_s,
            start_l=center.l - half_l,
            end_l=center.l + half_l,
        )

    def calculate(
        self,
        curve: QuinticPolynomialCurve1d,
        start_s: float,
        end_s: float
    ) -> float:
        """Cost of the curve between start_s and end_s.

        Args:
            curve: Lateral offset curve, local parameter starting at 0
            start_s: Reference arc length of the curve start [m]
            end_s: Reference arc length of the curve end [m]

        Returns:
            Non-negative cost
        """
        length = end_s - start_s
        local_s = np.arange(0.0, length, self.config.cost_eval_resolution)

        path_cost = 0.0
        obstacle_cost = 0.0
        margin = self.vehicle_param.width / 2.0 + self.config.obstacle_collision_buffer
        for ls in local_s:
            l = curve.evaluate(0, ls)
            dl = curve.evaluate(1, ls)
            ddl = curve.evaluate(2, ls)
            path_cost += (l * l * self.config.path_l_cost +
                          dl * dl * self.config.path_dl_cost +
                          ddl * ddl * self.config.path_ddl_cost)

            s = start_s + ls
            for boundary in self.obstacle_boundaries:
                if boundary.start_s <= s <= boundary.end_s and \
                        boundary.start_l - margin < l < boundary.end_l + margin:
                    obstacle_cost += self.config.obstacle_collision_cost

        return path_cost + obstacle_cost
