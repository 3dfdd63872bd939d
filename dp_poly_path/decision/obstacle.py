"""Obstacles as seen by the path decision engine."""

import math
from typing import List, Sequence

import numpy as np

from ..core.data_structures import PathPoint, TrajectoryPoint
from ..core.decisions import ObjectDecision
from ..core.geometry import OrientedBox
from ..core.sl_analytic_transformation import normalize_angle


class Obstacle:
    """Perceived obstacle with an optional predicted trajectory.

    An obstacle without a predicted trajectory is static. Decisions are
    append-only for the duration of a planning cycle.

    Args:
        obstacle_id: Identifier
        x, y: Perceived centre [m]
        heading: Perceived heading [rad]
        length, width: Footprint [m]
        trajectory: Predicted trajectory points ordered by relative time
    """

    def __init__(
        self,
        obstacle_id: str,
        x: float,
        y: float,
        heading: float,
        length: float,
        width: float,
        trajectory: Sequence[TrajectoryPoint] = ()
    ):
        if length <= 0 or width <= 0:
            raise ValueError(f"Obstacle {obstacle_id} dimensions must be positive, got {length}x{width}")
        self.id = obstacle_id
        self.x = x
        self.y = y
        self.heading = heading
        self.length = length
        self.width = width
        self.trajectory: List[TrajectoryPoint] = sorted(
            trajectory, key=lambda p: p.relative_time
        )
        self._decisions: List[ObjectDecision] = []

    @property
    def is_static(self) -> bool:
        return len(self.trajectory) == 0

    @property
    def decisions(self) -> List[ObjectDecision]:
        """Decisions appended so far (read-only copy)."""
        return list(self._decisions)

    def add_decision(self, decision: ObjectDecision) -> None:
        self._decisions.append(decision)

    @property
    def perception_bounding_box(self) -> OrientedBox:
        return OrientedBox(self.x, self.y, self.heading, self.length, self.width)

    def get_point_at_time(self, relative_time: float) -> TrajectoryPoint:
        """Predicted state at a relative time.

        Positions are linearly interpolated; times beyond the prediction are
        clamped to its ends. Static obstacles return their perceived pose.
        """
        if self.is_static:
            return TrajectoryPoint(
                path_point=PathPoint(x=self.x, y=self.y, theta=self.heading),
                relative_time=relative_time,
            )
        if len(self.trajectory) == 1 or relative_time <= self.trajectory[0].relative_time:
            return self.trajectory[0]
        if relative_time >= self.trajectory[-1].relative_time:
            return self.trajectory[-1]

        times = np.array([p.relative_time for p in self.trajectory])
        idx = int(np.searchsorted(times, relative_time, side='right'))
        p0 = self.trajectory[idx - 1]
        p1 = self.trajectory[idx]
        ratio = (relative_time - p0.relative_time) / (p1.relative_time - p0.relative_time)

        dtheta = normalize_angle(p1.path_point.theta - p0.path_point.theta)
        return TrajectoryPoint(
            path_point=PathPoint(
                x=p0.path_point.x + ratio * (p1.path_point.x - p0.path_point.x),
                y=p0.path_point.y + ratio * (p1.path_point.y - p0.path_point.y),
                theta=normalize_angle(p0.path_point.theta + ratio * dtheta),
            ),
            v=p0.v + ratio * (p1.v - p0.v),
            a=p0.a + ratio * (p1.a - p0.a),
            relative_time=relative_time,
        )

    def get_bounding_box(self, point: TrajectoryPoint) -> OrientedBox:
        """Footprint of the obstacle placed at a trajectory point."""
        return OrientedBox(point.path_point.x, point.path_point.y,
                           point.path_point.theta, self.length, self.width)

    @classmethod
    def constant_velocity(
        cls,
        obstacle_id: str,
        x: float,
        y: float,
        heading: float,
        speed: float,
        length: float,
        width: float,
        horizon: float = 8.0,
        dt: float = 0.1
    ) -> 'Obstacle':
        """Dynamic obstacle predicted to keep its heading and speed."""
        trajectory = []
        for t in np.arange(0.0, horizon + 1e-9, dt):
            trajectory.append(TrajectoryPoint(
                path_point=PathPoint(
                    x=x + speed * t * math.cos(heading),
                    y=y + speed * t * math.sin(heading),
                    theta=heading,
                ),
                v=speed,
                relative_time=float(t),
            ))
        return cls(obstacle_id, x, y, heading, length, width, trajectory)

    def __repr__(self) -> str:
        kind = "static" if self.is_static else "dynamic"
        return f"Obstacle(id={self.id!r}, {kind}, x={self.x:.2f}, y={self.y:.2f})"
