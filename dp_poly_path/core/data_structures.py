"""Core data structures for the DP poly path planner.

This module defines the value types shared by the sampler, the road graph,
the stitcher and the decision engine.
"""

import bisect
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from ..planning.quintic_polynomial import QuinticPolynomialCurve1d


@dataclass(frozen=True)
class SLPoint:
    """Point in the Frenet frame of a reference line.

    Attributes:
        s: Arc length along the reference line [m]
        l: Signed lateral offset, positive to the left [m]
    """
    s: float
    l: float


@dataclass(frozen=True)
class FrenetFramePoint:
    """Frenet point with lateral derivatives taken with respect to s.

    Attributes:
        s: Arc length [m]
        l: Lateral offset [m]
        dl: dl/ds
        ddl: d²l/ds²
    """
    s: float
    l: float
    dl: float = 0.0
    ddl: float = 0.0


@dataclass(frozen=True)
class PathPoint:
    """Point of a Cartesian path.

    Attributes:
        x, y: Position in global frame [m]
        theta: Heading [rad]
        kappa: Curvature [1/m]
        s: Accumulated arc length along the path [m]
        dkappa: Curvature rate [1/m²]
        ddkappa: Second derivative of curvature [1/m³]
    """
    x: float
    y: float
    theta: float = 0.0
    kappa: float = 0.0
    s: float = 0.0
    dkappa: float = 0.0
    ddkappa: float = 0.0


@dataclass(frozen=True)
class ReferencePoint:
    """Geometry of the reference line at one arc length."""
    x: float
    y: float
    heading: float
    kappa: float
    dkappa: float


@dataclass(frozen=True)
class TrajectoryPoint:
    """Time-stamped path point (vehicle state or obstacle prediction).

    Attributes:
        path_point: Pose and curvature
        v: Speed [m/s]
        a: Acceleration [m/s²]
        relative_time: Time relative to the planning cycle start [s]
    """
    path_point: PathPoint
    v: float = 0.0
    a: float = 0.0
    relative_time: float = 0.0


@dataclass(frozen=True)
class SpeedPoint:
    """Point of a heuristic speed profile."""
    s: float
    t: float
    v: float = 0.0
    a: float = 0.0
    da: float = 0.0


class FrenetFramePath:
    """Immutable, s-ordered sequence of Frenet frame points."""

    def __init__(self, points: Sequence[FrenetFramePoint] = ()):
        self._points: Tuple[FrenetFramePoint, ...] = tuple(points)
        self._s = [p.s for p in self._points]

    @property
    def points(self) -> Tuple[FrenetFramePoint, ...]:
        return self._points

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __getitem__(self, idx: int) -> FrenetFramePoint:
        return self._points[idx]

    def __eq__(self, other) -> bool:
        if not isinstance(other, FrenetFramePath):
            return NotImplemented
        return self._points == other._points

    def interpolate(self, s: float) -> FrenetFramePoint:
        """Linearly interpolate l, dl and ddl at arc length s.

        Queries outside the covered range return the nearest end point.

        Args:
            s: Arc length [m]

        Returns:
            Interpolated Frenet frame point
        """
        if len(self._points) == 0:
            raise IndexError("Cannot interpolate an empty Frenet frame path")
        if s <= self._s[0]:
            return self._points[0]
        if s >= self._s[-1]:
            return self._points[-1]

        idx = bisect.bisect_left(self._s, s)
        p0 = self._points[idx - 1]
        p1 = self._points[idx]
        ratio = (s - p0.s) / (p1.s - p0.s)
        return FrenetFramePoint(
            s=s,
            l=p0.l + ratio * (p1.l - p0.l),
            dl=p0.dl + ratio * (p1.dl - p0.dl),
            ddl=p0.ddl + ratio * (p1.ddl - p0.ddl),
        )


@dataclass
class PathData:
    """Output container of one planning cycle.

    Attributes:
        frenet_path: Dense Frenet frame samples of the path tunnel
        discretized_path: Parallel Cartesian path points
    """
    frenet_path: FrenetFramePath = field(default_factory=FrenetFramePath)
    discretized_path: Tuple[PathPoint, ...] = ()

    def set_path(
        self,
        frenet_path: FrenetFramePath,
        discretized_path: Sequence[PathPoint]
    ) -> None:
        """Assign both representations of the path at once."""
        if len(frenet_path) != len(discretized_path):
            raise ValueError(
                f"Frenet path ({len(frenet_path)}) and discretized path "
                f"({len(discretized_path)}) must have the same length"
            )
        self.frenet_path = frenet_path
        self.discretized_path = tuple(discretized_path)

    @property
    def is_empty(self) -> bool:
        return len(self.discretized_path) == 0

    def to_array(self) -> np.ndarray:
        """Convert the Cartesian path to array [n, 5] of (x, y, theta, kappa, s)."""
        if self.is_empty:
            return np.empty((0, 5))
        return np.array([
            [p.x, p.y, p.theta, p.kappa, p.s] for p in self.discretized_path
        ])


@dataclass
class GraphNode:
    """Node of the DP road graph.

    The predecessor is referenced by its index in the previous level, so
    backtracking walks level buffers instead of object references.

    Attributes:
        sl_point: Lattice station of this node, None for the synthetic sink
        min_cost: Best cumulative cost from the root
        min_cost_curve: Edge curve of the best predecessor
        prev_index: Index of the best predecessor in the previous level
    """
    sl_point: Optional[SLPoint]
    min_cost: float = float('inf')
    min_cost_curve: Optional['QuinticPolynomialCurve1d'] = None
    prev_index: Optional[int] = None

    def update_cost(
        self,
        prev_index: int,
        curve: Optional['QuinticPolynomialCurve1d'],
        cost: float
    ) -> bool:
        """Relax the node through a predecessor; only strict improvement wins.

        Returns:
            True if the node was updated
        """
        if cost < self.min_cost:
            self.min_cost = cost
            self.min_cost_curve = curve
            self.prev_index = prev_index
            return True
        return False
