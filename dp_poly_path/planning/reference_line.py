"""Reference line backed by arc-length parameterised cubic splines.

Provides the queries the road graph and the decision engine need:
Frenet projection, Frenet to Cartesian mapping, reference geometry and
road-surface membership.
"""

import math
from typing import Sequence, Tuple

import numpy as np
from loguru import logger
from scipy.interpolate import CubicSpline

from ..core.data_structures import ReferencePoint, SLPoint
from ..core.exceptions import ProjectionFailure


class ReferenceLine:
    """Smooth reference line through a set of waypoints.

    Args:
        x: x coordinates of waypoints
        y: y coordinates of waypoints
        left_width: Drivable width to the left of the line [m]
        right_width: Drivable width to the right of the line [m]
        projection_resolution: Spacing of the coarse projection grid [m]
    """

    def __init__(
        self,
        x: Sequence[float],
        y: Sequence[float],
        left_width: float = 3.5,
        right_width: float = 3.5,
        projection_resolution: float = 0.5
    ):
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        if x.shape != y.shape or x.size < 2:
            raise ValueError("Reference line needs at least 2 waypoints with matching x/y")
        if left_width < 0 or right_width < 0:
            raise ValueError("Road widths must be non-negative")

        ds = np.hypot(np.diff(x), np.diff(y))
        if np.any(ds <= 0):
            raise ValueError("Reference line waypoints must be distinct and ordered")

        self.s = np.concatenate([[0.0], np.cumsum(ds)])
        self.sx = CubicSpline(self.s, x, bc_type='natural')
        self.sy = CubicSpline(self.s, y, bc_type='natural')
        self.left_width = left_width
        self.right_width = right_width

        n_grid = max(2, int(math.ceil(self.length / projection_resolution)) + 1)
        self._grid_s = np.linspace(0.0, self.length, n_grid)
        self._grid_xy = np.column_stack([self.sx(self._grid_s), self.sy(self._grid_s)])

        logger.debug(f"Reference line built: length={self.length:.2f}m, "
                     f"road=[-{right_width:.2f}, {left_width:.2f}]m")

    @property
    def length(self) -> float:
        """Total arc length [m]."""
        return float(self.s[-1])

    def calc_position(self, s: float) -> Tuple[float, float]:
        return float(self.sx(s)), float(self.sy(s))

    def _tangent(self, s: float) -> Tuple[float, float]:
        dx = float(self.sx(s, 1))
        dy = float(self.sy(s, 1))
        norm = math.hypot(dx, dy)
        return dx / norm, dy / norm

    def reference_point_at(self, s: float) -> ReferencePoint:
        """Reference geometry at arc length s (clamped to the line).

        Args:
            s: Arc length [m]

        Returns:
            Position, heading, curvature and curvature rate
        """
        s = min(max(s, 0.0), self.length)
        dx = float(self.sx(s, 1))
        dy = float(self.sy(s, 1))
        ddx = float(self.sx(s, 2))
        ddy = float(self.sy(s, 2))
        dddx = float(self.sx(s, 3))
        dddy = float(self.sy(s, 3))

        a = dx * ddy - dy * ddx
        b = dx * dddy - dy * dddx
        c = dx * ddx + dy * ddy
        d = dx * dx + dy * dy

        kappa = a / (d ** 1.5)
        dkappa = (b * d - 3.0 * a * c) / (d ** 2.5)

        x, y = self.calc_position(s)
        return ReferencePoint(x=x, y=y, heading=math.atan2(dy, dx),
                              kappa=kappa, dkappa=dkappa)

    def project_to_frenet(self, x: float, y: float, tolerance: float = 1e-6) -> SLPoint:
        """Project a Cartesian point onto the reference line.

        Args:
            x, y: Position in global frame [m]
            tolerance: Allowed overshoot beyond the line ends [m]

        Returns:
            Frenet coordinates of the point

        Raises:
            ProjectionFailure: If the foot point lies outside the line
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ProjectionFailure(f"Cannot project non-finite point ({x}, {y})")

        # Coarse search on the precomputed grid
        dist_sq = np.sum((self._grid_xy - np.array([x, y])) ** 2, axis=1)
        best_s = float(self._grid_s[int(np.argmin(dist_sq))])

        # Refine along the tangent
        overshoot = 0.0
        for _ in range(10):
            px, py = self.calc_position(best_s)
            tx, ty = self._tangent(best_s)
            step = (x - px) * tx + (y - py) * ty
            target = best_s + step
            clamped = min(max(target, 0.0), self.length)
            overshoot = target - clamped
            if abs(clamped - best_s) < 1e-9:
                best_s = clamped
                break
            best_s = clamped

        if abs(overshoot) > tolerance:
            raise ProjectionFailure(
                f"Point ({x:.2f}, {y:.2f}) projects {overshoot:+.2f}m outside "
                f"the reference line [0, {self.length:.2f}]"
            )

        px, py = self.calc_position(best_s)
        tx, ty = self._tangent(best_s)
        l = tx * (y - py) - ty * (x - px)
        return SLPoint(s=best_s, l=l)

    def to_cartesian(self, sl_point: SLPoint, tolerance: float = 1e-6) -> Tuple[float, float]:
        """Map a Frenet point to global coordinates.

        Raises:
            ProjectionFailure: If s is outside the line
        """
        s = sl_point.s
        if not math.isfinite(s) or s < -tolerance or s > self.length + tolerance:
            raise ProjectionFailure(
                f"s={s:.2f} is outside the reference line [0, {self.length:.2f}]"
            )
        s = min(max(s, 0.0), self.length)
        ref = self.reference_point_at(s)
        return (ref.x - math.sin(ref.heading) * sl_point.l,
                ref.y + math.cos(ref.heading) * sl_point.l)

    def is_on_road(self, sl_point: SLPoint) -> bool:
        """Whether the Frenet point lies on the drivable road surface."""
        return (0.0 <= sl_point.s <= self.length and
                -self.right_width <= sl_point.l <= self.left_width)

    @classmethod
    def straight(
        cls,
        length: float,
        heading: float = 0.0,
        origin: Tuple[float, float] = (0.0, 0.0),
        **kwargs
    ) -> 'ReferenceLine':
        """Straight reference line of the given length."""
        ts = np.linspace(0.0, length, max(2, int(math.ceil(length / 10.0)) + 1))
        xs = origin[0] + ts * math.cos(heading)
        ys = origin[1] + ts * math.sin(heading)
        return cls(xs, ys, **kwargs)
