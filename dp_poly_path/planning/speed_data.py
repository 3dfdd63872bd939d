"""Heuristic speed profile consumed by the dynamic obstacle decisions."""

from typing import List, Optional, Sequence

import numpy as np

from ..core.data_structures import SpeedPoint


class SpeedData:
    """Time-ordered speed points.

    Args:
        speed_points: Speed points sorted by time
    """

    def __init__(self, speed_points: Sequence[SpeedPoint] = ()):
        self.speed_points: List[SpeedPoint] = sorted(speed_points, key=lambda p: p.t)
        self._t = np.array([p.t for p in self.speed_points], dtype=float)

    def __len__(self) -> int:
        return len(self.speed_points)

    @property
    def total_time(self) -> float:
        """Time covered by the profile [s]."""
        if len(self.speed_points) == 0:
            return 0.0
        return self.speed_points[-1].t - self.speed_points[0].t

    def get_speed_point_with_time(self, t: float) -> Optional[SpeedPoint]:
        """Interpolate the profile at time t.

        Args:
            t: Time [s]

        Returns:
            Interpolated speed point, or None if the profile has fewer than two
            points or t is outside the covered time range
        """
        if len(self.speed_points) < 2:
            return None
        if t < self._t[0] - 1e-9 or t > self._t[-1] + 1e-9:
            return None

        def interp(values):
            return float(np.interp(t, self._t, values))

        return SpeedPoint(
            s=interp([p.s for p in self.speed_points]),
            t=t,
            v=interp([p.v for p in self.speed_points]),
            a=interp([p.a for p in self.speed_points]),
            da=interp([p.da for p in self.speed_points]),
        )

    @classmethod
    def constant_speed(
        cls,
        v: float,
        total_time: float,
        dt: float = 0.1,
        s0: float = 0.0
    ) -> 'SpeedData':
        """Build a profile cruising at a constant speed.

        Args:
            v: Speed [m/s]
            total_time: Profile duration [s]
            dt: Time spacing [s]
            s0: Arc length at t=0 [m]
        """
        n = int(round(total_time / dt)) + 1
        times = np.linspace(0.0, total_time, max(n, 2))
        return cls([SpeedPoint(s=s0 + v * t, t=float(t), v=v) for t in times])
