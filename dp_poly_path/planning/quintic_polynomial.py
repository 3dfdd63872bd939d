"""Quintic polynomial curve over an arc-length interval.

The road graph uses one curve per lattice edge to describe the lateral
offset l(s) between two stations.
"""

import numpy as np


class QuinticPolynomialCurve1d:
    """Quintic polynomial fit to position, slope and second derivative at both ends.

    The polynomial has the form:
    x(p) = a0 + a1*p + a2*p^2 + a3*p^3 + a4*p^4 + a5*p^5

    Args:
        x0: Start position
        dx0: Start first derivative
        ddx0: Start second derivative
        x1: End position
        dx1: End first derivative
        ddx1: End second derivative
        param: Length of the parameter interval, must be positive
    """

    def __init__(
        self,
        x0: float,
        dx0: float,
        ddx0: float,
        x1: float,
        dx1: float,
        ddx1: float,
        param: float
    ):
        if param <= 0:
            raise ValueError(f"Curve parameter length must be positive, got {param}")

        self._start_condition = (x0, dx0, ddx0)
        self._end_condition = (x1, dx1, ddx1)
        self._param = param

        # Start conditions fix the first three coefficients
        a0 = x0
        a1 = dx0
        a2 = ddx0 / 2.0

        p2 = param * param
        p3 = p2 * param

        # Closed-form solution of the end conditions
        c0 = (x1 - a0 - a1 * param - a2 * p2) / p3
        c1 = (dx1 - a1 - 2.0 * a2 * param) / p2
        c2 = (ddx1 - 2.0 * a2) / param

        a3 = 0.5 * (20.0 * c0 - 8.0 * c1 + c2)
        a4 = (-15.0 * c0 + 7.0 * c1 - c2) / param
        a5 = (6.0 * c0 - 3.0 * c1 + 0.5 * c2) / p2

        self._coef = np.array([a0, a1, a2, a3, a4, a5])

    @property
    def param_length(self) -> float:
        return self._param

    @property
    def coefficients(self) -> np.ndarray:
        """Coefficients [a0, ..., a5], lowest order first."""
        return self._coef.copy()

    def evaluate(self, order: int, p: float) -> float:
        """Evaluate the curve or one of its derivatives.

        Args:
            order: Derivative order (0, 1 or 2)
            p: Local parameter in [0, param_length]

        Returns:
            Value of the order-th derivative at p
        """
        a0, a1, a2, a3, a4, a5 = self._coef
        if order == 0:
            return float(((((a5 * p + a4) * p + a3) * p + a2) * p + a1) * p + a0)
        if order == 1:
            return float((((5.0 * a5 * p + 4.0 * a4) * p + 3.0 * a3) * p + 2.0 * a2) * p + a1)
        if order == 2:
            return float(((20.0 * a5 * p + 12.0 * a4) * p + 6.0 * a3) * p + 2.0 * a2)
        raise ValueError(f"Derivative order must be 0, 1 or 2, got {order}")

    def __repr__(self) -> str:
        return (f"QuinticPolynomialCurve1d(start={self._start_condition}, "
                f"end={self._end_condition}, param={self._param})")
