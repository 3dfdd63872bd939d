"""Analytic relations between Frenet lateral derivatives and Cartesian heading/curvature.

All lateral derivatives are taken with respect to the reference arc length s.

Reference:
Werling et al., "Optimal Trajectory Generation for Dynamic Street Scenarios
in a Frenet Frame" (2010)
"""

import math
from typing import Union

import numpy as np


def normalize_angle(angle: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Normalize angle to [-pi, pi) range.

    Args:
        angle: Input angle in radians

    Returns:
        Normalized angle
    """
    two_pi = 2.0 * np.pi
    n = np.round(angle / two_pi)
    a = angle - n * two_pi

    if np.isscalar(a):
        if abs(a - np.pi) < 1e-9:
            return -np.pi
        return float(a)

    a = np.asarray(a, dtype=float)
    a[np.abs(a - np.pi) < 1e-9] = -np.pi
    return a


class SLAnalyticTransformation:
    """Closed-form Frenet <-> Cartesian heading and curvature transforms."""

    @staticmethod
    def calculate_theta(rtheta: float, rkappa: float, l: float, dl: float) -> float:
        """Heading of a point offset by l with lateral slope dl.

        Args:
            rtheta: Reference heading [rad]
            rkappa: Reference curvature [1/m]
            l: Lateral offset [m]
            dl: dl/ds

        Returns:
            Cartesian heading [rad]
        """
        return normalize_angle(rtheta + math.atan2(dl, 1.0 - l * rkappa))

    @staticmethod
    def calculate_kappa(
        rkappa: float,
        rdkappa: float,
        l: float,
        dl: float,
        ddl: float
    ) -> float:
        """Cartesian curvature of a Frenet curve.

        Args:
            rkappa: Reference curvature [1/m]
            rdkappa: Reference curvature rate [1/m²]
            l, dl, ddl: Lateral offset and its first two s-derivatives

        Returns:
            Curvature [1/m]
        """
        one_minus_kappa_r_d = 1.0 - rkappa * l
        if abs(one_minus_kappa_r_d) < 1e-8:
            return 0.0

        tan_delta_theta = dl / one_minus_kappa_r_d
        delta_theta = math.atan2(dl, one_minus_kappa_r_d)
        cos_delta_theta = math.cos(delta_theta)

        kappa_r_d_prime = rdkappa * l + rkappa * dl

        return (((ddl + kappa_r_d_prime * tan_delta_theta) *
                 cos_delta_theta * cos_delta_theta) / one_minus_kappa_r_d + rkappa) * \
            cos_delta_theta / one_minus_kappa_r_d

    @staticmethod
    def calculate_lateral_derivative(
        rtheta: float,
        theta: float,
        l: float,
        rkappa: float
    ) -> float:
        """First lateral derivative dl/ds from a Cartesian heading."""
        return (1.0 - rkappa * l) * math.tan(theta - rtheta)

    @staticmethod
    def calculate_second_order_lateral_derivative(
        rtheta: float,
        theta: float,
        rkappa: float,
        kappa: float,
        rdkappa: float,
        l: float
    ) -> float:
        """Second lateral derivative d²l/ds² from Cartesian heading and curvature.

        Args:
            rtheta: Reference heading [rad]
            theta: Vehicle heading [rad]
            rkappa: Reference curvature [1/m]
            kappa: Vehicle path curvature [1/m]
            rdkappa: Reference curvature rate [1/m²]
            l: Lateral offset [m]

        Returns:
            d²l/ds²
        """
        delta_theta = theta - rtheta
        tan_delta_theta = math.tan(delta_theta)
        cos_delta_theta = math.cos(delta_theta)

        one_minus_kappa_r_d = 1.0 - rkappa * l
        dl = one_minus_kappa_r_d * tan_delta_theta
        kappa_r_d_prime = rdkappa * l + rkappa * dl

        return (-kappa_r_d_prime * tan_delta_theta +
                one_minus_kappa_r_d / (cos_delta_theta * cos_delta_theta) *
                (kappa * one_minus_kappa_r_d / cos_delta_theta - rkappa))
