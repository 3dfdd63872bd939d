"""Path planning module."""

from .quintic_polynomial import QuinticPolynomialCurve1d
from .reference_line import ReferenceLine
from .speed_data import SpeedData
from .lattice_sampler import PathSampler
from .trajectory_cost import TrajectoryCost
from .dp_road_graph import DPRoadGraph, ZERO_DL, ZERO_DDL
from .dp_poly_path_optimizer import DpPolyPathOptimizer, PlanningStatus

__all__ = [
    'QuinticPolynomialCurve1d',
    'ReferenceLine',
    'SpeedData',
    'PathSampler',
    'TrajectoryCost',
    'DPRoadGraph',
    'ZERO_DL',
    'ZERO_DDL',
    'DpPolyPathOptimizer',
    'PlanningStatus',
]
