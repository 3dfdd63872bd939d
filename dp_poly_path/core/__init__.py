"""Core module for fundamental data structures and utilities."""

from .data_structures import (
    SLPoint,
    FrenetFramePoint,
    PathPoint,
    ReferencePoint,
    TrajectoryPoint,
    SpeedPoint,
    FrenetFramePath,
    PathData,
    GraphNode,
)
from .decisions import (
    DecisionType,
    NudgeType,
    StopReasonCode,
    ObjectStop,
    ObjectNudge,
    ObjectFollow,
    ObjectIgnore,
)
from .exceptions import (
    PlanningError,
    ProjectionFailure,
    EmptySampling,
    SearchFailure,
    TimeSeriesMismatch,
)
from .geometry import OrientedBox
from .sl_analytic_transformation import SLAnalyticTransformation, normalize_angle

__all__ = [
    'SLPoint',
    'FrenetFramePoint',
    'PathPoint',
    'ReferencePoint',
    'TrajectoryPoint',
    'SpeedPoint',
    'FrenetFramePath',
    'PathData',
    'GraphNode',
    'DecisionType',
    'NudgeType',
    'StopReasonCode',
    'ObjectStop',
    'ObjectNudge',
    'ObjectFollow',
    'ObjectIgnore',
    'PlanningError',
    'ProjectionFailure',
    'EmptySampling',
    'SearchFailure',
    'TimeSeriesMismatch',
    'OrientedBox',
    'SLAnalyticTransformation',
    'normalize_angle',
]
