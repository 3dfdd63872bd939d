"""Per-obstacle decisions appended by the decision engine."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union


class DecisionType(Enum):
    """Kind of object decision."""
    STOP = auto()
    NUDGE = auto()
    FOLLOW = auto()
    IGNORE = auto()


class NudgeType(Enum):
    LEFT_NUDGE = auto()
    RIGHT_NUDGE = auto()


class StopReasonCode(Enum):
    STOP_REASON_OBSTACLE = auto()


@dataclass(frozen=True)
class ObjectStop:
    """Stop before the obstacle.

    Attributes:
        distance_s: Longitudinal buffer to keep [m]
        reason_code: Why the stop was issued
    """
    distance_s: float
    reason_code: StopReasonCode = StopReasonCode.STOP_REASON_OBSTACLE

    @property
    def decision_type(self) -> DecisionType:
        return DecisionType.STOP


@dataclass(frozen=True)
class ObjectNudge:
    """Pass the obstacle laterally.

    Attributes:
        distance_l: Lateral buffer to keep [m]
        type: Side to steer to
    """
    distance_l: float
    type: NudgeType

    @property
    def decision_type(self) -> DecisionType:
        return DecisionType.NUDGE


@dataclass(frozen=True)
class ObjectFollow:
    """Stay behind a moving obstacle.

    Attributes:
        distance_s: Longitudinal buffer to keep [m]
    """
    distance_s: float

    @property
    def decision_type(self) -> DecisionType:
        return DecisionType.FOLLOW


@dataclass(frozen=True)
class ObjectIgnore:
    """The obstacle does not interact with the path."""

    @property
    def decision_type(self) -> DecisionType:
        return DecisionType.IGNORE


ObjectDecision = Union[ObjectStop, ObjectNudge, ObjectFollow, ObjectIgnore]
