"""Obstacle decision module."""

from .obstacle import Obstacle
from .decision_data import DecisionData
from .object_decider import ObjectDecider

__all__ = [
    'Obstacle',
    'DecisionData',
    'ObjectDecider',
]
