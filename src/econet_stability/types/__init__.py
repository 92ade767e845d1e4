"""Core data types for econet_stability."""

from econet_stability.types.model import FunctionalResponse, ModelConfig
from econet_stability.types.trajectory import Trajectory

__all__ = [
    # model
    "FunctionalResponse",
    "ModelConfig",
    # trajectory
    "Trajectory",
]
