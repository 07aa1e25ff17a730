"""Particle Swarm Optimization over scalar candidate solutions."""

from .config import Direction, PSOParams, UpdateCoefficients
from .core import pso_run, run_iterations, run_until_threshold, step
from .errors import DimensionMismatch, EmptySwarm, InvalidObjectiveValue, NonConvergence, SwarmError
from .swarm import ParticleSwarm, direction_best

__all__ = [
    "Direction",
    "PSOParams",
    "UpdateCoefficients",
    "ParticleSwarm",
    "direction_best",
    "step",
    "run_iterations",
    "run_until_threshold",
    "pso_run",
    "SwarmError",
    "DimensionMismatch",
    "EmptySwarm",
    "InvalidObjectiveValue",
    "NonConvergence",
]
