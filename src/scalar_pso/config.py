from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from .constants import DEFAULT_COGNITIVE, DEFAULT_SOCIAL, DEFAULT_THRESHOLD, DEFAULT_MAX_ITERS
from .errors import InvalidObjectiveValue

"""
Run configuration for the scalar PSO solver.

`Direction` fixes what "better" means for a whole run, `UpdateCoefficients`
holds the cognitive/social pair used by every step, and `PSOParams` bundles
everything the driver needs for one run.
"""


class Direction(Enum):
    MINIMIZE = "min"
    MAXIMIZE = "max"

    def improves(self, candidate, incumbent):
        """Strict improvement test; works on scalars and elementwise on arrays."""
        if self is Direction.MINIMIZE:
            return np.less(candidate, incumbent)
        return np.greater(candidate, incumbent)

    def best_index(self, values) -> int:
        """Index of the best value. Ties go to the lowest index; NaN values are rejected."""
        values = np.asarray(values, dtype=float)
        if values.size == 0:
            raise ValueError("best_index() of an empty sequence.")
        if np.isnan(values).any():
            raise InvalidObjectiveValue(int(np.flatnonzero(np.isnan(values))[0]))
        if self is Direction.MINIMIZE:
            return int(np.argmin(values))
        return int(np.argmax(values))


@dataclass(frozen=True)
class UpdateCoefficients:
    cognitive: float = DEFAULT_COGNITIVE
    social: float = DEFAULT_SOCIAL

    def __post_init__(self):
        for name in ("cognitive", "social"):
            v = getattr(self, name)
            if not math.isfinite(v) or v < 0:
                raise ValueError(f"{name} coefficient must be a finite non-negative number, got {v!r}.")


@dataclass(frozen=True)
class PSOParams:
    """
    One run's settings. `iters=None` selects threshold mode, in which the
    swarm is stepped until f(global_best) <= threshold or `max_iters` is hit.
    """
    swarm_size: Optional[int] = None
    iters: Optional[int] = None
    threshold: float = DEFAULT_THRESHOLD
    max_iters: int = DEFAULT_MAX_ITERS
    c1: float = DEFAULT_COGNITIVE
    c2: float = DEFAULT_SOCIAL
    seed: Optional[int] = None
    direction: Direction = Direction.MINIMIZE

    @property
    def coefficients(self) -> UpdateCoefficients:
        return UpdateCoefficients(cognitive=self.c1, social=self.c2)
