"""Swarm state for scalar PSO.

A `ParticleSwarm` holds four parallel per-particle arrays plus the swarm-wide
best. It is built once, either from explicit positions/velocities or from
uniform random draws, and then mutated in place by `core.step`.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

import numpy as np

from .config import Direction
from .constants import INIT_LOW, INIT_HIGH
from .errors import DimensionMismatch, EmptySwarm

Objective = Callable[[float], float]


class RandomSource(Protocol):
    """Anything producing uniform floats in [0, 1) on demand."""

    def random(self) -> float: ...


def evaluate(f: Objective, xs: np.ndarray) -> np.ndarray:
    return np.array([f(float(x)) for x in xs], dtype=float)


def direction_best(f: Objective, values: Sequence[float], direction: Direction) -> float:
    """
    Return the element of `values` whose objective value is best for `direction`.

    Ties resolve to the lowest index, independent of how the values were scanned.
    """
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        raise EmptySwarm(0)
    return float(values[direction.best_index(evaluate(f, values))])


class ParticleSwarm:
    """
    Positions, velocities and personal bests of `n` scalar particles.

    Attributes
    ----------
    position, velocity, personal_best : (n,) float ndarray
        Parallel arrays; index i is particle i for the swarm's lifetime.
    personal_best_values : (n,) float ndarray
        f(personal_best[i]), cached so each step evaluates f once per particle.
    global_best : float or None
        Best entry of `personal_best`; set on construction.
    """

    def __init__(self, position, velocity, personal_best, personal_best_values,
                 global_best: Optional[float] = None):
        self.position = position
        self.velocity = velocity
        self.personal_best = personal_best
        self.personal_best_values = personal_best_values
        self.global_best = global_best

    @property
    def n(self) -> int:
        return int(self.position.size)

    def __len__(self) -> int:
        return self.n

    def __str__(self) -> str:
        return (f"Positions: {self.position.tolist()}\n"
                f"Velocities: {self.velocity.tolist()}")

    def __repr__(self) -> str:
        return (f"ParticleSwarm(n={self.n}, global_best={self.global_best!r}, "
                f"position={self.position.tolist()!r}, velocity={self.velocity.tolist()!r})")

    # ---------- Constructors ----------
    @classmethod
    def from_arrays(cls, n: int, position: Sequence[float], velocity: Sequence[float],
                    f: Objective, direction: Direction) -> "ParticleSwarm":
        """Build a swarm from explicit positions and velocities of length `n`."""
        _require_particles(n)
        x = np.array(position, dtype=float).reshape(-1)
        v = np.array(velocity, dtype=float).reshape(-1)
        if x.size != n:
            raise DimensionMismatch("position", n, x.size)
        if v.size != n:
            raise DimensionMismatch("velocity", n, v.size)
        return cls._seal(x, v, f, direction)

    @classmethod
    def random(cls, n: int, f: Objective, direction: Direction,
               rng: RandomSource) -> "ParticleSwarm":
        """Draw position[i] then velocity[i] uniformly from [0, 1) for each particle."""
        _require_particles(n)
        span = INIT_HIGH - INIT_LOW
        x = np.empty(n, dtype=float)
        v = np.empty(n, dtype=float)
        for i in range(n):
            x[i] = INIT_LOW + span * rng.random()
            v[i] = INIT_LOW + span * rng.random()
        return cls._seal(x, v, f, direction)

    @classmethod
    def _seal(cls, x: np.ndarray, v: np.ndarray, f: Objective,
              direction: Direction) -> "ParticleSwarm":
        P = x.copy()
        pbest = evaluate(f, P)
        swarm = cls(x, v, P, pbest)
        swarm.refresh_global_best(direction)
        return swarm

    # ---------- Queries ----------
    def refresh_global_best(self, direction: Direction) -> float:
        """Rescan all personal bests and store the best one as `global_best`."""
        g_idx = direction.best_index(self.personal_best_values)
        self.global_best = float(self.personal_best[g_idx])
        return self.global_best

    def copy(self) -> "ParticleSwarm":
        return ParticleSwarm(
            self.position.copy(),
            self.velocity.copy(),
            self.personal_best.copy(),
            self.personal_best_values.copy(),
            self.global_best,
        )


def _require_particles(n: int) -> None:
    if int(n) != n:
        raise TypeError(f"n must be an integer, got {n!r}.")
    if n <= 0:
        raise EmptySwarm(n)
