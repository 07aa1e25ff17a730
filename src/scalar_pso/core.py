from __future__ import annotations

import math
from typing import Callable, Optional, Sequence

import numpy as np

from .config import Direction, PSOParams, UpdateCoefficients
from .constants import DEFAULT_MAX_ITERS
from .errors import NonConvergence
from .swarm import Objective, ParticleSwarm, RandomSource, evaluate

IterationHook = Callable[[int, ParticleSwarm], None]


def _require_params(p: PSOParams):
    missing = [k for k, v in vars(p).items()
               if k in ("swarm_size", "threshold", "max_iters", "c1", "c2", "direction")
               and v is None]
    if missing:
        raise ValueError(f"PSOParams missing required fields: {missing}")


def step(
    swarm: ParticleSwarm,
    coefficients: UpdateCoefficients,
    f: Objective,
    direction: Direction,
    rng: RandomSource,
) -> None:
    """
    Advance the swarm by one iteration, in place.

    Sub-steps run in a fixed order since each reads what the previous wrote:
    move, update personal bests, rescan the global best, then update
    velocities from the new positions and the new global best.
    There is no inertia weight: the previous velocity is carried over unscaled.
    """
    X, V, P = swarm.position, swarm.velocity, swarm.personal_best

    # Move
    X += V

    # Personal bests (strict improvement only; ties keep the older best)
    fitness = evaluate(f, X)
    improved = direction.improves(fitness, swarm.personal_best_values)
    P[improved] = X[improved]
    swarm.personal_best_values[improved] = fitness[improved]

    # Global best: full rescan
    G = swarm.refresh_global_best(direction)

    # Velocity: r1 then r2 per particle, in index order
    r = np.empty((swarm.n, 2), dtype=float)
    for i in range(swarm.n):
        r[i, 0] = rng.random()
        r[i, 1] = rng.random()
    r1, r2 = r[:, 0], r[:, 1]
    V += coefficients.cognitive * r1 * (P - X) + coefficients.social * r2 * (G - X)


def run_iterations(
    swarm: ParticleSwarm,
    coefficients: UpdateCoefficients,
    f: Objective,
    direction: Direction,
    rng: RandomSource,
    iterations: int,
    on_iteration: Optional[IterationHook] = None,
) -> int:
    """Apply `step` exactly `iterations` times and return the count."""
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}.")
    for t in range(1, iterations + 1):
        step(swarm, coefficients, f, direction, rng)
        if on_iteration is not None:
            on_iteration(t, swarm)
    return iterations


def run_until_threshold(
    swarm: ParticleSwarm,
    coefficients: UpdateCoefficients,
    f: Objective,
    direction: Direction,
    rng: RandomSource,
    threshold: float,
    max_iters: int = DEFAULT_MAX_ITERS,
    on_iteration: Optional[IterationHook] = None,
) -> int:
    """
    Step while f(global_best) > threshold and return the number of steps taken.

    Only defined for minimization of objectives whose optimum is near 0.
    Raises NonConvergence once `max_iters` steps pass without reaching the threshold.
    """
    if direction is not Direction.MINIMIZE:
        raise ValueError("Threshold termination is only defined for minimization; "
                         "use a fixed iteration count with maximization.")
    if not math.isfinite(threshold) or threshold <= 0:
        raise ValueError(f"threshold must be a positive finite number, got {threshold!r}.")
    if max_iters < 0:
        raise ValueError(f"max_iters must be >= 0, got {max_iters}.")

    t = 0
    while f(swarm.global_best) > threshold:
        if t >= max_iters:
            raise NonConvergence(t, swarm.global_best, f(swarm.global_best), threshold)
        step(swarm, coefficients, f, direction, rng)
        t += 1
        if on_iteration is not None:
            on_iteration(t, swarm)
    return t


def pso_run(
    f: Objective,
    params: PSOParams,
    rng: RandomSource,
    init: Optional[Sequence[float]] = None,
    vinit: Optional[Sequence[float]] = None,
    on_start: Optional[Callable[[ParticleSwarm], None]] = None,
    on_iteration: Optional[IterationHook] = None,
):
    """Build a swarm, run it under the termination policy in `params`, return the best solution + convergence curve."""
    _require_params(params)

    n = params.swarm_size
    direction = params.direction

    # Init
    if vinit is not None and init is None:
        raise ValueError("vinit requires explicit initial positions (init).")
    if init is not None:
        if vinit is None:
            vinit = np.zeros(len(init), dtype=float)
        swarm = ParticleSwarm.from_arrays(n, init, vinit, f, direction)
    else:
        swarm = ParticleSwarm.random(n, f, direction, rng)
    if on_start is not None:
        on_start(swarm)

    g_hist = []

    def record(t: int, s: ParticleSwarm) -> None:
        g_hist.append(f(s.global_best))
        if on_iteration is not None:
            on_iteration(t, s)

    if params.iters is not None:
        iters_run = run_iterations(swarm, params.coefficients, f, direction, rng,
                                   params.iters, on_iteration=record)
        converged = None
    else:
        iters_run = run_until_threshold(swarm, params.coefficients, f, direction, rng,
                                        params.threshold, max_iters=params.max_iters,
                                        on_iteration=record)
        converged = True

    return {
        "swarm": swarm,
        "best_x": float(swarm.global_best),
        "best_f": float(f(swarm.global_best)),
        "gbest_curve": np.array(g_hist, dtype=float),
        "iters_run": int(iters_run),
        "converged": converged,
    }
