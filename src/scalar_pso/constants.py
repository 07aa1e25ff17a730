"""Defaults and constants for the scalar PSO solver."""


# ============= Update coefficients =============
# COGNITIVE: pull toward the particle's own best.
# SOCIAL: pull toward the swarm's best.
DEFAULT_COGNITIVE = 0.5
DEFAULT_SOCIAL = 0.5


# ============= Termination =============
# DEFAULT_THRESHOLD: stop once f(global_best) <= threshold (minimization only).
# DEFAULT_MAX_ITERS: hard cap for threshold mode; hitting it raises NonConvergence.
DEFAULT_THRESHOLD = 0.0001
DEFAULT_MAX_ITERS = 100_000


# ============= Random initialization =============
# Random swarms draw positions and velocities uniformly from [INIT_LOW, INIT_HIGH).
INIT_LOW = 0.0
INIT_HIGH = 1.0


# Largest accepted --seed (exclusive); matches an unsigned 64-bit integer.
SEED_LIMIT = 2 ** 64
