from __future__ import annotations

import argparse
import sys
from typing import List, Optional

import numpy as np

from .config import Direction, PSOParams
from .constants import DEFAULT_COGNITIVE, DEFAULT_SOCIAL, DEFAULT_THRESHOLD, DEFAULT_MAX_ITERS, SEED_LIMIT
from .core import pso_run
from .errors import (
    InvalidArgument,
    InvalidIterations,
    InvalidParticleNumber,
    InvalidSeed,
    InvalidThreshold,
    MissingArgument,
    NonConvergence,
    SwarmError,
)
from .functions import DEFAULT_FUNCTION, FUNCTIONS
from .swarm import ParticleSwarm

# ---------- Argument converters ----------
def _particle_count(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise InvalidParticleNumber(value) from None
    if n <= 0:
        raise InvalidParticleNumber(value)
    return n

def _iterations(value: str) -> int:
    try:
        i = int(value)
    except ValueError:
        raise InvalidIterations(value) from None
    if i < 0:
        raise InvalidIterations(value)
    return i

def _threshold(value: str) -> float:
    try:
        e = float(value)
    except ValueError:
        raise InvalidThreshold(value) from None
    if not np.isfinite(e) or e <= 0:
        raise InvalidThreshold(value)
    return e

def _seed(value: str) -> int:
    try:
        s = int(value)
    except ValueError:
        raise InvalidSeed(value) from None
    if not 0 <= s < SEED_LIMIT:
        raise InvalidSeed(value)
    return s

def _coefficient(value: str) -> float:
    try:
        c = float(value)
    except ValueError:
        raise InvalidArgument(value) from None
    if not np.isfinite(c) or c < 0:
        raise InvalidArgument(value)
    return c

def _reals(value: str) -> List[float]:
    """Parse 'x1,x2,...,xn' into floats."""
    out = []
    for part in value.split(","):
        try:
            out.append(float(part))
        except ValueError:
            raise InvalidArgument(part) from None
    return out

# ---------- CLI ----------
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="scalar-pso",
        description="Particle Swarm Optimization of a scalar objective.",
    )
    ap.add_argument("-n", dest="n", type=_particle_count, default=None,
                    help="Number of particles (required)")

    stop = ap.add_mutually_exclusive_group()
    stop.add_argument("-i", dest="iters", type=_iterations, default=None,
                      help="Number of iterations (uses error threshold if not provided)")
    stop.add_argument("-e", dest="threshold", type=_threshold, default=DEFAULT_THRESHOLD,
                      help=f"Error threshold (default: {DEFAULT_THRESHOLD})")
    ap.add_argument("--max-iters", dest="max_iters", type=_iterations, default=None,
                    help=f"Iteration cap for threshold mode, not allowed with -i (default: {DEFAULT_MAX_ITERS})")

    ap.add_argument("-v", "--verbose", action="store_true", help="Print the swarm after every iteration")
    ap.add_argument("--seed", type=_seed, default=None,
                    help="Use a fixed seed for random number generation")
    ap.add_argument("--init", type=_reals, default=None, metavar="X1,X2,...,XN",
                    help="Initial positions of particles")
    ap.add_argument("--vinit", type=_reals, default=None, metavar="V1,V2,...,VN",
                    help="Initial velocities of particles (default: zeros)")

    # Optional overrides of the demo setup
    ap.add_argument("--function", choices=sorted(FUNCTIONS), default=DEFAULT_FUNCTION,
                    help=f"Objective to optimize (default: {DEFAULT_FUNCTION})")
    ap.add_argument("--maximize", action="store_true",
                    help="Search for the maximum instead of the minimum (needs -i)")
    ap.add_argument("--c1", type=_coefficient, default=DEFAULT_COGNITIVE,
                    help=f"Cognitive coefficient (default: {DEFAULT_COGNITIVE})")
    ap.add_argument("--c2", type=_coefficient, default=DEFAULT_SOCIAL,
                    help=f"Social coefficient (default: {DEFAULT_SOCIAL})")
    return ap

def parse_args(argv: Optional[List[str]] = None, parser: Optional[argparse.ArgumentParser] = None):
    ap = parser or build_parser()
    args = ap.parse_args(argv)
    if args.n is None:
        ap.error(str(MissingArgument("-n")))
    if args.iters is not None and args.max_iters is not None:
        ap.error("--max-iters only applies to threshold mode and is not allowed with -i.")
    if args.vinit is not None and args.init is None:
        ap.error(str(MissingArgument("--init")))
    if args.maximize and args.iters is None:
        ap.error("--maximize needs a fixed iteration count (-i); "
                 "threshold termination is only defined for minimization.")
    return args

def make_params(args) -> PSOParams:
    return PSOParams(
        swarm_size=args.n,
        iters=args.iters,
        threshold=args.threshold,
        max_iters=DEFAULT_MAX_ITERS if args.max_iters is None else args.max_iters,
        c1=args.c1,
        c2=args.c2,
        seed=args.seed,
        direction=Direction.MAXIMIZE if args.maximize else Direction.MINIMIZE,
    )

def make_rng(seed: Optional[int]) -> np.random.Generator:
    if seed is None:
        print("Using random seed")
        return np.random.default_rng()
    print(f"Using seed {seed}")
    return np.random.default_rng(seed)

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parse_args(argv, parser)
    params = make_params(args)
    rng = make_rng(params.seed)

    meta = FUNCTIONS[args.function]
    f = meta["f"]
    print("Particle Swarm Optimization Demo")
    print(f"Function to optimize: {meta['label']}")

    def show_initial(swarm: ParticleSwarm) -> None:
        print(f"\nInitialized {swarm.n} particles:")
        if args.verbose:
            print(f"{swarm}\n")

    def show_iteration(t: int, swarm: ParticleSwarm) -> None:
        if args.verbose:
            print(f"Iteration {t}")
            print(f"{swarm}\n")

    try:
        res = pso_run(f, params, rng, init=args.init, vinit=args.vinit,
                      on_start=show_initial, on_iteration=show_iteration)
    except (SwarmError, NonConvergence) as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        return 1

    if params.iters is None:
        print(f"Finished in {res['iters_run']} iterations")
    print(f"Best value of x: {res['best_x']}")
    print(f"Best value of y: {res['best_f']}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
