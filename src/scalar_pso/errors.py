"""Exceptions raised by the solver core and the command-line driver."""

from __future__ import annotations

import argparse


class SwarmError(ValueError):
    """Invalid swarm construction."""


class DimensionMismatch(SwarmError):
    def __init__(self, name: str, expected: int, got: int):
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(f"{name} has length {got}, expected {expected} (one entry per particle).")


class EmptySwarm(SwarmError):
    def __init__(self, n: int = 0):
        self.n = n
        super().__init__(f"A swarm needs at least one particle, got n={n}.")


class InvalidObjectiveValue(SwarmError):
    """The objective returned NaN, so particles cannot be ranked."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Objective value is NaN for particle {index}; cannot rank particles.")


class NonConvergence(RuntimeError):
    """Threshold mode hit its iteration cap without reaching the threshold."""

    def __init__(self, iterations: int, best: float, best_value: float, threshold: float):
        self.iterations = iterations
        self.best = best
        self.best_value = best_value
        self.threshold = threshold
        super().__init__(
            f"No convergence after {iterations} iterations: "
            f"f({best}) = {best_value} > {threshold}."
        )


# ---------- Command-line parse errors ----------
# Raised from argparse `type=` converters; argparse prints the message with usage
# and exits non-zero.

class ParseError(argparse.ArgumentTypeError):
    prefix = "Invalid argument"
    sep = ": "

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"{self.prefix}{self.sep}{text}")


class MissingArgument(ParseError):
    prefix = "Missing argument for"
    sep = " "


class InvalidParticleNumber(ParseError):
    prefix = "Invalid number of particles"


class InvalidIterations(ParseError):
    prefix = "Invalid number of iterations"


class InvalidThreshold(ParseError):
    prefix = "Invalid error threshold"


class InvalidSeed(ParseError):
    prefix = "Invalid seed"


class InvalidArgument(ParseError):
    prefix = "Unexpected argument"
