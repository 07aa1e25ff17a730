import itertools

import pytest

from scalar_pso.functions import shifted_square


class FixedRandom:
    """Random source that replays a fixed sequence of draws (cycling)."""

    def __init__(self, values):
        self._it = itertools.cycle(values)
        self.calls = 0

    def random(self):
        self.calls += 1
        return next(self._it)


@pytest.fixture
def f():
    return shifted_square


@pytest.fixture
def zeros():
    return FixedRandom([0.0])
