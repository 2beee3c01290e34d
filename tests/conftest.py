import pytest


class StubRng:
    """Deterministic stand-in for random.Random used by the move selector."""

    def __init__(self, roll=1.0, index=0):
        self.roll = roll
        self.index = index
        self.ranges = []

    def random(self):
        return self.roll

    def randrange(self, n):
        self.ranges.append(n)
        return min(self.index, n - 1)

    def choice(self, seq):
        return seq[min(self.index, len(seq) - 1)]


@pytest.fixture
def no_blunder():
    """random() == 1.0 never falls below any blunder probability."""
    return StubRng(roll=1.0)


@pytest.fixture
def always_blunder():
    return StubRng(roll=0.0)
