"""Shared fixtures for heightmap tests."""

import threading

import pytest

from py_heightmap.core import DecayingUniformNoise, HeightGrid


class BlockingNoise:
    """Noise source that parks the worker on its first sample until released."""

    def __init__(self, seed=0):
        self.inner = DecayingUniformNoise(seed)
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def sample(self, min_val, max_val, iteration):
        if self.calls == 0:
            self.started.set()
            self.release.wait(timeout=10)
        self.calls += 1
        return self.inner.sample(min_val, max_val, iteration)


class FailingNoise:
    """Noise source that raises after a number of samples."""

    def __init__(self, after=3):
        self.after = after
        self.calls = 0

    def sample(self, min_val, max_val, iteration):
        self.calls += 1
        if self.calls > self.after:
            raise RuntimeError("noise exhausted")
        return 0.5


@pytest.fixture
def small_grid():
    """Create a 17x17 grid."""
    return HeightGrid.from_resolution(4)


@pytest.fixture
def blocking_noise():
    noise = BlockingNoise(seed=11)
    yield noise
    noise.release.set()


@pytest.fixture
def failing_noise():
    return FailingNoise(after=3)
