"""
Noise sources for midpoint displacement.

A noise source produces the random displacement added at each recursion
depth. Amplitude decay is the source's policy; the generator only passes
the iteration number along.
"""

from typing import Callable, Optional, Protocol, Union, runtime_checkable

import numpy as np


@runtime_checkable
class NoiseSource(Protocol):
    """Displacement policy: sample(min, max, iteration) -> value."""

    def sample(self, min_val: float, max_val: float, iteration: int) -> float:
        ...


class DecayingUniformNoise:
    """
    Uniform noise whose amplitude shrinks geometrically with depth.

    Returns a value uniformly distributed in
    [min * decay^-iteration, max * decay^-iteration). With the default
    decay of 2 each subdivision pass halves the displacement.

    The random state is owned by the instance, so the same seed always
    yields the same sequence of samples.
    """

    def __init__(self, seed: Optional[int] = None, decay: float = 2.0):
        if decay <= 0:
            raise ValueError(f"decay must be positive, got {decay}")
        self.seed = seed
        self.decay = decay
        self._rng = np.random.default_rng(seed)

    def sample(self, min_val: float, max_val: float, iteration: int) -> float:
        scale = self.decay ** -iteration
        t = self._rng.random()
        low = min_val * scale
        high = max_val * scale
        return float(low + (high - low) * t)

    def __repr__(self) -> str:
        return f"DecayingUniformNoise(seed={self.seed!r}, decay={self.decay})"


class ConstantNoise:
    """Noise source returning the same value at every depth."""

    def __init__(self, value: float = 0.0):
        self.value = value

    def sample(self, min_val: float, max_val: float, iteration: int) -> float:
        return self.value


class FunctionNoise:
    """Adapter for a bare (min, max, iteration) -> value callable."""

    def __init__(self, fn: Callable[[float, float, int], float]):
        self.fn = fn

    def sample(self, min_val: float, max_val: float, iteration: int) -> float:
        return float(self.fn(min_val, max_val, iteration))


NoiseLike = Union[NoiseSource, Callable[[float, float, int], float]]


def as_noise_source(noise: NoiseLike) -> NoiseSource:
    """Wrap a plain callable as a NoiseSource; pass sources through."""
    if isinstance(noise, NoiseSource):
        return noise
    if callable(noise):
        return FunctionNoise(noise)
    raise TypeError(f"Expected a NoiseSource or callable, got {type(noise).__name__}")
