"""Random value and random noise generators.

Each generator is called without argument to draw a random value, or with
an input value to apply noise to it.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from typing import Any

import numpy as np

_Draw = Callable[[np.random.Generator], Any]


def _engine(seed: int | None) -> np.random.Generator:
    """Mersenne-Twister engine; a ``None`` seed picks fresh entropy."""
    return np.random.Generator(np.random.MT19937(seed))


def _is_integral(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _split_complex(make: Callable[..., _Draw], *args: Any) -> _Draw:
    """Build a draw, using independent real and imaginary draws for complex parameters."""
    if any(isinstance(a, (complex, np.complexfloating)) for a in args):
        real = make(*(complex(a).real for a in args))
        imag = make(*(complex(a).imag for a in args))
        return lambda rng: complex(real(rng), imag(rng))
    return make(*args)


def _uniform(low: Any, high: Any) -> _Draw:
    if high < low:
        raise ValueError(f"empty uniform range [{low}, {high}]")
    if _is_integral(low) and _is_integral(high):
        return lambda rng: int(rng.integers(low, high, endpoint=True))
    return lambda rng: float(rng.uniform(low, high))


def _gaussian(mean: Any, stdev: Any) -> _Draw:
    if stdev < 0:
        raise ValueError(f"standard deviation must be non-negative, got {stdev}")
    if _is_integral(mean):
        return lambda rng: int(rng.normal(mean, stdev))
    return lambda rng: float(rng.normal(mean, stdev))


def _poisson(mean: Any) -> _Draw:
    if mean < 0:
        raise ValueError(f"Poisson mean must be non-negative, got {mean}")
    if _is_integral(mean):
        return lambda rng: int(rng.poisson(mean))
    return lambda rng: float(rng.poisson(mean))


class _MinStd:
    """Minimal standard linear congruential generator (multiplier 48271)."""

    _MULTIPLIER = 48271
    _MODULUS = 2147483647

    def __init__(self, seed: int) -> None:
        state = seed % self._MODULUS
        self._state = state if state else 1

    def __call__(self) -> int:
        self._state = self._state * self._MULTIPLIER % self._MODULUS
        return self._state


class UniformNoise:
    """Uniform values, drawn as integers when both bounds are integers."""

    def __init__(self, low: Any = 0.0, high: Any = 1.0, seed: int | None = None) -> None:
        self._rng = _engine(seed)
        self._draw = _split_complex(_uniform, low, high)

    def __call__(self, value: Any = None) -> Any:
        """Draw a value, or add a draw to ``value``."""
        sample = self._draw(self._rng)
        return sample if value is None else value + sample


class GaussianNoise:
    """Gaussian values, truncated to integers when the mean is an integer."""

    def __init__(self, mean: Any = 0.0, stdev: Any = 1.0, seed: int | None = None) -> None:
        self._rng = _engine(seed)
        self._draw = _split_complex(_gaussian, mean, stdev)

    def __call__(self, value: Any = None) -> Any:
        """Draw a value, or add a draw to ``value``."""
        sample = self._draw(self._rng)
        return sample if value is None else value + sample


class PoissonNoise:
    """Poisson values and shot noise.

    Drawing one value may consume a number of engine draws which depends on
    the mean, so shot noise is not reproducible position by position; see
    :class:`StablePoissonNoise`.
    """

    def __init__(self, mean: Any = 0, seed: int | None = None) -> None:
        self._rng = _engine(seed)
        self._draw = _split_complex(_poisson, mean)

    def __call__(self, value: Any = None) -> Any:
        """Draw a value, or a Poisson value of mean ``value``."""
        if value is None:
            return self._draw(self._rng)
        return _split_complex(_poisson, value)(self._rng)


class StablePoissonNoise:
    """Poisson shot noise which is robust to local changes.

    The engine is reseeded before each noise draw, so that two inputs which
    agree at a given call index receive the same noise there. The seed is
    fixed (0 by default) because the point is reproducibility.
    """

    def __init__(self, mean: Any = 0, seed: int = 0) -> None:
        self._rng = _engine(seed)
        self._draw = _split_complex(_poisson, mean)
        self._seeder = _MinStd(seed)

    def __call__(self, value: Any = None) -> Any:
        """Draw a value, or a Poisson value of mean ``value``."""
        if value is None:
            return self._draw(self._rng)
        return PoissonNoise(value, self._seeder())()


class ImpulseNoise:
    """Impulse noise: discrete values drawn with given probabilities.

    If the probabilities sum to less than 1, the input is kept with the
    remaining probability. If they sum to more than 1, they are normalized.
    """

    def __init__(self, values_probabilities: Mapping[Any, float], seed: int | None = None) -> None:
        items = sorted(values_probabilities.items())
        if not items:
            raise ValueError("at least one impulse value is required")
        if any(p < 0 for _, p in items):
            raise ValueError("probabilities must be non-negative")
        self._values = [v for v, _ in items]
        weights = [float(p) for _, p in items]
        null_probability = 1.0
        for w in weights:
            null_probability -= w
        if null_probability > sys.float_info.epsilon * len(weights):
            weights.append(null_probability)
        norm = sum(weights)
        if norm <= 0:
            raise ValueError("probabilities must not all be zero")
        self._probabilities = [w / norm for w in weights]
        self._rng = _engine(seed)

    @classmethod
    def single(cls, value: Any, probability: float, seed: int | None = None) -> ImpulseNoise:
        """Make a generator of a single impulse value."""
        return cls({value: probability}, seed)

    @classmethod
    def salt_and_pepper(
        cls,
        salt_probability: float,
        pepper_probability: float,
        salt_value: Any = sys.float_info.max,
        pepper_value: Any = -sys.float_info.max,
        seed: int | None = None,
    ) -> ImpulseNoise:
        """Make a salt-and-pepper noise generator."""
        return cls({salt_value: salt_probability, pepper_value: pepper_probability}, seed)

    def __call__(self, value: Any = 0) -> Any:
        """Draw an impulse value, or return ``value`` when no impulse occurs."""
        index = int(self._rng.choice(len(self._probabilities), p=self._probabilities))
        return self._values[index] if index < len(self._values) else value