"""Estimation of data distribution parameters."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Any


class DataDistribution:
    """Estimate distribution parameters of a collection of values.

    The values are copied at construction, so later changes to the input
    are not reflected. Order statistics sort the copy lazily. A complete
    sort can be requested up front with :meth:`sort`.
    """

    def __init__(self, values: Iterable[Any]) -> None:
        self._values = list(values)
        self._sorted = all(a <= b for a, b in zip(self._values, self._values[1:]))
        self._sum: Any = 0
        self._sum2: Any = 0
        for v in self._values:
            self._sum += v
            self._sum2 += v * v

    def __len__(self) -> int:
        return len(self._values)

    def size(self) -> int:
        """Number of values."""
        return len(self._values)

    def min(self) -> Any:
        """Smallest value."""
        return self.nth(0)

    def max(self) -> Any:
        """Largest value."""
        return self.nth(self.size() - 1)

    def sum(self) -> Any:
        """Sum of all values."""
        return self._sum

    def nth(self, n: int) -> Any:
        """The n-th smallest value (0-based)."""
        if not 0 <= n < len(self._values):
            raise IndexError(f"rank {n} out of range for {len(self._values)} values")
        self.sort()
        return self._values[n]

    def mean(self) -> float:
        """Arithmetic mean."""
        return self._sum / self.size()

    def median(self) -> float:
        """Median, i.e. the 0.5-quantile."""
        return self.quantile(0.5)

    def variance(self, unbiased: bool = True) -> float:
        """Variance, divided by ``size() - 1`` if unbiased, ``size()`` otherwise."""
        size = self.size()
        return float(self._sum2 - self._sum * self._sum / size) / (size - int(unbiased))

    def stdev(self, unbiased: bool = True) -> float:
        """Standard deviation."""
        return math.sqrt(self.variance(unbiased))

    def mad(self) -> float:
        """Median absolute deviation."""
        m = self.median()
        return DataDistribution(abs(v - m) for v in self._values).median()

    def quantile(self, q: float) -> Any:
        """The q-th quantile, with interpolation between neighbouring ranks.

        ``quantile(0)`` is ``min()``, ``quantile(1)`` is ``max()`` and
        ``quantile(0.5)`` is ``median()``.
        """
        if not 0 <= q <= 1:
            raise ValueError(f"quantile order must lie in [0, 1], got {q}")
        n = q * (self.size() - 1)
        f = int(n)
        if n == f:
            return self.nth(f)
        d = n - f
        return self.nth(f) * d + self.nth(f + 1) * (1.0 - d)

    def histogram(self, bins: Sequence[Any]) -> list[int]:
        """Count values in each bin.

        Bins are half-open intervals ``[bins[i], bins[i + 1])``, except that
        values equal to the last bound fall into the last bin.
        """
        bounds = list(bins)
        if len(bounds) < 2:
            raise ValueError("at least two bin bounds are required")
        self.sort()
        counts = [0] * (len(bounds) - 1)
        values = iter(self._values)
        current = next(values, None)
        while current is not None and current < bounds[0]:
            current = next(values, None)
        for i, sup in enumerate(bounds[1:]):
            while current is not None and current < sup:
                counts[i] += 1
                current = next(values, None)
        while current is not None and current == bounds[-1]:
            counts[-1] += 1
            current = next(values, None)
        return counts

    def sort(self) -> None:
        """Sort the values once for all."""
        if not self._sorted:
            self._values.sort()
            self._sorted = True