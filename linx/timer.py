"""A timer which records split times and the total elapsed time."""

from __future__ import annotations

import enum
import time
from typing import Any

from linx.distribution import DataDistribution


class TimeUnit(enum.Enum):
    """Time units, valued by their number of nanoseconds."""

    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000


class Timer:
    """A timer with split times and elapsed time recording.

    Each start/stop cycle records a split and increments the total elapsed
    time. Splits can also be taken without stopping. The offset is the
    initial elapsed time and does not affect the splits. Durations are
    integers in the timer's unit, truncated.
    """

    def __init__(self, unit: TimeUnit = TimeUnit.MILLISECONDS, offset: int = 0) -> None:
        self._unit = unit
        self._tic = 0
        self._toc = 0
        self._running = False
        self._splits: list[int] = []
        self._elapsed = offset
        self.reset(offset)

    @property
    def unit(self) -> TimeUnit:
        """The time unit."""
        return self._unit

    def reset(self, offset: int = 0) -> None:
        """Forget the splits and set the elapsed time to ``offset``."""
        self._toc = self._tic
        self._running = False
        self._splits.clear()
        self._elapsed = offset

    def start(self) -> None:
        """Start or restart the timer."""
        self._tic = time.perf_counter_ns()
        self._running = True

    def _record(self) -> int:
        self._toc = time.perf_counter_ns()
        increment = (self._toc - self._tic) // self._unit.value
        self._elapsed += increment
        self._splits.append(increment)
        return increment

    def stop(self) -> int:
        """Stop the timer and return the last split time."""
        increment = self._record()
        self._running = False
        return increment

    def split(self) -> int:
        """Record and return a split time without stopping the timer."""
        increment = self._record()
        self._tic = self._toc
        return increment

    def is_running(self) -> bool:
        """Whether the timer was started and not stopped."""
        return self._running

    def __getitem__(self, index: int) -> int:
        return self._splits[index]

    def __len__(self) -> int:
        return len(self._splits)

    def front(self) -> int:
        """The first split time."""
        return self._splits[0]

    def back(self) -> int:
        """The last split time."""
        return self._splits[-1]

    def total(self) -> int:
        """The total elapsed time, including the offset."""
        return self._elapsed

    def splits(self) -> list[float]:
        """The split times as floats."""
        return [float(s) for s in self._splits]

    def min(self) -> float:
        """The minimum split time."""
        return float(min(self._splits))

    def max(self) -> float:
        """The maximum split time."""
        return float(max(self._splits))

    def minmax(self) -> tuple[int, int]:
        """The minimum and maximum split times."""
        return min(self._splits), max(self._splits)

    def distribution(self) -> DataDistribution:
        """The distribution of the split times."""
        return DataDistribution(self.splits())

    def __enter__(self) -> Timer:
        self.start()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.stop()