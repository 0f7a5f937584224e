"""Element-wise operations on mutable containers (lists or numpy arrays)."""

from __future__ import annotations

import itertools
import math
from collections.abc import Callable, Iterable, Iterator
from typing import Any

import numpy as np

from linx.distribution import DataDistribution


def _elements(data: Any) -> Iterator[Any]:
    if isinstance(data, np.ndarray):
        return iter(data.flat)
    return iter(data)


def _size(data: Any) -> int:
    if isinstance(data, np.ndarray):
        return int(data.size)
    return len(data)


def _store(data: Any, values: Iterable[Any]) -> None:
    values = list(values)
    if len(values) != _size(data):
        raise ValueError(f"expected {_size(data)} values, got {len(values)}")
    if isinstance(data, np.ndarray):
        data.flat[:] = values
    else:
        data[:] = values


def fill(data: Any, value: Any) -> Any:
    """Set every element to ``value``."""
    _store(data, itertools.repeat(value, _size(data)))
    return data


def range_fill(data: Any, start: Any = 0, step: Any = 1) -> Any:
    """Fill with values starting at ``start``, each exactly ``step`` above the previous one."""
    values = []
    v = start
    for _ in range(_size(data)):
        values.append(v)
        v += step
    _store(data, values)
    return data


def linspace_fill(data: Any, start: Any = 0, stop: Any = 1) -> Any:
    """Fill with evenly spaced values whose first and last are exactly ``start`` and ``stop``."""
    size = _size(data)
    if size == 0:
        raise ValueError("cannot fill an empty container")
    if size == 1:
        _store(data, [stop])
        return data
    step = (stop - start) / (size - 1)
    _store(data, [start + step * i for i in range(size - 1)] + [stop])
    return data


def generate(data: Any, func: Callable[..., Any], *args: Any) -> Any:
    """Set each element to ``func`` applied to the matching elements of ``args``."""
    size = _size(data)
    if not args:
        _store(data, (func() for _ in range(size)))
        return data
    columns = [list(_elements(a)) for a in args]
    if any(len(c) < size for c in columns):
        raise ValueError("argument containers are smaller than the output")
    _store(data, itertools.starmap(func, itertools.islice(zip(*columns), size)))
    return data


def apply(data: Any, func: Callable[..., Any], *args: Any) -> Any:
    """Replace each element by ``func`` of itself and the matching elements of ``args``."""
    return generate(data, func, list(_elements(data)), *args)


def reverse(data: Any) -> Any:
    """Reverse the order of the elements."""
    _store(data, reversed(list(_elements(data))))
    return data


def contains(data: Any, value: Any) -> bool:
    """Whether some element equals ``value``."""
    return any(e == value for e in _elements(data))


def contains_nan(data: Any) -> bool:
    """Whether some element is NaN."""
    return any(e != e for e in _elements(data))


def contains_only(data: Any, value: Any) -> bool:
    """Whether all elements equal ``value``; false for an empty container."""
    return _size(data) != 0 and all(e == value for e in _elements(data))


def minimum(data: Any) -> Any:
    """The first smallest element."""
    return min(_elements(data))


def maximum(data: Any) -> Any:
    """The first largest element."""
    return max(_elements(data))


def minmax(data: Any) -> tuple[Any, Any]:
    """The smallest and largest elements."""
    values = list(_elements(data))
    return min(values), max(values)


def total(data: Any, offset: float = 0.0) -> float:
    """Sum of the elements plus ``offset``, accumulated as a float."""
    return sum(_elements(data), float(offset))


def product(data: Any, factor: float = 1.0) -> float:
    """Product of the elements times ``factor``, accumulated as a float."""
    return math.prod(_elements(data), start=float(factor))


def mean(data: Any) -> float:
    """Arithmetic mean of the elements."""
    return total(data) / _size(data)


def distribution(data: Any) -> DataDistribution:
    """A :class:`DataDistribution` of the elements."""
    return DataDistribution(_elements(data))


def format_container(data: Any) -> str:
    """Bracketed representation, eliding the middle of containers longer than 7."""
    values = [str(e) for e in _elements(data)]
    if len(values) > 7:
        return "[" + ", ".join(values[:3]) + " ... " + ", ".join(values[-3:]) + "]"
    return "[" + ", ".join(values) + "]"