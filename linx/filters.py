"""Extrapolation of rasters beyond their domain, and sliding-window filters.

Rasters are numpy arrays indexed by position tuples, whose first axis is
the fastest-varying one in the data ordering. Filter outputs are arrays
laid out the same way.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from linx.patch import Patch
from linx.regions import Box, Grid, Line, Position


def _domain_of(raster: np.ndarray) -> Box:
    return Box.from_shape((0,) * raster.ndim, raster.shape)


def _to_array(values: list[Any], shape: Sequence[int], dtype: Any) -> np.ndarray:
    """Lay out values given in region order (first axis fastest) as an array."""
    shape = tuple(max(0, int(s)) for s in shape)
    if not values:
        return np.zeros(shape, dtype=dtype)
    return np.array(values).reshape(shape, order="F")


def _region_shape(region: Any) -> tuple[int, ...]:
    if isinstance(region, (Box, Grid, Line)):
        return tuple(max(0, s) for s in region.shape())
    return (len(region),)


def _extend(box: Box, dimension: int) -> Box:
    """Pad a window box with zeros up to a given dimension."""
    missing = dimension - box.dimension
    if missing < 0:
        raise ValueError(f"window of dimension {box.dimension} exceeds data dimension {dimension}")
    return Box(box.front + (0,) * missing, box.back + (0,) * missing)


def _shift(position: Position, offset: Position) -> Position:
    return tuple(p + o for p, o in zip(position, offset))


def _checked_getter(raster: np.ndarray) -> Callable[[Position], Any]:
    domain = _domain_of(raster)

    def get(position: Position) -> Any:
        if position not in domain:
            raise IndexError(f"position {position} lies outside the raster domain; extrapolate it")
        return raster[position]

    return get


def _getter(parent: Any) -> Callable[[Position], Any]:
    if isinstance(parent, np.ndarray):
        return _checked_getter(parent)
    return parent.__getitem__


def _raw_raster(parent: Any) -> np.ndarray:
    if isinstance(parent, Extrapolation):
        return parent.raster()
    if isinstance(parent, np.ndarray):
        return parent
    raise TypeError(f"unsupported parent type {type(parent).__name__}")


@dataclass(frozen=True)
class Nearest:
    """Extrapolate with the value of the nearest pixel inside the domain."""

    def at(self, raster: np.ndarray, position: Sequence[int]) -> Any:
        clamped = tuple(min(max(int(c), 0), s - 1) for c, s in zip(position, raster.shape))
        return raster[clamped]


@dataclass(frozen=True)
class Constant:
    """Extrapolate with a constant value."""

    value: Any

    def at(self, raster: np.ndarray, position: Sequence[int]) -> Any:
        position = tuple(int(c) for c in position)
        if all(0 <= c < s for c, s in zip(position, raster.shape)):
            return raster[position]
        return self.value


@dataclass(frozen=True)
class Periodic:
    """Extrapolate by repeating the raster periodically."""

    def at(self, raster: np.ndarray, position: Sequence[int]) -> Any:
        return raster[tuple(int(c) % s for c, s in zip(position, raster.shape))]


class Extrapolation:
    """A raster decorator whose subscript accepts positions outside the raster domain."""

    def __init__(self, raster: np.ndarray, method: Any = None) -> None:
        self._raster = raster
        self._method = Nearest() if method is None else method

    def raster(self) -> np.ndarray:
        """The decorated raster."""
        return self._raster

    def method(self) -> Any:
        """The extrapolation method."""
        return self._method

    @property
    def dimension(self) -> int:
        """The number of axes."""
        return self._raster.ndim

    def shape(self) -> tuple[int, ...]:
        """The raster shape."""
        return tuple(self._raster.shape)

    def domain(self) -> Box:
        """The raster domain."""
        return _domain_of(self._raster)

    def __getitem__(self, position: Sequence[int]) -> Any:
        return self._method.at(self._raster, tuple(position))

    def patch(self, region: Any) -> Patch:
        """A view of possibly extrapolated values over a region, position or positions."""
        return Patch(self, region)

    def copy(self, box: Box) -> np.ndarray:
        """A copy of the possibly extrapolated values inside a box."""
        return _to_array([self[p] for p in box], box.shape(), self._raster.dtype)

    def __repr__(self) -> str:
        return f"Extrapolation(shape={self.shape()}, method={self._method!r})"


def extrapolation(raster: np.ndarray, method: Any = None) -> Extrapolation:
    """Make an extrapolator.

    ``method`` is a method instance, a method class, or a plain value which
    means constant extrapolation with that value. It defaults to nearest.
    """
    if method is None:
        return Extrapolation(raster, Nearest())
    if isinstance(method, type):
        return Extrapolation(raster, method())
    if hasattr(method, "at"):
        return Extrapolation(raster, method)
    return Extrapolation(raster, Constant(method))


def dont_extrapolate(data: Any) -> Any:
    """Strip extrapolation from an extrapolator or a patch of an extrapolator."""
    if isinstance(data, Extrapolation):
        return data.raster()
    if isinstance(data, Patch) and isinstance(data.parent(), Extrapolation):
        return Patch(data.parent().raster(), data.domain())
    return data


class SimpleFilter:
    """A filter which applies a kernel to the values of a sliding window.

    The kernel receives the window values in window order (first axis
    fastest) and returns the output value. The window is a box of offsets
    relative to the filtered position.
    """

    def __init__(self, kernel: Callable[[list[Any]], Any], window: Box) -> None:
        if not isinstance(window, Box):
            raise TypeError("the window must be a Box")
        self._kernel = kernel
        self._window = window

    def window(self) -> Box:
        """The window of offsets."""
        return self._window

    def kernel(self) -> Callable[[list[Any]], Any]:
        """The kernel."""
        return self._kernel

    def _evaluate(self, get: Callable[[Position], Any], region: Any, dimension: int, dtype: Any) -> np.ndarray:
        offsets = list(_extend(self._window, dimension))
        values = [self._kernel([get(_shift(p, w)) for w in offsets]) for p in region]
        return _to_array(values, _region_shape(region), dtype)

    def __call__(self, data: Any) -> np.ndarray:
        """Filter data.

        A raw raster is cropped so that no extrapolation is needed; an
        extrapolator yields an output of the raster shape; a patch yields
        an output of the region shape.
        """
        if isinstance(data, np.ndarray):
            region = _domain_of(data).shrink(_extend(self._window, data.ndim))
            return self._evaluate(data.__getitem__, region, data.ndim, data.dtype)
        if isinstance(data, Extrapolation):
            return self._evaluate(data.__getitem__, data.domain(), data.dimension, data.raster().dtype)
        if isinstance(data, Patch):
            raster = _raw_raster(data.parent())
            return self._evaluate(_getter(data.parent()), data.domain(), raster.ndim, raster.dtype)
        raise TypeError(f"cannot filter {type(data).__name__}")

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, (SimpleFilter, FilterSeq)):
            return FilterSeq(self, other)
        return self(other)

    def __repr__(self) -> str:
        return f"SimpleFilter({self._kernel!r}, {self._window!r})"


class FilterSeq:
    """A sequence of filters, applied from the first one to the last one."""

    def __init__(self, *args: Any) -> None:
        filters: list[SimpleFilter] = []
        for f in args:
            if isinstance(f, FilterSeq):
                filters.extend(f)
            elif isinstance(f, SimpleFilter):
                filters.append(f)
            else:
                raise TypeError(f"not a filter: {type(f).__name__}")
        if not filters:
            raise ValueError("a filter sequence needs at least one filter")
        self._filters = tuple(filters)

    def __getitem__(self, index: int) -> SimpleFilter:
        return self._filters[index]

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[SimpleFilter]:
        return iter(self._filters)

    def window(self) -> Box:
        """The window of the composed kernel."""
        dimension = max(f.window().dimension for f in self._filters)
        out = Box((0,) * dimension, (0,) * dimension)
        for f in self._filters:
            out = out.grow(_extend(f.window(), dimension))
        return out

    def _apply_patch(self, patch: Patch) -> np.ndarray:
        parent = patch.parent()
        raster = _raw_raster(parent)
        dimension = raster.ndim
        box = patch.box()
        domain0 = box.grow(_extend(self.window(), dimension))
        get0 = _getter(parent)
        mid = _to_array([get0(p) for p in domain0], domain0.shape(), raster.dtype)
        for f in self._filters[:-1]:
            mid = f(mid)
        last = self._filters[-1]
        origin = box.grow(_extend(last.window(), dimension)).front

        def get(position: Position) -> Any:
            return mid[tuple(p - o for p, o in zip(position, origin))]

        return last._evaluate(get, patch.domain(), dimension, raster.dtype)

    def __call__(self, data: Any) -> np.ndarray:
        """Filter data, with the same output conventions as :class:`SimpleFilter`."""
        if isinstance(data, np.ndarray):
            out = data
            for f in self._filters:
                out = f(out)
            return out
        if isinstance(data, Extrapolation):
            data = data.patch(data.domain())
        if isinstance(data, Patch):
            return self._apply_patch(data)
        raise TypeError(f"cannot filter {type(data).__name__}")

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, (SimpleFilter, FilterSeq)):
            return FilterSeq(self, other)
        return self(other)

    def __rmul__(self, other: Any) -> Any:
        if isinstance(other, (SimpleFilter, FilterSeq)):
            return FilterSeq(other, self)
        return NotImplemented

    def __repr__(self) -> str:
        return f"FilterSeq{self._filters!r}"