"""Views of the values of a raster or extrapolator over a region.

A parent is anything indexed by integer positions: a numpy array, indexed
by position tuples, or an extrapolator which exposes ``domain()``. A region
is a :class:`~linx.regions.Box`, a :class:`~linx.regions.Grid`, a
:class:`~linx.regions.Line`, a sequence of positions, or a single position.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

import numpy as np

from linx.regions import Box, Grid, Line, Position


def _is_position(value: Any) -> bool:
    return isinstance(value, tuple) and all(
        isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in value
    )


def _normalize_region(region: Any) -> Any:
    if isinstance(region, (Box, Grid, Line)):
        return region
    if _is_position(region):
        position = tuple(int(v) for v in region)
        return Box(position, position)
    return tuple(tuple(int(c) for c in p) for p in region)


def _region_box(region: Any) -> Box:
    if isinstance(region, Box):
        return region
    if isinstance(region, (Grid, Line)):
        return region.box()
    if not region:
        raise ValueError("the bounding box of an empty sequence of positions is undefined")
    return Box(tuple(map(min, *region)), tuple(map(max, *region)))


def _parent_domain(parent: Any) -> Box:
    if isinstance(parent, np.ndarray):
        return Box.from_shape((0,) * parent.ndim, parent.shape)
    if isinstance(parent, Patch):
        return parent.box()
    domain = getattr(parent, "domain", None)
    if domain is None:
        raise TypeError(f"cannot get the domain of {type(parent).__name__}")
    return domain() if callable(domain) else domain


def _translate(region: Any, vector: Any) -> Any:
    if isinstance(region, (Box, Grid, Line)):
        return region + vector
    if isinstance(vector, int):
        return tuple(tuple(c + vector for c in p) for p in region)
    vector = tuple(vector)
    return tuple(tuple(c + v for c, v in zip(p, vector)) for p in region)


def _negate(vector: Any) -> Any:
    if isinstance(vector, int):
        return -vector
    return tuple(-v for v in vector)


def _crop_grid(grid: Grid, box: Box) -> Grid:
    front = []
    back = []
    for f, b, s, lo, hi in zip(grid.front(), grid.back(), grid.step, box.front, box.back):
        start = max(f, lo)
        front.append(f + -(-(start - f) // s) * s)
        back.append(min(b, hi))
    return Grid(Box(tuple(front), tuple(back)), grid.step)


def _crop(region: Any, box: Box) -> Any:
    if isinstance(region, (Box, Line)):
        return region & box
    if isinstance(region, Grid):
        return _crop_grid(region, box)
    return tuple(p for p in region if p in box)


class Patch:
    """A view of the values of a parent over a region.

    Iterating a patch yields the values at the region positions, in the
    region order. Writing through a patch writes into the parent.
    """

    def __init__(self, parent: Any, region: Any) -> None:
        self._parent = parent
        self._region = _normalize_region(region)

    def box(self) -> Box:
        """The bounding box of the region."""
        return _region_box(self._region)

    def __len__(self) -> int:
        return len(self._region)

    def domain(self) -> Any:
        """The region."""
        return self._region

    def parent(self) -> Any:
        """The parent raster or extrapolator."""
        return self._parent

    def _locate(self, index: Any) -> Position:
        region = self._region
        if isinstance(region, Box):
            return tuple(f + i for f, i in zip(region.front, index))
        if isinstance(region, Grid):
            return tuple(f + i * s for f, i, s in zip(region.front(), index, region.step))
        return region[index]

    def __getitem__(self, index: Any) -> Any:
        """The value at a position relative to the region.

        Boxes and grids take a relative position (in grid steps for grids),
        lines and sequences take an integer index.
        """
        return self._parent[self._locate(index)]

    def __setitem__(self, index: Any, value: Any) -> None:
        self._parent[self._locate(index)] = value

    def __iter__(self) -> Iterator[Any]:
        parent = self._parent
        for p in self._region:
            yield parent[p]

    def values(self) -> list[Any]:
        """The values in region order."""
        return list(self)

    def assign(self, values: Any) -> Patch:
        """Write a scalar, or one value per position in region order, into the parent."""
        positions = list(self._region)
        if isinstance(values, Iterable) and not isinstance(values, (str, bytes)):
            values = list(values)
            if len(values) != len(positions):
                raise ValueError(f"expected {len(positions)} values, got {len(values)}")
        else:
            values = [values] * len(positions)
        for p, v in zip(positions, values):
            self._parent[p] = v
        return self

    def __rshift__(self, vector: Any) -> Patch:
        return Patch(self._parent, _translate(self._region, vector))

    def __lshift__(self, vector: Any) -> Patch:
        return Patch(self._parent, _translate(self._region, _negate(vector)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Patch):
            return NotImplemented
        return self._parent is other._parent and self._region == other._region

    __hash__ = None  # type: ignore[assignment]

    def row(self, position: Any) -> Patch:
        """The row at a position along the axes other than the first one.

        Only box-based patches have rows.
        """
        region = self._region
        if not isinstance(region, Box):
            raise TypeError("rows are only defined for box-based patches")
        position = (int(position),) if isinstance(position, (int, np.integer)) else tuple(position)
        if len(position) != region.dimension - 1:
            raise ValueError(f"expected a position of dimension {region.dimension - 1}, got {len(position)}")
        front = tuple(a + b for a, b in zip((0, *position), region.front))
        back = (front[0] + region.shape()[0] - 1, *front[1:])
        return self.crop(Box(front, back))

    def crop(self, box: Box) -> Patch:
        """The sub-patch whose positions lie inside ``box``."""
        return Patch(self._parent, _crop(self._region, box))

    def __repr__(self) -> str:
        return f"Patch({type(self._parent).__name__}, {self._region!r})"


def rows(patch: Patch) -> Iterator[Patch]:
    """Iterate over the rows of a box-based patch, in data order."""
    region = patch.domain()
    if not isinstance(region, Box):
        raise TypeError("rows are only defined for box-based patches")
    fronts = Box.from_shape((0,) * (region.dimension - 1), region.shape()[1:])
    for position in fronts:
        yield patch.row(position)


def tiles(parent: Any, shape: Sequence[int]) -> Iterator[Patch]:
    """Iterate over tiles of given shape which cover the domain of ``parent``.

    Tiles at the far borders are clamped to the domain and may be smaller.
    """
    domain = _parent_domain(parent)
    shape = tuple(int(s) for s in shape)
    if len(shape) != domain.dimension:
        raise ValueError(f"expected a tile shape of dimension {domain.dimension}, got {len(shape)}")
    if any(s <= 0 for s in shape):
        raise ValueError(f"tile lengths must be positive, got {shape}")
    for front in Grid(domain, shape):
        box = Box.from_shape(front, shape) & domain
        if isinstance(parent, Patch):
            yield parent.crop(box)
        else:
            yield Patch(parent, box)