"""Regions of integer positions: boxes, regular grids and axis-aligned lines.

Positions are tuples of integers. Iteration follows the data ordering:
the first axis varies fastest.
"""

from __future__ import annotations

import itertools
import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Union

Position = tuple[int, ...]
VectorLike = Union[int, Sequence[int]]


def _as_position(values: Sequence[int]) -> Position:
    return tuple(int(v) for v in values)


def _as_vector(vector: VectorLike, dimension: int) -> Position:
    """Broadcast a scalar to a vector, or check the dimension of a vector."""
    if isinstance(vector, int):
        return (vector,) * dimension
    out = _as_position(vector)
    if len(out) != dimension:
        raise ValueError(f"expected a vector of dimension {dimension}, got {len(out)}")
    return out


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounded toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


@dataclass(frozen=True)
class Box:
    """An axis-aligned box, bounds included."""

    front: Position
    back: Position

    def __post_init__(self) -> None:
        front = _as_position(self.front)
        back = _as_position(self.back)
        if len(front) != len(back):
            raise ValueError(f"front and back dimensions differ: {len(front)} and {len(back)}")
        object.__setattr__(self, "front", front)
        object.__setattr__(self, "back", back)

    @classmethod
    def from_shape(cls, front: Sequence[int], shape: Sequence[int]) -> Box:
        """Create a box from its front position and shape."""
        front = _as_position(front)
        shape = _as_vector(shape, len(front))
        return cls(front, tuple(f + s - 1 for f, s in zip(front, shape)))

    @classmethod
    def from_center(cls, radius: int = 1, center: Sequence[int] | None = None, dimension: int = 2) -> Box:
        """Create a box of given radius around a center (the origin by default)."""
        center = (0,) * dimension if center is None else _as_position(center)
        return cls(tuple(c - radius for c in center), tuple(c + radius for c in center))

    @property
    def dimension(self) -> int:
        """The number of axes."""
        return len(self.front)

    def shape(self) -> Position:
        """The length along each axis."""
        return tuple(b - f + 1 for f, b in zip(self.front, self.back))

    def __len__(self) -> int:
        return math.prod(max(0, length) for length in self.shape())

    def __iter__(self) -> Iterator[Position]:
        if len(self) == 0:
            return
        ranges = [range(f, b + 1) for f, b in zip(reversed(self.front), reversed(self.back))]
        for combo in itertools.product(*ranges):
            yield tuple(reversed(combo))

    def __contains__(self, position: object) -> bool:
        if not isinstance(position, Sequence) or len(position) != self.dimension:
            return False
        return all(f <= p <= b for f, p, b in zip(self.front, position, self.back))

    def __add__(self, vector: VectorLike) -> Box:
        v = _as_vector(vector, self.dimension)
        return Box(
            tuple(f + d for f, d in zip(self.front, v)),
            tuple(b + d for b, d in zip(self.back, v)),
        )

    def __sub__(self, vector: VectorLike) -> Box:
        v = _as_vector(vector, self.dimension)
        return self + tuple(-d for d in v)

    def __and__(self, other: Box) -> Box:
        if not isinstance(other, Box):
            return NotImplemented
        if other.dimension != self.dimension:
            raise ValueError("boxes of different dimensions")
        return Box(
            tuple(max(a, b) for a, b in zip(self.front, other.front)),
            tuple(min(a, b) for a, b in zip(self.back, other.back)),
        )

    def grow(self, window: Box) -> Box:
        """Extend the box by a window: the front moves by the window front, the back by its back."""
        return Box(
            tuple(f + w for f, w in zip(self.front, window.front)),
            tuple(b + w for b, w in zip(self.back, window.back)),
        )

    def shrink(self, window: Box) -> Box:
        """Reduce the box to the positions whose window lies inside it."""
        return Box(
            tuple(f - w for f, w in zip(self.front, window.front)),
            tuple(b - w for b, w in zip(self.back, window.back)),
        )


class Grid:
    """A regular grid of positions inside a box, with a step along each axis."""

    def __init__(self, box: Box, step: VectorLike | None = None) -> None:
        step = 1 if step is None else step
        self._step = _as_vector(step, box.dimension)
        if any(s <= 0 for s in self._step):
            raise ValueError(f"grid steps must be positive, got {self._step}")
        self._box = box

    @property
    def step(self) -> Position:
        """The step along each axis."""
        return self._step

    @property
    def dimension(self) -> int:
        """The number of axes."""
        return self._box.dimension

    def front(self) -> Position:
        """The first grid position."""
        return self._box.front

    def back(self) -> Position:
        """The last grid position, which may lie before the bounding box back."""
        return tuple(f + (length - 1) // s * s for f, length, s in zip(self._box.front, self._box.shape(), self._step))

    def box(self) -> Box:
        """The bounding box of the grid positions."""
        return Box(self.front(), self.back())

    def shape(self) -> Position:
        """The number of grid positions along each axis."""
        return tuple(max(0, (length - 1) // s + 1) if length > 0 else 0 for length, s in zip(self._box.shape(), self._step))

    def __len__(self) -> int:
        return math.prod(self.shape())

    def __iter__(self) -> Iterator[Position]:
        if len(self) == 0:
            return
        ranges = [
            range(f, b + 1, s)
            for f, b, s in zip(reversed(self.front()), reversed(self.back()), reversed(self._step))
        ]
        for combo in itertools.product(*ranges):
            yield tuple(reversed(combo))

    def __add__(self, vector: VectorLike) -> Grid:
        return Grid(self._box + vector, self._step)

    def __sub__(self, vector: VectorLike) -> Grid:
        return Grid(self._box - vector, self._step)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._box == other._box and self._step == other._step

    def __hash__(self) -> int:
        return hash((self._box, self._step))

    def __repr__(self) -> str:
        return f"Grid({self._box!r}, step={self._step})"


class Line:
    """An axis-aligned slice of positions with a constant step."""

    def __init__(self, axis: int, front: Sequence[int], back: int, step: int = 1) -> None:
        front = _as_position(front)
        if not 0 <= axis < len(front):
            raise ValueError(f"axis {axis} out of range for dimension {len(front)}")
        if step == 0:
            raise ValueError("line step must be non-zero")
        self._axis = axis
        self._front = front
        self._step = int(step)
        self._size = max(0, _trunc_div(back - front[axis], self._step) + 1)

    @classmethod
    def from_size(cls, axis: int, front: Sequence[int], size: int, step: int = 1) -> Line:
        """Create a line from a front position, a number of positions and a step."""
        front = _as_position(front)
        if size < 0:
            raise ValueError(f"line size must be non-negative, got {size}")
        return cls(axis, front, front[axis] + step * (size - 1), step)

    @property
    def axis(self) -> int:
        """The index of the axis the line is aligned to."""
        return self._axis

    @property
    def front(self) -> Position:
        """The front position."""
        return self._front

    @property
    def step(self) -> int:
        """The step along the axis."""
        return self._step

    def dimension(self) -> int:
        """The number of axes."""
        return len(self._front)

    def box(self) -> Box:
        """The bounding box."""
        front, back = self._front, self.back()
        return Box(tuple(map(min, front, back)), tuple(map(max, front, back)))

    def back(self) -> Position:
        """The last position."""
        return self._moved(self._step * (self._size - 1))

    def front_index(self) -> int:
        """The front coordinate along the axis."""
        return self._front[self._axis]

    def back_index(self) -> int:
        """The back coordinate along the axis."""
        return self._front[self._axis] + self._step * (self._size - 1)

    def shape(self) -> Position:
        """The number of positions along the axis, and 1 along the other axes."""
        return tuple(self._size if i == self._axis else 1 for i in range(self.dimension()))

    def _moved(self, offset: int) -> Position:
        out = list(self._front)
        out[self._axis] += offset
        return tuple(out)

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> Position:
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError(f"index out of range for a line of {self._size} positions")
        return self._moved(index * self._step)

    def __iter__(self) -> Iterator[Position]:
        for i in range(self._size):
            yield self._moved(i * self._step)

    def __contains__(self, position: object) -> bool:
        if not isinstance(position, Sequence) or len(position) != self.dimension():
            return False
        for i, (p, f) in enumerate(zip(position, self._front)):
            if i != self._axis and p != f:
                return False
        offset = position[self._axis] - self.front_index()
        if offset % self._step != 0:
            return False
        return 0 <= offset // self._step < self._size

    def __add__(self, vector: VectorLike) -> Line:
        v = _as_vector(vector, self.dimension())
        return Line.from_size(self._axis, tuple(f + d for f, d in zip(self._front, v)), self._size, self._step)

    def __sub__(self, vector: VectorLike) -> Line:
        v = _as_vector(vector, self.dimension())
        return self + tuple(-d for d in v)

    def __neg__(self) -> Line:
        return Line.from_size(self._axis, tuple(-f for f in self._front), self._size, -self._step)

    def __and__(self, box: Box) -> Line:
        if not isinstance(box, Box):
            return NotImplemented
        inside = [p for p in self if p in box]
        if not inside:
            return Line.from_size(self._axis, self._front, 0, self._step)
        return Line.from_size(self._axis, inside[0], len(inside), self._step)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return (self._axis, self._front, self._step, self._size) == (
            other._axis,
            other._front,
            other._step,
            other._size,
        )

    def __hash__(self) -> int:
        return hash((self._axis, self._front, self._step, self._size))

    def __repr__(self) -> str:
        return f"Line(axis={self._axis}, front={self._front}, size={self._size}, step={self._step})"