import statistics

import numpy as np
import pytest

from linx.filters import (
    Constant,
    Extrapolation,
    FilterSeq,
    Nearest,
    Periodic,
    SimpleFilter,
    dont_extrapolate,
    extrapolation,
)
from linx.patch import Patch
from linx.regions import Box


def ranged(shape, start=0):
    size = int(np.prod(shape))
    return np.arange(start, start + size).reshape(shape, order="F")


def flat(array):
    return array.ravel(order="F").tolist()


BOX = Box.from_center(1)


def median_filter():
    return SimpleFilter(statistics.median, BOX)


def erosion():
    return SimpleFilter(min, BOX)


def dilation():
    return SimpleFilter(max, BOX)


def correlation():
    weights = [0.0, 1.0, 2.0, 3.0]
    return SimpleFilter(lambda v: sum(w * x for w, x in zip(weights, v)), Box((0, 0), (1, 1)))


def test_constant_extrapolation():
    raster = np.ones((2, 2, 2), dtype=int)
    extra = extrapolation(raster, 0)
    assert extra[(-1, -1, -1)] == 0
    assert extra[(1, 0, 1)] == 1
    assert isinstance(extra.method(), Constant)


def test_nearest_extrapolation():
    raster = ranged((2, 2, 2), 1)
    extra = extrapolation(raster)
    assert isinstance(extra.method(), Nearest)
    assert extra[(-1, -1, -1)] == 1
    assert extra[(5, 5, 5)] == 8


def test_periodic_extrapolation():
    raster = ranged((2, 2, 2), 1)
    extra = extrapolation(raster, Periodic)
    assert extra[(-1, -1, -1)] == raster.ravel(order="F")[-1]
    assert extra[(2, 3, 4)] == raster[(0, 1, 0)]
    assert extra[(2, 3, 4)] == 3


def test_extrapolation_properties_and_copy():
    raster = np.ones((2, 2), dtype=int)
    extra = Extrapolation(raster, Constant(0))
    assert extra.shape() == (2, 2)
    assert extra.domain() == Box((0, 0), (1, 1))
    assert extra.raster() is raster
    copied = extra.copy(Box((-1, -1), (1, 0)))
    assert copied.tolist() == [[0, 0], [0, 1], [0, 1]]


def test_dont_extrapolate():
    raster = np.ones((3, 3))
    extra = extrapolation(raster, 0.0)
    assert dont_extrapolate(raster) is raster
    assert dont_extrapolate(extra) is raster
    stripped = dont_extrapolate(Patch(extra, Box((0, 0), (1, 1))))
    assert stripped.parent() is raster
    assert stripped.domain() == Box((0, 0), (1, 1))


def test_constant0_3x3():
    raster = np.ones((4, 3), dtype=int)
    extra = extrapolation(raster, 0)

    assert flat(median_filter() * extra) == [0, 1, 1, 0, 1, 1, 1, 1, 0, 1, 1, 0]
    erode_expected = [0, 0, 0, 0, 0, 1, 1, 0, 0, 0, 0, 0]
    assert flat(erosion() * extra) == erode_expected
    assert flat(dilation() * extra) == [1] * 12


def test_raw_raster_is_cropped():
    raster = np.ones((4, 3), dtype=int)
    out = erosion()(raster)
    assert out.shape == (2, 1)
    assert flat(out) == [1, 1]


def test_pixel():
    raster = ranged((4, 3)).astype(float)
    extra = extrapolation(raster, Nearest())
    k = correlation()
    out = k * extra
    for p in extra.domain():
        assert (k * Patch(extra, p))[0, 0] == out[p]
    for p in extra.domain().shrink(k.window()):
        assert (k * Patch(raster, p))[0, 0] == out[p]


def test_pixel_sequence():
    raster = ranged((4, 3)).astype(float)
    extra = extrapolation(raster, Nearest())
    k = correlation()
    positions = list(extra.domain())
    out = k * extra
    out_seq = k * Patch(extra, positions)
    assert out_seq.tolist() == flat(out)


def test_pixel_list():
    raster = ranged((4, 3)).astype(float)
    extra = extrapolation(raster, Nearest())
    k = correlation()
    out = k * extra
    out_seq = k * Patch(extra, [(0, 0), (1, 1), (2, 2)])
    for i in range(3):
        assert out_seq[i] == out[(i, i)]


def test_raw_patch_out_of_bounds_raises():
    raster = np.ones((4, 3))
    with pytest.raises(IndexError):
        erosion()(Patch(raster, (0, 0)))


def test_filter_rejects_unknown_data():
    with pytest.raises(TypeError):
        erosion()("not a raster")


def test_window_must_be_box():
    with pytest.raises(TypeError):
        SimpleFilter(min, (3, 3))


def test_sequence_construction_and_window():
    seq = erosion() * dilation()
    assert isinstance(seq, FilterSeq)
    assert len(seq) == 2
    assert seq[0].kernel() is min
    assert seq[1].kernel() is max
    assert seq.window() == Box((-2, -2), (2, 2))
    longer = seq * median_filter()
    assert len(longer) == 3
    assert longer[2].kernel() is statistics.median
    prepended = seq.__rmul__(median_filter())
    assert prepended[0].kernel() is statistics.median
    assert len(prepended) == 3


def test_sequence_on_extrapolator():
    raster = np.ones((4, 3), dtype=int)
    extra = extrapolation(raster, 0)
    out = (erosion() * dilation()) * extra
    assert out.shape == (4, 3)
    assert flat(out) == [1] * 12


def test_sequence_on_raw_raster_matches_chain():
    raster = ranged((6, 5))
    out = (erosion() * dilation())(raster)
    assert out.shape == (2, 1)
    assert np.array_equal(out, dilation()(erosion()(raster)))


def test_sequence_on_patch_matches_extrapolator():
    raster = ranged((5, 4))
    extra = extrapolation(raster, Nearest())
    seq = dilation() * erosion()
    whole = seq(extra)
    part = seq(Patch(extra, Box((1, 1), (3, 2))))
    assert part.shape == (3, 2)
    for p in Box((1, 1), (3, 2)):
        assert part[(p[0] - 1, p[1] - 1)] == whole[p]


def test_sequence_requires_filters():
    with pytest.raises(ValueError):
        FilterSeq()
    with pytest.raises(TypeError):
        FilterSeq(min)