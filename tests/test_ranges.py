import math

import numpy as np
import pytest

from linx import ranges


def test_fill_list_and_array():
    data = [0] * 4
    assert ranges.fill(data, 7) == [7, 7, 7, 7]
    arr = np.zeros((2, 3))
    ranges.fill(arr, 2.5)
    assert arr.tolist() == [[2.5] * 3, [2.5] * 3]


def test_range_fill():
    data = [0] * 5
    assert ranges.range_fill(data) == [0, 1, 2, 3, 4]
    assert ranges.range_fill(data, 1, 2) == [1, 3, 5, 7, 9]
    arr = np.zeros((2, 3), dtype=int)
    ranges.range_fill(arr, 1)
    assert arr.tolist() == [[1, 2, 3], [4, 5, 6]]


def test_linspace_fill():
    data = [0.0] * 5
    ranges.linspace_fill(data, 0.0, 1.0)
    assert data[0] == 0.0
    assert data[-1] == 1.0
    assert data == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])


def test_linspace_fill_single_and_empty():
    assert ranges.linspace_fill([0.0], 2.0, 3.0) == [3.0]
    with pytest.raises(ValueError):
        ranges.linspace_fill([], 0.0, 1.0)


def test_generate_and_apply():
    a = np.arange(6, dtype=np.int64).reshape(2, 3)
    b = [2] * 6
    result = np.zeros((2, 3), dtype=np.int64)
    ranges.generate(result, lambda v, w: v * w, a, b)
    ranges.apply(result, lambda v: -v)
    assert result.tolist() == [[0, -2, -4], [-6, -8, -10]]


def test_generate_without_arguments():
    counter = iter(range(100))
    assert ranges.generate([0] * 3, lambda: next(counter)) == [0, 1, 2]


def test_apply_with_argument():
    data = [1, 2, 3]
    ranges.apply(data, lambda v, w: v * 2 + w, [-1, -1, -1])
    assert data == [1, 3, 5]


def test_generate_size_mismatch():
    with pytest.raises(ValueError):
        ranges.generate([0] * 3, lambda v: v, [1, 2])


def test_reverse():
    assert ranges.reverse([1, 2, 3]) == [3, 2, 1]


def test_contains_family():
    assert ranges.contains([1, 2, 3], 2)
    assert not ranges.contains([1, 2, 3], 4)
    assert ranges.contains_nan([1.0, math.nan])
    assert not ranges.contains_nan([1.0, 2.0])
    assert ranges.contains_only([5, 5], 5)
    assert not ranges.contains_only([5, 4], 5)
    assert not ranges.contains_only([], 5)


def test_min_max():
    data = [4, -2, 9, 1]
    assert ranges.minimum(data) == -2
    assert ranges.maximum(data) == 9
    assert ranges.minmax(data) == (-2, 9)


def test_total_product_mean():
    data = [1, 2, 3, 4]
    assert ranges.total(data) == 10.0
    assert ranges.total(data, 5) == 15.0
    assert ranges.product(data) == 24.0
    assert ranges.product(data, 0.5) == 12.0
    assert ranges.mean(data) == 2.5


def test_distribution():
    dist = ranges.distribution(np.array([2, 1, 9, 4, 1, 2, 6]))
    assert dist.min() == 1
    assert dist.max() == 9
    assert dist.median() == 2


def test_equality_of_containers():
    full = ranges.fill([0] * 10, 0)
    assert full == [0] * 10
    assert full != []


def test_format_short_and_empty():
    assert ranges.format_container([]) == "[]"
    assert ranges.format_container([1, 2, 3]) == "[1, 2, 3]"
    assert ranges.format_container(list(range(7))) == "[0, 1, 2, 3, 4, 5, 6]"


def test_format_long():
    assert ranges.format_container(list(range(10))) == "[0, 1, 2 ... 7, 8, 9]"
    assert ranges.format_container(list(range(8))) == "[0, 1, 2 ... 5, 6, 7]"