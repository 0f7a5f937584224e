"""Discrete Fourier transforms of n-dimensional arrays.

Arrays are indexed by positions, whose first axis is the fastest-varying
one. The real transform therefore halves the first axis. Forward
transforms are unnormalized and inverse transforms are normalized, so that
an inverse undoes its direct transform.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np


def _axes(ndim: int) -> tuple[int, ...]:
    """Axes in the transform order, so that axis 0 comes last."""
    return tuple(reversed(range(ndim)))


def real_out_shape(shape: Sequence[int]) -> tuple[int, ...]:
    """Shape of the output of a real transform of given logical shape."""
    out = [int(s) for s in shape]
    if not out:
        raise ValueError("shape must have at least one axis")
    out[0] = out[0] // 2 + 1
    return tuple(out)


def complex_dft(data: Any) -> np.ndarray:
    """Complex discrete Fourier transform."""
    array = np.asarray(data, dtype=complex)
    return np.fft.fftn(array, axes=_axes(array.ndim))


def inverse_complex_dft(data: Any) -> np.ndarray:
    """Normalized inverse complex discrete Fourier transform."""
    array = np.asarray(data, dtype=complex)
    return np.fft.ifftn(array, axes=_axes(array.ndim))


def real_dft(data: Any) -> np.ndarray:
    """Real discrete Fourier transform, whose first axis is halved."""
    array = np.asarray(data, dtype=float)
    return np.fft.rfftn(array, axes=_axes(array.ndim))


def inverse_real_dft(data: Any, shape: Sequence[int]) -> np.ndarray:
    """Normalized inverse real transform back to an array of given logical shape."""
    array = np.asarray(data, dtype=complex)
    shape = tuple(int(s) for s in shape)
    if array.shape != real_out_shape(shape):
        raise ValueError(f"input shape {array.shape} does not match logical shape {shape}")
    axes = _axes(array.ndim)
    return np.fft.irfftn(array, s=tuple(shape[a] for a in axes), axes=axes)