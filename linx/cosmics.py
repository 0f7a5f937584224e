"""Detection and segmentation of cosmic rays in 2D images."""

from __future__ import annotations

import argparse
import logging
import math
from collections.abc import Sequence
from typing import Any

import numpy as np

from linx.filters import SimpleFilter, extrapolation
from linx.fits import Fits
from linx.ranges import mean
from linx.regions import Box
from linx.timer import TimeUnit, Timer

_log = logging.getLogger(__name__)

_LAPLACIAN = np.array(
    [-1 / 6, -2 / 3, -1 / 6, -2 / 3, 10 / 3, -2 / 3, -1 / 6, -2 / 3, -1 / 6],
    dtype=np.float64,
)

_NO_CONTRAST = float(np.finfo(np.float32).max)


class PearsonCorrelation:
    """Pearson correlation coefficient between a template and the window values."""

    def __init__(self, template: Sequence[float]) -> None:
        values = np.asarray(template, dtype=np.float64).ravel()
        self._template = values - values.mean()
        self._sum2 = float(self._template @ self._template)

    def __call__(self, neighbors: Sequence[float]) -> float:
        values = np.asarray(neighbors, dtype=np.float64)
        centered = values - values.mean()
        sum2 = centered @ centered
        with np.errstate(divide="ignore", invalid="ignore"):
            return float((self._template @ centered) / np.sqrt(self._sum2 * sum2))


class QuotientFilter:
    """Minimum ratio between the window values and a template, normalized."""

    def __init__(self, template: Sequence[float]) -> None:
        self._template = np.asarray(template, dtype=np.float64).ravel()

    def __call__(self, neighbors: Sequence[float]) -> float:
        values = np.asarray(neighbors, dtype=np.float64)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            q = values / self._template
            out = np.min(q, initial=np.finfo(np.float64).max, where=~np.isnan(q))
            norm2 = np.sum(q * q)
            return float(out * np.sqrt(self._template.size / norm2))


def _psf_window(psf: np.ndarray) -> Box:
    domain = Box.from_shape((0,) * psf.ndim, psf.shape)
    return domain - tuple((s - 1) // 2 for s in psf.shape)


def _filter_nearest(kernel: Any, window: Box, data: Any) -> np.ndarray:
    return SimpleFilter(kernel, window)(extrapolation(np.asarray(data)))


def quotient(data: Any, psf: Any) -> np.ndarray:
    """Quotient map of an image by a PSF, with nearest-neighbor extrapolation."""
    psf = np.asarray(psf)
    kernel = QuotientFilter(psf.ravel(order="F"))
    return _filter_nearest(kernel, _psf_window(psf), data).astype(np.float64)


def match(data: Any, psf: Any) -> np.ndarray:
    """Correlation map of an image with a PSF, with nearest-neighbor extrapolation."""
    psf = np.asarray(psf)
    kernel = PearsonCorrelation(psf.ravel(order="F"))
    return _filter_nearest(kernel, _psf_window(psf), data).astype(np.float64)


def laplacian(data: Any) -> np.ndarray:
    """Laplacian of an image, with nearest-neighbor extrapolation."""

    def kernel(values: Sequence[Any]) -> float:
        return float(_LAPLACIAN @ np.asarray(values, dtype=np.float64))

    return _filter_nearest(kernel, Box.from_center(1), data).astype(np.float64)


def dilate(data: Any, radius: int = 1) -> np.ndarray:
    """Maximum over a square window of given radius."""
    return _filter_nearest(max, Box.from_center(radius), data)


def blur(data: Any, radius: int = 1) -> np.ndarray:
    """Mean over a square window of given radius."""

    def kernel(values: Sequence[Any]) -> float:
        return float(np.mean(values))

    return _filter_nearest(kernel, Box.from_center(radius), data).astype(np.float64)


def detect(data: Any, psf: Any, pfa: float, tq: float, debug_path: Any = None) -> np.ndarray:
    """Detect cosmic rays by adaptive Laplacian thresholding.

    The background of the Laplacian map is assumed Laplace-distributed to
    derive the threshold from the probability of false alarm ``pfa``.
    Pixels whose dilated PSF quotient reaches ``tq`` are rejected as stars.
    When ``debug_path`` names an existing FITS file, the intermediate maps
    are appended to it.
    """
    data = np.asarray(data)
    psf = np.asarray(psf)
    laplacian_map = laplacian(data)
    if debug_path is not None:
        Fits(debug_path).write(laplacian_map, "a")

    finite = laplacian_map[~np.isnan(laplacian_map)]
    norm = np.float64(np.abs(finite).sum())
    _log.info("Norm: %f", norm)
    with np.errstate(divide="ignore", invalid="ignore"):
        threshold = float(-norm / finite.size * np.log(2.0 * pfa))
    _log.info("Threshold: %f", threshold)

    radius = int(math.sqrt(psf.size) / 4)
    _log.info("Radius: %d", radius)
    quotient_map = dilate(quotient(data, psf), radius)
    if debug_path is not None:
        Fits(debug_path).write(quotient_map, "a")

    return (laplacian_map > threshold) & (quotient_map < tq)


def min_contrast(data: Any, mask: Any, position: Sequence[int]) -> float:
    """Minimum contrast between a pixel and its masked 4-neighbors.

    The contrast is negative when the pixel is brighter than the neighbor.
    Without masked neighbors, the largest single-precision value is returned.
    """
    data = np.asarray(data)
    p = tuple(int(c) for c in position)
    shape = data.shape
    out = _NO_CONTRAST
    for axis, delta in ((1, -1), (1, 1), (0, -1), (0, 1)):
        neighbor = list(p)
        neighbor[axis] += delta
        neighbor = tuple(neighbor)
        if not all(0 <= c < s for c, s in zip(neighbor, shape)):
            continue
        if mask[neighbor]:
            reference = np.float64(data[neighbor])
            with np.errstate(divide="ignore", invalid="ignore"):
                contrast = float((reference - np.float64(data[p])) / reference)
            if contrast < out:
                out = contrast
    return out


def segment(data: Any, mask: np.ndarray, threshold: float) -> None:
    """Grow the detections of ``mask`` in place.

    Unflagged neighbors of flagged pixels are flagged when their minimum
    contrast with the flagged neighborhood is below ``threshold``.
    """
    flags = np.asarray(mask).astype(np.int8)
    window = Box.from_center(1)
    dilated = SimpleFilter(max, window)(extrapolation(flags, 0))
    candidates = np.asarray(dilated, dtype=np.int8) - flags
    inner = Box.from_shape((0, 0), flags.shape).shrink(window)
    for p in inner:
        if candidates[p] and min_contrast(data, mask, p) < threshold:
            mask[p] = True


def main(argv: Sequence[str] | None = None) -> int:
    """Detect and segment cosmic rays in a FITS image and save the masks."""
    parser = argparse.ArgumentParser(description="Mask cosmic rays in an image.")
    parser.add_argument("input", help="The input data file name")
    parser.add_argument("output", help="The output mask file name")
    parser.add_argument("--psf", required=True, help="The PSF file name")
    parser.add_argument("-i", "--hdu", type=int, default=0, help="The 0-based input HDU index slice")
    parser.add_argument("-p", "--pfa", type=float, default=0.01, help="The detection probability of false alarm")
    parser.add_argument("-q", "--quotient", type=float, default=0.1, help="The star rejection quotient threshold")
    parser.add_argument("-c", "--contrast", type=float, default=0.5, help="The region-growing contrast threshold")
    parser.add_argument("-n", "--niter", type=int, default=1, help="The number of segmentation iterations")
    args = parser.parse_args(argv)

    data_fits = Fits(args.input)
    map_fits = Fits(args.output)
    psf_fits = Fits(args.psf)
    timer = Timer(TimeUnit.MILLISECONDS)

    print(f"Reading data: {data_fits.path()}")
    data = data_fits.read(args.hdu, dtype=np.float32)
    print(f"Reading PSF: {psf_fits.path()}")
    psf = psf_fits.read(dtype=np.float32)
    map_fits.write(data, "w")

    print("Detecting cosmics...")
    timer.start()
    mask = detect(data, psf, args.pfa, args.quotient)
    timer.stop()
    print(f"  Done in: {timer.back()} ms")
    print(f"  Density: {mean(mask)}")
    map_fits.write(mask, "a")

    print("Segmenting cosmics...")
    for i in range(args.niter):
        print(f"  Iteration {i + 1}/{args.niter}")
        timer.start()
        segment(data, mask, args.contrast)
        timer.stop()
        print(f"    Done in: {timer.back()} ms")
        print(f"    Density: {mean(mask)}")
        map_fits.write(mask, "a")

    print(f"Saved map as: {map_fits.path()}")
    return 0