"""Reading and writing images in FITS files.

Only image HDUs are handled: the primary HDU and image extensions.
Arrays are indexed by positions whose first axis is the fastest-varying
one, which matches the FITS convention where ``NAXIS1`` varies fastest.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from linx.exceptions import FileFormatError, LinxError, ensure_absent, ensure_file

_BLOCK = 2880
_CARD = 80
_SIGNATURE = b"SIMPLE  ="

_STORED = {8: ">u1", 16: ">i2", 32: ">i4", 64: ">i8", -32: ">f4", -64: ">f8"}


class FitsError(LinxError):
    """An error raised while reading or writing the contents of a FITS file."""

    def __init__(self, context: str, path: str | os.PathLike[str], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(context, self.path, reason)


@dataclass(frozen=True)
class _Hdu:
    header: dict[str, Any]
    data_offset: int
    data_size: int


@dataclass(frozen=True)
class _Encoding:
    bitpix: int
    bzero: int | None
    stored: str


def _pad(data: bytes, fill: bytes) -> bytes:
    return data + fill * (-len(data) % _BLOCK)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return ("T" if value else "F").rjust(20)
    if isinstance(value, int):
        return str(value).rjust(20)
    if isinstance(value, str):
        return ("'" + value.replace("'", "''").ljust(8) + "'").ljust(20)
    raise TypeError(f"unsupported header value {value!r}")


def _header_bytes(cards: list[tuple[str, Any]]) -> bytes:
    text = "".join((key.ljust(8) + "= " + _format_value(value)).ljust(_CARD) for key, value in cards)
    text += "END".ljust(_CARD)
    return _pad(text.encode("ascii"), b" ")


def _parse_value(text: str) -> Any:
    text = text.strip()
    if text.startswith("'"):
        chars = []
        i = 1
        while i < len(text):
            if text[i] == "'":
                if text[i + 1 : i + 2] == "'":
                    chars.append("'")
                    i += 2
                    continue
                break
            chars.append(text[i])
            i += 1
        return "".join(chars).rstrip()
    text = text.split("/", 1)[0].strip()
    if text == "T":
        return True
    if text == "F":
        return False
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text.replace("D", "E"))
    except ValueError:
        return text


def _parse_header(content: bytes, offset: int, path: Path) -> tuple[dict[str, Any], int]:
    header: dict[str, Any] = {}
    while True:
        if offset + _BLOCK > len(content):
            raise FitsError("Cannot read file", path, "truncated header")
        block = content[offset : offset + _BLOCK]
        offset += _BLOCK
        for start in range(0, _BLOCK, _CARD):
            card = block[start : start + _CARD].decode("ascii", errors="replace")
            key = card[:8].strip()
            if key == "END":
                return header, offset
            if card[8:10] == "= ":
                header[key] = _parse_value(card[10:])


def _image_shape(header: dict[str, Any], path: Path) -> tuple[int, ...]:
    naxis = header.get("NAXIS")
    if not isinstance(naxis, int) or isinstance(naxis, bool) or naxis < 0:
        raise FitsError("Cannot read file", path, "invalid NAXIS keyword")
    shape = []
    for i in range(1, naxis + 1):
        length = header.get(f"NAXIS{i}")
        if not isinstance(length, int) or isinstance(length, bool) or length < 0:
            raise FitsError("Cannot read file", path, f"invalid NAXIS{i} keyword")
        shape.append(length)
    return tuple(shape)


def _data_size(header: dict[str, Any], path: Path) -> int:
    bitpix = header.get("BITPIX")
    if bitpix not in _STORED:
        raise FitsError("Cannot read file", path, f"unsupported BITPIX {bitpix!r}")
    shape = _image_shape(header, path)
    if not shape:
        return 0
    pcount = int(header.get("PCOUNT", 0))
    gcount = int(header.get("GCOUNT", 1))
    return abs(bitpix) // 8 * gcount * (pcount + math.prod(shape))


def _scan(content: bytes, path: Path) -> list[_Hdu]:
    hdus = []
    offset = 0
    while offset < len(content):
        header, offset = _parse_header(content, offset, path)
        size = _data_size(header, path)
        hdus.append(_Hdu(header, offset, size))
        offset += size + (-size % _BLOCK)
    return hdus


def _toggle_sign(array: np.ndarray, size: int) -> np.ndarray:
    """Flip the sign bit of native integers, returning unsigned integers."""
    unsigned = np.dtype(f"u{size}")
    return array.view(unsigned) ^ unsigned.type(1 << (8 * size - 1))


def _decode(raw: np.ndarray, bitpix: int, bscale: Any, bzero: Any) -> np.ndarray:
    if bscale == 1:
        if bitpix == 8 and bzero == -128:
            return _toggle_sign(raw, 1).view(np.int8)
        if bitpix > 8 and bzero == 1 << (bitpix - 1):
            return _toggle_sign(raw, bitpix // 8)
        if bzero == 0:
            return raw
    return raw.astype(np.float64) * bscale + bzero


def _encoding(dtype: np.dtype) -> _Encoding | None:
    size = dtype.itemsize
    if dtype.kind == "b":
        return _Encoding(8, None, ">u1")
    if dtype.kind == "u" and size in (1, 2, 4, 8):
        if size == 1:
            return _Encoding(8, None, ">u1")
        return _Encoding(8 * size, 1 << (8 * size - 1), f">i{size}")
    if dtype.kind == "i" and size in (1, 2, 4, 8):
        if size == 1:
            return _Encoding(8, -128, ">u1")
        return _Encoding(8 * size, None, f">i{size}")
    if dtype.kind == "f" and size in (4, 8):
        return _Encoding(-8 * size, None, f">f{size}")
    return None


def _encode(array: np.ndarray, encoding: _Encoding) -> bytes:
    dtype = array.dtype
    if dtype.kind == "b":
        values = array.astype(np.uint8)
    elif encoding.bzero is not None:
        native = array.astype(dtype.newbyteorder("="))
        values = _toggle_sign(native, dtype.itemsize)
        if dtype.kind == "u":
            values = values.view(f"i{dtype.itemsize}")
    else:
        values = array
    return values.astype(encoding.stored).tobytes(order="F")


class Fits:
    """A simple FITS file handler which reads and writes image HDUs."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    def path(self) -> Path:
        """The file path."""
        return self._path

    def read(self, hdu: int = 0, dtype: Any = None) -> np.ndarray:
        """Read the image at a given 0-based HDU index, optionally converted to ``dtype``."""
        ensure_file(self._path)
        try:
            content = self._path.read_bytes()
        except OSError as exc:
            raise FileFormatError("Cannot read file", self._path) from exc
        if not content.startswith(_SIGNATURE):
            raise FileFormatError("Cannot read file", self._path)
        hdus = _scan(content, self._path)
        if not 0 <= hdu < len(hdus):
            raise FitsError("Cannot read file", self._path, f"HDU {hdu} not found among {len(hdus)}")
        entry = hdus[hdu]
        header = entry.header
        if hdu > 0 and header.get("XTENSION") != "IMAGE":
            raise FitsError("Cannot read file", self._path, f"HDU {hdu} is not an image")
        shape = _image_shape(header, self._path)
        bitpix = header["BITPIX"]
        count = math.prod(shape) if shape else 0
        if entry.data_offset + count * abs(bitpix) // 8 > len(content):
            raise FitsError("Cannot read file", self._path, "truncated data")
        raw = np.frombuffer(content, dtype=_STORED[bitpix], count=count, offset=entry.data_offset)
        raw = raw.astype(raw.dtype.newbyteorder("="))
        values = _decode(raw, bitpix, header.get("BSCALE", 1), header.get("BZERO", 0))
        out = values.reshape(shape if shape else (0,), order="F")
        if dtype is not None:
            out = out.astype(dtype)
        return out

    def write(self, data: Any, mode: str = "x") -> None:
        """Write an image.

        ``mode`` is ``x`` to create a new file, ``w`` to create or overwrite
        a file, and ``a`` to append an image extension to an existing file.
        """
        if mode == "x":
            ensure_absent(self._path)
            primary, file_mode = True, "xb"
        elif mode == "w":
            primary, file_mode = True, "wb"
        elif mode == "a":
            ensure_file(self._path)
            try:
                with open(self._path, "rb") as f:
                    signature = f.read(len(_SIGNATURE))
            except OSError as exc:
                raise FileFormatError("Cannot write file", self._path) from exc
            if signature != _SIGNATURE:
                raise FileFormatError("Cannot write file", self._path)
            primary, file_mode = False, "ab"
        else:
            raise LinxError("Unknown write mode", mode)

        array = np.asarray(data)
        encoding = _encoding(array.dtype)
        if encoding is None:
            raise FitsError("Cannot write file", self._path, f"unsupported data type {array.dtype}")

        cards: list[tuple[str, Any]] = [("SIMPLE", True)] if primary else [("XTENSION", "IMAGE")]
        cards.append(("BITPIX", encoding.bitpix))
        cards.append(("NAXIS", array.ndim))
        cards.extend((f"NAXIS{i}", int(length)) for i, length in enumerate(array.shape, start=1))
        if primary:
            cards.append(("EXTEND", True))
        else:
            cards.extend([("PCOUNT", 0), ("GCOUNT", 1)])
        if encoding.bzero is not None:
            cards.extend([("BZERO", encoding.bzero), ("BSCALE", 1)])

        payload = _header_bytes(cards)
        if array.ndim > 0 and array.size > 0:
            payload += _pad(_encode(array, encoding), b"\0")
        try:
            with open(self._path, file_mode) as f:
                f.write(payload)
        except OSError as exc:
            raise FileFormatError("Cannot write file", self._path) from exc

    @staticmethod
    def bitpix(dtype: Any) -> int:
        """The BITPIX of a data type, or 0 if it has none."""
        dtype = np.dtype(dtype)
        if dtype.kind in "biu":
            return 8 * dtype.itemsize
        if dtype.kind == "f":
            return -8 * dtype.itemsize
        return 0


def read(path: str | os.PathLike[str], hdu: int = 0, dtype: Any = None) -> np.ndarray:
    """Read an image from a file."""
    try:
        return Fits(path).read(hdu, dtype)
    except FileFormatError as exc:
        raise FileFormatError("No suitable reader", path) from exc


def write(data: Any, path: str | os.PathLike[str], mode: str = "x") -> None:
    """Write an image to a file."""
    try:
        Fits(path).write(data, mode)
    except FileFormatError as exc:
        raise FileFormatError("No suitable writer", path) from exc