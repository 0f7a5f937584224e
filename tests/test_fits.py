import numpy as np
import pytest

from linx import fits
from linx.exceptions import FileFormatError, LinxError, MissingFileError, PathExistsError
from linx.fits import Fits, FitsError

DTYPES = [
    np.float32,
    np.float64,
    np.int8,
    np.uint8,
    np.int16,
    np.uint16,
    np.int32,
    np.uint32,
    np.int64,
    np.uint64,
]


def _sample(dtype):
    values = np.arange(24).reshape((4, 3, 2)).astype(dtype)
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        values.flat[0] = info.min
        values.flat[-1] = info.max
    return values


@pytest.mark.parametrize("dtype", DTYPES)
def test_round_trip_keeps_values_and_type(tmp_path, dtype):
    path = tmp_path / "data.fits"
    values = _sample(dtype)
    Fits(path).write(values)
    out = Fits(path).read()
    assert out.dtype == np.dtype(dtype)
    assert out.shape == values.shape
    assert np.array_equal(out, values)


def test_bool_is_written_as_bytes(tmp_path):
    path = tmp_path / "mask.fits"
    mask = np.array([[True, False], [False, True]])
    Fits(path).write(mask)
    out = Fits(path).read()
    assert out.dtype == np.uint8
    assert np.array_equal(out.astype(bool), mask)


def test_file_is_made_of_blocks_and_starts_with_signature(tmp_path):
    path = tmp_path / "data.fits"
    Fits(path).write(np.zeros((5, 7), dtype=np.float32))
    content = path.read_bytes()
    assert len(content) % 2880 == 0
    assert content.startswith(b"SIMPLE  =")


def test_first_axis_varies_fastest_in_file(tmp_path):
    path = tmp_path / "data.fits"
    values = np.arange(12.0).reshape((4, 3))
    Fits(path).write(values)
    content = path.read_bytes()
    header = content[:2880].decode("ascii")
    assert "NAXIS1  = " + "4".rjust(20) in header
    assert "NAXIS2  = " + "3".rjust(20) in header
    stored = np.frombuffer(content[2880 : 2880 + values.size * 8], dtype=">f8")
    assert np.array_equal(stored, values.ravel(order="F"))


def test_bitpix():
    assert Fits.bitpix(np.float32) == -32
    assert Fits.bitpix(np.float64) == -64
    assert Fits.bitpix(np.int16) == 16
    assert Fits.bitpix(np.uint8) == 8
    assert Fits.bitpix(np.complex128) == 0


def test_path_is_kept(tmp_path):
    path = tmp_path / "data.fits"
    assert Fits(str(path)).path() == path


def test_append_adds_extensions(tmp_path):
    path = tmp_path / "data.fits"
    first = np.arange(6, dtype=np.int32).reshape((3, 2))
    second = np.linspace(0.0, 1.0, 8).reshape((2, 2, 2))
    third = np.array([[1, 0], [0, 1]], dtype=np.uint16)
    Fits(path).write(first, "w")
    Fits(path).write(second, "a")
    Fits(path).write(third, "a")
    assert np.array_equal(Fits(path).read(0), first)
    assert np.array_equal(Fits(path).read(1), second)
    assert np.array_equal(Fits(path).read(2), third)
    with pytest.raises(FitsError):
        Fits(path).read(3)


def test_overwrite_replaces_file(tmp_path):
    path = tmp_path / "data.fits"
    Fits(path).write(np.zeros((2, 2)), "w")
    Fits(path).write(np.zeros((2, 2)), "a")
    replacement = np.ones((3, 3), dtype=np.float32)
    Fits(path).write(replacement, "w")
    assert np.array_equal(Fits(path).read(), replacement)
    with pytest.raises(FitsError):
        Fits(path).read(1)


def test_read_converts_dtype(tmp_path):
    path = tmp_path / "data.fits"
    values = np.arange(6, dtype=np.int16).reshape((2, 3))
    Fits(path).write(values)
    out = Fits(path).read(dtype=np.float64)
    assert out.dtype == np.float64
    assert np.array_equal(out, values.astype(np.float64))


def test_empty_image_round_trip(tmp_path):
    path = tmp_path / "empty.fits"
    values = np.zeros((0, 3), dtype=np.float32)
    Fits(path).write(values)
    out = Fits(path).read()
    assert out.shape == values.shape
    assert out.dtype == np.float32


def test_create_mode_refuses_existing_path(tmp_path):
    path = tmp_path / "data.fits"
    Fits(path).write(np.zeros((2, 2)))
    with pytest.raises(PathExistsError):
        Fits(path).write(np.zeros((2, 2)), "x")


def test_append_mode_needs_existing_file(tmp_path):
    with pytest.raises(MissingFileError):
        Fits(tmp_path / "missing.fits").write(np.zeros((2, 2)), "a")


def test_append_mode_needs_fits_file(tmp_path):
    path = tmp_path / "text.fits"
    path.write_bytes(b"not a fits file")
    with pytest.raises(FileFormatError):
        Fits(path).write(np.zeros((2, 2)), "a")


def test_unknown_mode_is_rejected(tmp_path):
    with pytest.raises(LinxError):
        Fits(tmp_path / "data.fits").write(np.zeros((2, 2)), "z")
    assert not (tmp_path / "data.fits").exists()


def test_unsupported_type_is_rejected(tmp_path):
    with pytest.raises(FitsError):
        Fits(tmp_path / "data.fits").write(np.zeros(3, dtype=complex), "w")


def test_read_missing_file(tmp_path):
    with pytest.raises(MissingFileError):
        Fits(tmp_path / "missing.fits").read()


def test_read_non_fits_file(tmp_path):
    path = tmp_path / "text.fits"
    path.write_bytes(b"hello")
    with pytest.raises(FileFormatError):
        Fits(path).read()


def test_read_truncated_file(tmp_path):
    path = tmp_path / "data.fits"
    Fits(path).write(np.zeros((40, 40)))
    path.write_bytes(path.read_bytes()[:3000])
    with pytest.raises(FitsError):
        Fits(path).read()


def test_module_read_write_round_trip(tmp_path):
    path = tmp_path / "data.fits"
    values = np.arange(10, dtype=np.float32).reshape((5, 2))
    fits.write(values, path)
    assert np.array_equal(fits.read(path), values)
    with pytest.raises(PathExistsError):
        fits.write(values, path)


def test_module_read_reports_no_suitable_reader(tmp_path):
    path = tmp_path / "text.fits"
    path.write_bytes(b"hello")
    with pytest.raises(FileFormatError, match="No suitable reader"):
        fits.read(path)


def test_module_write_reports_no_suitable_writer(tmp_path):
    path = tmp_path / "missing_dir" / "data.fits"
    with pytest.raises(FileFormatError, match="No suitable writer"):
        fits.write(np.zeros((2, 2)), path, "w")