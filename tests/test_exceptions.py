import pytest

from linx.exceptions import (
    FileFormatError,
    LinxError,
    MissingFileError,
    PathExistsError,
    ensure_absent,
    ensure_file,
)


def test_ensure_file_accepts_regular_file(tmp_path):
    path = tmp_path / "data.fits"
    path.write_bytes(b"")
    assert ensure_file(path) == path


def test_ensure_file_rejects_missing(tmp_path):
    path = tmp_path / "missing.fits"
    with pytest.raises(MissingFileError) as info:
        ensure_file(path)
    assert info.value.path == path
    assert "File does not exist" in str(info.value)
    assert str(path) in str(info.value)


def test_ensure_file_rejects_directory(tmp_path):
    with pytest.raises(MissingFileError):
        ensure_file(tmp_path)


def test_ensure_absent_accepts_new_path(tmp_path):
    path = tmp_path / "new.fits"
    assert ensure_absent(str(path)) == path


def test_ensure_absent_rejects_existing(tmp_path):
    path = tmp_path / "old.fits"
    path.write_text("x")
    with pytest.raises(PathExistsError) as info:
        ensure_absent(path)
    assert "Path already exists" in str(info.value)
    assert info.value.path == path


def test_ensure_absent_rejects_directory(tmp_path):
    with pytest.raises(PathExistsError):
        ensure_absent(tmp_path)


def test_errors_share_base_class(tmp_path):
    with pytest.raises(LinxError):
        ensure_file(tmp_path / "nope")
    with pytest.raises(LinxError):
        raise FileFormatError("No suitable reader", tmp_path / "a.txt")


def test_file_format_error_message(tmp_path):
    path = tmp_path / "a.txt"
    error = FileFormatError("No suitable reader", path)
    assert error.message == "File format error"
    assert error.details == ("No suitable reader", str(path))
    assert str(error).splitlines() == ["File format error", "No suitable reader", str(path)]


def test_linx_error_without_details():
    error = LinxError("Unknown write mode", "q")
    assert str(error) == "Unknown write mode\nq"
    assert LinxError("alone").details == ()