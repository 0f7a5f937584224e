"""Exceptions and path checks."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any


class LinxError(Exception):
    """Base error, made of a message and optional lines of detail."""

    def __init__(self, message: str, *details: Any) -> None:
        self.message = message
        self.details = tuple(str(d) for d in details)
        super().__init__("\n".join([message, *self.details]))


class MissingFileError(LinxError):
    """A file does not exist."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__("File does not exist", self.path)


class PathExistsError(LinxError):
    """A path already exists."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__("Path already exists", self.path)


class FileFormatError(LinxError):
    """A file cannot be handled because of its format."""

    def __init__(self, message: str, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__("File format error", message, self.path)


def ensure_file(path: str | os.PathLike[str]) -> Path:
    """Return ``path`` if it is a regular file, raise :class:`MissingFileError` otherwise."""
    p = Path(path)
    if not p.is_file():
        raise MissingFileError(p)
    return p


def ensure_absent(path: str | os.PathLike[str]) -> Path:
    """Return ``path`` if nothing exists there, raise :class:`PathExistsError` otherwise."""
    p = Path(path)
    if p.exists():
        raise PathExistsError(p)
    return p