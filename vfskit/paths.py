"""Path validation, URI building and copy helpers shared by the file system backends."""

from __future__ import annotations

import io
from typing import Any, Callable, Protocol, TypeVar

BAD_ABS_FILE_PATH = (
    "absolute file path is invalid - must include leading slash and may not include trailing slash"
)
BAD_REL_FILE_PATH = "relative file path is invalid - may not include leading or trailing slashes"
BAD_ABS_LOCATION_PATH = (
    "absolute location path is invalid - must include leading and trailing slashes"
)
BAD_REL_LOCATION_PATH = (
    "relative location path is invalid - may not include leading slash but must include trailing slash"
)
BAD_COPY_SEEK_POSITION = "current cursor offset is not 0 as required for this operation"

TOUCH_COPY_MIN_BUFFER_SIZE = 262144

T = TypeVar("T")


class PathError(ValueError):
    """Raised when a path does not have the shape an operation requires."""


class _Reader(Protocol):
    def read(self, size: int) -> bytes: ...


class _Writer(Protocol):
    def write(self, data: bytes) -> int: ...


def ensure_leading_slash(path: str) -> str:
    """Return ``path`` with a leading slash."""
    return path if path.startswith("/") else "/" + path


def ensure_trailing_slash(path: str) -> str:
    """Return ``path`` with a trailing slash."""
    return path if path.endswith("/") else path + "/"


def validate_absolute_file_path(path: str) -> None:
    """Raise PathError unless ``path`` starts with a slash and does not end with one."""
    if not path.startswith("/") or path.endswith("/"):
        raise PathError(BAD_ABS_FILE_PATH)


def validate_absolute_location_path(path: str) -> None:
    """Raise PathError unless ``path`` starts and ends with a slash."""
    if not path.startswith("/") or not path.endswith("/"):
        raise PathError(BAD_ABS_LOCATION_PATH)


def validate_relative_file_path(path: str) -> None:
    """Raise PathError if ``path`` starts or ends with a slash."""
    if path.startswith("/") or path.endswith("/"):
        raise PathError(BAD_REL_FILE_PATH)


def validate_relative_location_path(path: str) -> None:
    """Raise PathError unless ``path`` lacks a leading slash and has a trailing one."""
    if path.startswith("/") or not path.endswith("/"):
        raise PathError(BAD_REL_LOCATION_PATH)


def location_uri(location: Any) -> str:
    """Build ``scheme://volume/path/`` for a location."""
    scheme = location.file_system().scheme()
    return f"{scheme}://{location.volume()}{location.path()}"


def file_uri(file: Any) -> str:
    """Build ``scheme://volume/path`` for a file."""
    location = file.location()
    scheme = location.file_system().scheme()
    return f"{scheme}://{location.volume()}{file.path()}"


def validate_copy_seek_position(file: Any) -> None:
    """Raise ValueError unless the file's cursor is at offset 0."""
    position = file.seek(0, io.SEEK_CUR)
    if position != 0:
        raise ValueError(BAD_COPY_SEEK_POSITION)


def touch_copy_buffered(writer: _Writer, reader: _Reader, buffer_size: int) -> int:
    """Copy everything from ``reader`` to ``writer`` in chunks.

    When nothing was copied, an empty write is still made so the target comes
    into existence. Returns the number of bytes copied.
    """
    chunk_size = max(buffer_size, TOUCH_COPY_MIN_BUFFER_SIZE)
    written = 0
    while chunk := reader.read(chunk_size):
        written += len(chunk)
        writer.write(chunk)
    if written == 0:
        writer.write(b"")
    return written


def default_retry(func: Callable[[], T]) -> T:
    """Run ``func`` once, without retrying."""
    return func()