"""Files on the local operating-system file system."""

from __future__ import annotations

import errno
import io
import os
import posixpath
import shutil
import tempfile
import time
from datetime import datetime, timezone
from typing import Any, BinaryIO, Callable, Optional

from .os_location import Location
from .paths import (
    TOUCH_COPY_MIN_BUFFER_SIZE,
    default_retry,
    ensure_trailing_slash,
    file_uri,
    touch_copy_buffered,
    validate_absolute_file_path,
    validate_absolute_location_path,
    validate_copy_seek_position,
)

SCHEME = "file"
NAME = "os"

Opener = Callable[[str], BinaryIO]


def _clean(path: str) -> str:
    if not path:
        return "."
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _open_os_file(file_path: str) -> BinaryIO:
    """Open ``file_path`` for reading and writing, creating it and its directories."""
    os.makedirs(posixpath.dirname(file_path) or ".", exist_ok=True)
    flags = os.O_RDWR | os.O_CREAT | getattr(os, "O_BINARY", 0)
    fd = os.open(file_path, flags, 0o666)
    return os.fdopen(fd, "r+b", buffering=0)


def safe_os_rename(src_name: str, dst_name: str) -> None:
    """Rename a file, falling back to copy and delete across devices."""
    try:
        os.replace(src_name, dst_name)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise
        os_copy(src_name, dst_name)
        os.remove(src_name)


def os_copy(src_name: str, dst_name: str) -> None:
    """Copy the contents of one local file to another."""
    with open(src_name, "rb") as source, open(dst_name, "wb") as target:
        shutil.copyfileobj(source, target, TOUCH_COPY_MIN_BUFFER_SIZE)


def _ensure_dir(location: Any) -> None:
    if not location.exists():
        os.makedirs(location.path(), exist_ok=True)


class FileSystem:
    """The local operating-system file system."""

    def retry(self) -> Callable:
        return default_retry

    def new_file(self, volume: str, name: str) -> "File":
        validate_absolute_file_path(name)
        return File(name, self)

    def new_location(self, volume: str, name: str) -> Location:
        validate_absolute_location_path(name)
        return Location(self, ensure_trailing_slash(_clean(name)))

    def name(self) -> str:
        return NAME

    def scheme(self) -> str:
        return SCHEME


class File:
    """A file on the local file system.

    Writes go to a temporary file that replaces the real file on close.
    """

    def __init__(self, name: str, filesystem: FileSystem, opener: Optional[Opener] = None) -> None:
        self._name = name
        self._filesystem = filesystem
        self.opener = opener
        self._file: Optional[BinaryIO] = None
        self._temp_file: Optional[BinaryIO] = None
        self._temp_name: Optional[str] = None
        self._use_temp_file = False
        self._cursor = 0

    def __enter__(self) -> "File":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def delete(self) -> None:
        """Remove the file."""
        os.remove(self.path())
        if self._file is not None:
            self._file.close()
            self._file = None

    def last_modified(self) -> datetime:
        return datetime.fromtimestamp(os.stat(self.path()).st_mtime, tz=timezone.utc)

    def name(self) -> str:
        return posixpath.basename(self._name)

    def path(self) -> str:
        return _clean(posixpath.join(self.location().path(), self.name()))

    def size(self) -> int:
        return os.stat(self.path()).st_size

    def close(self) -> None:
        """Close open handles, moving any written data over the real file."""
        self._use_temp_file = False
        self._cursor = 0
        if self._temp_file is not None:
            self._temp_file.close()
            self._internal_file()
            try:
                safe_os_rename(self._temp_name, self.path())
            except FileNotFoundError:
                pass
            self._temp_file = None
            self._temp_name = None
        if self._file is None:
            return
        self._file.close()
        self._file = None

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes; an empty result means end of file."""
        if not self._use_temp_file and not self.exists():
            raise FileNotFoundError(f"failed to read. File does not exist at {self}")
        data = self._internal_file().read(size)
        self._cursor += len(data)
        return data

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        handle = self._internal_file()
        if whence not in (io.SEEK_SET, io.SEEK_CUR, io.SEEK_END):
            raise ValueError(f"invalid whence: {whence}")
        try:
            self._cursor = handle.seek(offset, whence)
        except OSError:
            self._cursor = 0
            raise
        return self._cursor

    def tell(self) -> int:
        return self._cursor

    def exists(self) -> bool:
        try:
            os.stat(self.path())
        except FileNotFoundError:
            return False
        return True

    def write(self, data: bytes) -> int:
        self._use_temp_file = True
        written = self._internal_file().write(data)
        self._cursor += written
        return written

    def location(self) -> Location:
        return Location(self._filesystem, ensure_trailing_slash(_clean(posixpath.dirname(self._name))))

    def move_to_file(self, file: Any) -> None:
        validate_copy_seek_position(self)
        if file.location().file_system().scheme() == SCHEME:
            safe_os_rename(self.path(), file.path())
            return
        self._copy_with_name(file.name(), file.location())
        self.delete()

    def move_to_location(self, location: Any) -> Any:
        if location.file_system().scheme() == SCHEME:
            _ensure_dir(location)
        target = location.new_file(self.name())
        self.move_to_file(target)
        return location.new_file(self.name())

    def copy_to_file(self, file: Any) -> None:
        validate_copy_seek_position(self)
        self._copy_with_name(file.name(), file.location())

    def copy_to_location(self, location: Any) -> Any:
        validate_copy_seek_position(self)
        return self._copy_with_name(self.name(), location)

    def uri(self) -> str:
        return file_uri(self)

    def __str__(self) -> str:
        return self.uri()

    def touch(self) -> None:
        """Create an empty file if missing, otherwise update its modification time."""
        if not self.exists():
            self._open_file()
            self.close()
            return
        os.utime(self.path(), None)

    def _copy_with_name(self, name: str, location: Any) -> Any:
        target_path = _clean(posixpath.join(location.path(), name))
        new_file = location.file_system().new_file(location.volume(), target_path)
        touch_copy_buffered(new_file, self, TOUCH_COPY_MIN_BUFFER_SIZE)
        self.close()
        new_file.close()
        return new_file

    def _open(self) -> BinaryIO:
        opener = self.opener or _open_os_file
        return opener(self.path())

    def _open_file(self) -> BinaryIO:
        if self._file is None:
            self._file = self._open()
        return self._file

    def _internal_file(self) -> BinaryIO:
        if not self._use_temp_file:
            return self._open_file()
        if self._temp_file is None:
            self._temp_file, self._temp_name = self._local_temp_file()
        return self._temp_file

    def _local_temp_file(self) -> tuple[BinaryIO, str]:
        fd, temp_name = tempfile.mkstemp(prefix=f"{self.name()}.{time.time_ns()}")
        temp_file = os.fdopen(fd, "w+b", buffering=0)
        try:
            original = self._open()
        except BaseException:
            temp_file.close()
            os.remove(temp_name)
            raise
        original.close()
        return temp_file, temp_name