"""Files held in memory by the in-memory file system.

The owning file system exposes two attributes used here:

``fs_map``
    volume -> {absolute path -> :class:`_MemFile` | location | ``None``}.
    Keys ending in a slash hold locations. A deleted file's key stays in the
    mapping with the value ``None``.
``lock``
    A lock guarding ``fs_map``.

Every handle on the same path shares one :class:`_MemFile`. Each handle keeps
its own snapshot of the contents and its own cursor. Written data collects in
the shared write buffer and becomes part of the contents only on ``close``.
"""

from __future__ import annotations

import io
import posixpath
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from .paths import ensure_trailing_slash, file_uri, validate_copy_seek_position

SCHEME = "mem"

_DOES_NOT_EXIST = "this file does not exist"
_NIL_REFERENCE = "the target file passed in was nil"
_SEEK_ERROR = "seek could not complete the desired call"


def _clean(path: str) -> str:
    """Lexically normalise a slash-separated path."""
    if not path:
        return "."
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class _MemFile:
    """The shared state of one in-memory file."""

    name: str
    location: Any
    contents: bytes = b""
    write_buffer: bytearray = field(default_factory=bytearray)
    exists: bool = False
    is_open: bool = False
    last_modified: Optional[datetime] = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class File:
    """A handle on an in-memory file with its own cursor."""

    def __init__(self, mem_file: _MemFile) -> None:
        self._mem_file = mem_file
        self._name = mem_file.name
        self._exists = False
        self._is_open = False
        self._contents = b""
        self._cursor = 0

    def __enter__(self) -> "File":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _require_exists(self) -> None:
        if not self.exists():
            raise FileNotFoundError(_DOES_NOT_EXIST)

    def _synchronize(self) -> None:
        """Take up the shared contents if they changed, rewinding the cursor."""
        if self._contents != self._mem_file.contents:
            self._cursor = 0
            self._contents = self._mem_file.contents

    def close(self) -> None:
        """Commit buffered writes to the contents and rewind the cursor."""
        mem_file = self._mem_file
        with mem_file.lock:
            if mem_file.write_buffer:
                mem_file.contents = mem_file.contents + bytes(mem_file.write_buffer)
                mem_file.last_modified = _now()
                mem_file.write_buffer = bytearray()
            mem_file.is_open = False
            self._cursor = 0

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes; an empty result means end of file."""
        self._require_exists()
        self._is_open = True
        if size == 0:
            return b""
        self._synchronize()
        length = len(self._contents)
        if size is None or size < 0:
            end = length
        else:
            end = min(length, self._cursor + size)
        data = self._contents[self._cursor:end]
        self._cursor = end
        return data

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the cursor; raise ValueError if the target is out of bounds."""
        self._require_exists()
        length = len(self._contents)
        if length + offset + whence == 0:
            return 0
        if whence == io.SEEK_SET:
            target, valid = offset, 0 <= offset < length
        elif whence == io.SEEK_CUR:
            target = self._cursor + offset
            valid = 0 <= target <= length
        elif whence == io.SEEK_END:
            target = length + offset
            valid = 0 <= target < length
        else:
            target, valid = self._cursor, False
        if not valid:
            raise ValueError(_SEEK_ERROR)
        self._cursor = target
        return target

    def write(self, data: bytes) -> int:
        """Buffer ``data``, bringing the file into existence if needed."""
        self._is_open = True
        if not self.exists():
            self.touch()
        mem_file = self._mem_file
        with mem_file.lock:
            mem_file.write_buffer += data
            mem_file.last_modified = _now()
        return len(data)

    def __str__(self) -> str:
        return self.uri()

    def exists(self) -> bool:
        location = self._mem_file.location
        volume_map = location.file_system().fs_map.get(location.volume(), {})
        entry = volume_map.get(self.path())
        return isinstance(entry, _MemFile) and entry.exists

    def location(self) -> Any:
        """Return a fresh location object for the file's directory."""
        location = self._mem_file.location
        return location.file_system().new_location(location.volume(), location.path())

    def copy_to_location(self, location: Any) -> Any:
        """Copy to ``location`` under the same name, overwriting a file already there."""
        self._require_exists()
        test_path = _clean(posixpath.join(_clean(location.path()), self.name()))
        own_location = self._mem_file.location
        volume_map = own_location.file_system().fs_map.get(own_location.volume(), {})
        entry = volume_map.get(test_path)
        if isinstance(entry, _MemFile):
            file = deep_copy(entry)
            self.copy_to_file(file)
            return file

        new_file = location.new_file(self.name())
        new_file.write(b"")
        self.copy_to_file(new_file)
        return new_file

    def copy_to_file(self, target: Any) -> None:
        """Replace the contents of ``target`` with this file's committed contents."""
        if target is None:
            raise ValueError(_NIL_REFERENCE)
        validate_copy_seek_position(self)
        self._require_exists()

        if isinstance(target, File) and target.location().file_system().scheme() == SCHEME:
            with target._mem_file.lock:
                target._mem_file.contents = b""

        contents = self._mem_file.contents
        if not target.exists():
            target.write(contents)
            self.close()
            target.close()
        target.write(contents)
        target.close()
        self.close()

    def move_to_location(self, location: Any) -> Any:
        """Copy to ``location`` under the same name, then delete this file."""
        if location is None:
            raise ValueError(_NIL_REFERENCE)
        self._require_exists()

        if location.file_system().scheme() == SCHEME:
            test_path = _clean(posixpath.join(location.path(), self.name()))
            file_system = location.file_system()
            with file_system.lock:
                entry = file_system.fs_map.get(location.volume(), {}).get(test_path)
            if isinstance(entry, _MemFile):
                file = deep_copy(entry)
                self.copy_to_file(file)
                self.delete()
                return file

        new_file = location.new_file(self.name())
        new_file.write(b"")
        self.copy_to_file(new_file)
        self.delete()
        return new_file

    def move_to_file(self, file: Any) -> None:
        """Copy into ``file``, then delete this file."""
        self._require_exists()
        self.copy_to_file(file)
        self.delete()

    def delete(self) -> None:
        """Remove the file from its file system."""
        self._require_exists()
        location = self._mem_file.location
        volume = location.volume()
        path = self.path()
        file_system = location.file_system()
        with self._mem_file.lock, file_system.lock:
            volume_map = file_system.fs_map.get(volume)
            if volume_map is not None and path in volume_map:
                entry = volume_map[path]
                if isinstance(entry, _MemFile):
                    entry.exists = False
                volume_map[path] = None

    def last_modified(self) -> Optional[datetime]:
        self._require_exists()
        return self._mem_file.last_modified

    def size(self) -> int:
        """Return the length of the committed contents."""
        self._require_exists()
        self._synchronize()
        return len(self._contents)

    def touch(self) -> None:
        """Bring the file into existence, or update its modification time."""
        mem_file = self._mem_file
        if mem_file.exists:
            self._exists = True
            mem_file.last_modified = _now()
            return

        mem_file.exists = True
        self._exists = True
        mem_file.last_modified = _now()
        location = self.location()
        volume = location.volume()
        path = self.path()
        location_path = ensure_trailing_slash(_clean(posixpath.dirname(path)))

        file_system = mem_file.location.file_system()
        with file_system.lock:
            volume_map = file_system.fs_map.setdefault(volume, {})
            volume_map[path] = mem_file
            self._mem_file = volume_map[path]
            if location_path not in volume_map:
                volume_map[location_path] = location

    def path(self) -> str:
        return _clean(posixpath.join(self._mem_file.location.path(), self._name))

    def name(self) -> str:
        return self._name

    def uri(self) -> str:
        return file_uri(self)


def new_file_for(name: str, location: Any) -> File:
    """Return a handle on a new, not yet existing file ``name`` at ``location``."""
    return File(_MemFile(name=name, location=location))


def deep_copy(mem_file: _MemFile) -> File:
    """Return a new handle on the shared file ``mem_file``."""
    file = File(mem_file)
    file._exists = mem_file.exists
    file._is_open = mem_file.is_open
    file._contents = mem_file.contents
    return file