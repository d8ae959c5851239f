"""The in-memory file system."""

from __future__ import annotations

import posixpath
import threading
from typing import Callable, Optional

from .mem_file import File, _MemFile, deep_copy, new_file_for
from .mem_location import Location
from .paths import (
    default_retry,
    ensure_trailing_slash,
    validate_absolute_file_path,
    validate_absolute_location_path,
)

SCHEME = "mem"
NAME = "In-Memory Filesystem"


def _clean(path: str) -> str:
    if not path:
        return "."
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


class FileSystem:
    """A file system whose files live only in memory.

    ``fs_map`` maps a volume to a mapping of absolute paths to files,
    locations, or ``None`` for deleted files.
    """

    def __init__(self) -> None:
        self.fs_map: dict[str, dict[str, Optional[object]]] = {}
        self.lock = threading.Lock()

    def retry(self) -> Callable:
        return default_retry

    def new_file(self, volume: str, abs_file_path: str) -> File:
        """Return a handle on the file at ``abs_file_path``.

        A file comes into existence when touched or written to. If it
        already exists, the returned handle shares its state.
        """
        validate_absolute_file_path(abs_file_path)
        location = self.new_location(
            volume, ensure_trailing_slash(_clean(posixpath.dirname(abs_file_path)))
        )
        base_name = posixpath.basename(abs_file_path)
        for mem_file in self.files_here(volume, location.path()):
            if mem_file.name == base_name:
                handle = deep_copy(mem_file)
                mem_file.location = location
                return handle
        return new_file_for(base_name, location)

    def new_location(self, volume: str, abs_loc_path: str) -> Location:
        validate_absolute_location_path(abs_loc_path)
        return Location(self, ensure_trailing_slash(_clean(abs_loc_path)), volume)

    def name(self) -> str:
        return NAME

    def scheme(self) -> str:
        return SCHEME

    def files_here(self, volume: str, abs_loc_path: str) -> list[_MemFile]:
        """Return the existing files whose location path is ``abs_loc_path``."""
        return [
            entry
            for entry in list(self.fs_map.get(volume, {}).values())
            if isinstance(entry, _MemFile) and entry.location.path() == abs_loc_path
        ]

    def file_names_here(self, volume: str, abs_loc_path: str) -> list[str]:
        """Return the base names of the files located at ``abs_loc_path``."""
        return [
            entry.name
            for entry in list(self.fs_map.get(volume, {}).values())
            if isinstance(entry, _MemFile)
            and ensure_trailing_slash(entry.location.path()) == abs_loc_path
        ]