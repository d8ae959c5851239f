"""Locations (directories) on the in-memory file system."""

from __future__ import annotations

import posixpath
import re
from typing import Any, Pattern, Union

from .mem_file import File, _MemFile, deep_copy, new_file_for
from .paths import (
    ensure_leading_slash,
    ensure_trailing_slash,
    location_uri,
    validate_relative_file_path,
    validate_relative_location_path,
)


def _clean(path: str) -> str:
    """Lexically normalise a slash-separated path."""
    if not path:
        return "."
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _base(path: str) -> str:
    stripped = path.rstrip("/")
    if not stripped:
        return "/" if path else "."
    return posixpath.basename(stripped)


def _dir(path: str) -> str:
    return _clean(posixpath.dirname(path))


def _ext(path: str) -> str:
    """Return the extension of the last path element, including the dot."""
    last = path.rsplit("/", 1)[-1]
    dot = last.rfind(".")
    return last[dot:] if dot >= 0 else ""


class Location:
    """A directory on the in-memory file system. A location always exists."""

    def __init__(self, file_system: Any, name: str, volume: str) -> None:
        self._file_system = file_system
        self._name = name
        self._volume = volume

    def __str__(self) -> str:
        return self.uri()

    def _volume_map(self) -> dict:
        return self._file_system.fs_map.get(self._volume, {})

    def list(self) -> list[str]:
        """Return the names of the files directly in this location."""
        return sorted(self._file_system.file_names_here(self._volume, self.path()))

    def list_by_prefix(self, prefix: str) -> list[str]:
        """Return the names of files whose full path contains this path joined with ``prefix``."""
        target = _clean(posixpath.join(self.path(), prefix))
        names = [
            _base(key)
            for key in list(self._volume_map())
            if target in key
            and _ext(key) != ""
            and ensure_trailing_slash(_dir(key)) in target
        ]
        return sorted(names)

    def list_by_regex(self, regex: Union[str, Pattern[str]]) -> list[str]:
        """Return the names of files in this location matching ``regex`` anywhere."""
        pattern = re.compile(regex)
        return [name for name in self.list() if pattern.search(name)]

    def volume(self) -> str:
        return self._volume

    def path(self) -> str:
        """Return the absolute path with leading and trailing slashes."""
        return ensure_leading_slash(ensure_trailing_slash(_clean(self._name)))

    def exists(self) -> bool:
        return True

    def new_location(self, rel_loc_path: str) -> "Location":
        """Return the location at ``rel_loc_path`` relative to this one."""
        validate_relative_location_path(rel_loc_path)
        target = ensure_trailing_slash(_clean(posixpath.join(self.path(), rel_loc_path)))
        entry = self._volume_map().get(target)
        if isinstance(entry, Location):
            return entry
        return Location(self._file_system, target, self._volume)

    def change_dir(self, rel_loc_path: str) -> None:
        """Move this location by ``rel_loc_path``."""
        validate_relative_location_path(rel_loc_path)
        self._name = posixpath.join(self._name, rel_loc_path)

    def file_system(self) -> Any:
        return self._file_system

    def new_file(self, rel_file_path: str) -> File:
        """Return a handle on the file at ``rel_file_path``, shared if it already exists."""
        if not rel_file_path:
            raise ValueError("cannot use empty name for file")
        validate_relative_file_path(rel_file_path)

        base_name = _base(rel_file_path)
        for mem_file in self._file_system.files_here(self._volume, self.path()):
            if mem_file.name == base_name:
                return deep_copy(mem_file)

        full_name = posixpath.join(self.path(), rel_file_path)
        location = self._file_system.new_location(
            self._volume, ensure_trailing_slash(_dir(full_name))
        )
        return new_file_for(_base(full_name), location)

    def delete_file(self, rel_file_path: str) -> None:
        """Delete the file at ``rel_file_path``; raise FileNotFoundError if there is none."""
        with self._file_system.lock:
            validate_relative_file_path(rel_file_path)
            full_path = _clean(posixpath.join(self.path(), rel_file_path))
            volume_map = self._file_system.fs_map.get(self._volume)
            if volume_map is not None and isinstance(volume_map.get(full_path), _MemFile):
                volume_map[full_path].exists = False
                volume_map[full_path] = None
                return
        raise FileNotFoundError("this file does not exist")

    def uri(self) -> str:
        return location_uri(self)