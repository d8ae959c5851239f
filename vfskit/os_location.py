"""Locations (directories) on the local operating-system file system."""

from __future__ import annotations

import os
import posixpath
import re
from typing import Any, Callable, Pattern, Union

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


class Location:
    """A directory on the local file system."""

    def __init__(self, file_system: Any, name: str) -> None:
        self._file_system = file_system
        self._name = name

    def new_file(self, file_name: str) -> Any:
        """Return a file at ``file_name`` relative to this location."""
        if not file_name:
            raise ValueError("non-empty string filePath is required")
        validate_relative_file_path(file_name)
        full_name = ensure_leading_slash(_clean(posixpath.join(self._name, file_name)))
        return self._file_system.new_file(self.volume(), full_name)

    def delete_file(self, file_name: str) -> None:
        """Delete the file ``file_name`` relative to this location."""
        self.new_file(file_name).delete()

    def list(self) -> list[str]:
        """Return the names of all files directly in this location."""
        return self._file_list(lambda name: True)

    def list_by_prefix(self, prefix: str) -> list[str]:
        """Return the names of files whose name starts with ``prefix``.

        A directory part in ``prefix`` selects the sub-location to list.
        """
        directory = _clean(posixpath.dirname(prefix))
        location = self
        if directory not in (".", "/"):
            location = self.new_location(ensure_trailing_slash(directory))
            prefix = _base(prefix)
        return location._file_list(lambda name: name.startswith(prefix))

    def list_by_regex(self, regex: Union[str, Pattern[str]]) -> list[str]:
        """Return the names of files matching ``regex`` anywhere in the name."""
        pattern = re.compile(regex)
        return self._file_list(lambda name: pattern.search(name) is not None)

    def _file_list(self, test: Callable[[str], bool]) -> list[str]:
        if not self.exists():
            return []
        with os.scandir(self.path()) as entries:
            names = sorted(
                entry.name
                for entry in entries
                if not entry.is_dir(follow_symlinks=False)
            )
        return [name for name in names if test(name)]

    def volume(self) -> str:
        """Return the drive of the location, empty on systems without drives."""
        return os.path.splitdrive(self._name)[0]

    def path(self) -> str:
        """Return the location path with leading and trailing slashes."""
        return ensure_leading_slash(ensure_trailing_slash(self._name))

    def exists(self) -> bool:
        """Return whether the directory exists."""
        try:
            os.stat(self.path())
        except FileNotFoundError:
            return False
        return True

    def uri(self) -> str:
        return location_uri(self)

    def __str__(self) -> str:
        return self.uri()

    def new_location(self, relative_path: str) -> "Location":
        """Return a new location relative to this one, leaving this one unchanged."""
        location = Location(self._file_system, self._name)
        location.change_dir(relative_path)
        return location

    def change_dir(self, relative_path: str) -> None:
        """Move this location by ``relative_path``."""
        if not relative_path:
            raise ValueError("non-empty string relativePath is required")
        validate_relative_location_path(relative_path)
        joined = _clean(posixpath.join(self._name, relative_path))
        self._name = ensure_trailing_slash(ensure_leading_slash(joined))

    def file_system(self) -> Any:
        return self._file_system