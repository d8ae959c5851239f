# vfskit

vfskit gives files and directories one interface, whether they live on
the local disk or only in memory. Code written against that interface
works with either backend. A file can be copied or moved to a location
or file of the other backend.

## Install

```
pip install vfskit
```

## Modules

- `vfskit.paths`: path checks (`validate_absolute_file_path`,
  `validate_absolute_location_path`, `validate_relative_file_path`,
  `validate_relative_location_path`), `ensure_leading_slash`,
  `ensure_trailing_slash`, `file_uri`, `location_uri`,
  `validate_copy_seek_position`, `touch_copy_buffered` and
  `default_retry`.
- `vfskit.os_file`: `FileSystem` and `File` for the local disk, plus
  `safe_os_rename` and `os_copy`.
- `vfskit.os_location`: `Location` for local directories.
- `vfskit.mem_filesystem`: `FileSystem` for the in-memory backend.
- `vfskit.mem_location`: `Location` for in-memory directories.
- `vfskit.mem_file`: `File` for in-memory files.

## Concepts

- **FileSystem**: a backend. `new_file(volume, path)` and
  `new_location(volume, path)` build files and locations from a volume
  and an absolute path. `name()` and `scheme()` describe the backend
  (`"os"` / `"file"` and `"In-Memory Filesystem"` / `"mem"`).
- **Location**: a directory. Its `path()` always starts and ends with
  `/`. It offers `new_file`, `new_location`, `change_dir`, `delete_file`,
  `list`, `list_by_prefix`, `list_by_regex`, `exists`, `uri` and
  `volume`.
- **File**: a file. It offers `read`, `write`, `seek`, `close`, `touch`,
  `exists`, `size`, `last_modified`, `delete`, `copy_to_file`,
  `copy_to_location`, `move_to_file`, `move_to_location`, `name`, `path`
  and `uri`. Files can be used as context managers; leaving the block
  closes them.

Absolute file paths must start with `/` and must not end with `/`.
Absolute location paths must both start and end with `/`. Relative
location paths must end with `/` and must not start with one. A path that
breaks these rules raises `vfskit.paths.PathError`, which is a
`ValueError`.

`list_by_regex` takes a pattern string or a compiled pattern and keeps
names that match anywhere in them.

## Local disk

```python
from vfskit.os_file import FileSystem

fs = FileSystem()
loc = fs.new_location("", "/tmp/reports/")
f = loc.new_file("daily/summary.txt")
f.write(b"all good")
f.close()                      # written data is committed on close

print(f.uri())                 # file:///tmp/reports/daily/summary.txt
print(loc.list_by_prefix("daily/sum"))   # ['summary.txt']
```

Writes go to a temporary file first. When the file is closed, the
temporary file replaces the original. Missing directories are created
when a file is opened. Listing a location that does not exist gives an
empty list.

## In memory

```python
from vfskit.mem_filesystem import FileSystem

fs = FileSystem()
f = fs.new_file("C", "/data/notes.txt")
f.write(b"hello")
f.close()

print(f.read(5))               # b'hello'
print(f.location().list())     # ['notes.txt']
print(f.uri())                 # mem://C/data/notes.txt
```

A new in-memory file does not exist until you call `touch()` on it or
write to it. Data you write becomes readable only after `close()`.
Handles on the same path share the file's data, but each handle keeps
its own cursor. `read` returns `b""` at the end of the file. A `seek` out
of bounds raises `ValueError`. Reading, seeking or deleting a file that
does not exist raises `FileNotFoundError`. An in-memory location always
reports that it exists.

## Copying between backends

```python
from vfskit.mem_filesystem import FileSystem as MemFS
from vfskit.os_file import FileSystem as OsFS

src = MemFS().new_file("", "/in/report.txt")
src.write(b"content")
src.close()

dest_loc = OsFS().new_location("", "/tmp/out/")
copy = src.copy_to_location(dest_loc)
```

Before a copy, the source file's cursor must be at position 0. If it is
not, the copy raises `ValueError`.

## What it does not do

- There are only the two backends shown here. There is no registry that
  looks a backend up by its scheme name, and no remote or cloud storage.
- `retry()` returns `default_retry`, which runs the operation once and
  never retries.
- The in-memory file system keeps nothing after the process ends.
- There is no command-line tool; the package is a library only.