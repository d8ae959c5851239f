import time

import pytest

from vfskit.mem_file import deep_copy, new_file_for
from vfskit.mem_filesystem import FileSystem
from vfskit.os_file import FileSystem as OsFileSystem
from vfskit.paths import PathError


@pytest.fixture
def fs():
    return FileSystem()


@pytest.fixture
def sample_file(fs):
    file = fs.new_file("C", "/test_files/test.txt")
    file.touch()
    return file


def test_zero_byte_read(sample_file):
    assert sample_file.read(0) == b""


def test_read_after_read_without_close(sample_file):
    text = b"hello world!"
    sample_file.write(text)
    sample_file.close()
    assert sample_file.read(len(text)) == text
    assert sample_file.read(len(text)) == b""


def test_read_after_read_with_close(sample_file):
    text = b"hello world!"
    sample_file.write(text)
    sample_file.close()
    first = sample_file.read(len(text))
    sample_file.close()
    second = sample_file.read(len(text))
    assert first == second == text


def test_new_file_same_name(fs):
    first = fs.new_file("", "/path/to/file.txt")
    text = b"hey y'all!"
    first.write(text)
    second = fs.new_file("", "/path/to/file.txt")
    assert second.read(len(text)) == b""
    first.close()
    assert second.read(len(text)) == text


def test_delete(fs):
    new_file = fs.new_file("", "/home/bar.txt")
    new_file.touch()
    other = fs.new_file("", "/foo.txt")
    other.touch()
    assert other.exists() is True
    other.delete()
    assert other.exists() is False


def test_exists(fs, sample_file):
    assert sample_file.exists() is True
    other = fs.new_file("", "/foo.txt")
    other.touch()
    assert other.exists() is True


def test_exists_after_delete(fs):
    other = fs.new_file("", "/test_file/foo.txt")
    other.touch()
    other.delete()
    assert other.exists() is False


def test_new_file_found_again(fs):
    file = fs.new_file("", "/test_file/foo.txt")
    file.touch()
    returned = fs.new_file(file.location().volume(), file.path())
    assert returned.name() == "foo.txt"


def test_seek_bounds(fs):
    file = fs.new_file("", "/home/test_files/subdir/seekTest.txt")
    file.write(b"Hello world!")
    with pytest.raises(ValueError):
        file.seek(1, 1)
    assert file.read(1) == b""
    file.close()

    assert file.seek(0, 0) == 0
    assert file.read(1) == b"H"
    with pytest.raises(ValueError):
        file.seek(-2, 1)
    assert file.seek(1, 1) == 2


def test_invalid_whence(sample_file):
    sample_file.write(b"abc")
    sample_file.close()
    sample_file.read(1)
    with pytest.raises(ValueError):
        sample_file.seek(0, 7)


def test_name_to_uri(fs):
    file = fs.new_file("C", "/test_files/examples/foo.txt")
    file.touch()
    returned = fs.new_file("C", "/test_files/examples/foo.txt")
    returned.touch()
    assert returned.exists() is True
    assert returned.location().uri() == "mem://C/test_files/examples/"
    assert returned.uri() == "mem://C/test_files/examples/foo.txt"


def test_read_before_close_sees_nothing(sample_file):
    text = b"hello world"
    sample_file.write(text)
    assert sample_file.read(len(text)) == b""


def test_seek_close_read(fs):
    text = b"new file"
    file = fs.new_file("", "/test_files/new.txt")
    file.write(text)
    assert file.seek(0, 0) == 0
    file.close()
    assert file.read(len(text)) == text
    file.close()
    assert file.exists() is True
    file.delete()
    assert file.exists() is False


def test_copy_to_location(fs, sample_file):
    new_file = fs.new_file("", "/home/foo.txt")
    text = b"hello world!"
    sample_file.write(text)
    sample_file.close()

    copied = sample_file.copy_to_location(new_file.location())
    copied.touch()
    assert copied.path() == "/home/test.txt"
    assert copied.read(len(text)) == sample_file.read(len(text)) == text


def test_copy_to_location_overwrites(fs, sample_file):
    new_file = fs.new_file("C", "/home/test.txt")
    new_file.touch()
    new_file.write(b"goodbye world!")
    new_file.close()

    text = b"hello world!"
    sample_file.write(text)
    sample_file.close()

    copied = sample_file.copy_to_location(new_file.location())
    copied.close()
    assert copied.path() == "/home/test.txt"
    assert copied.read(len(text)) == b"hello world!"


def test_copy_to_nil_file(fs, sample_file):
    with pytest.raises(PathError):
        fs.new_file("", "nilFile.txt")
    with pytest.raises(ValueError):
        sample_file.copy_to_file(None)


def test_copy_to_location_os(tmp_path, sample_file):
    text = b"hello world!"
    sample_file.write(text)
    sample_file.close()

    os_file = OsFileSystem().new_file("", str(tmp_path / "osFile.txt"))
    os_file.write(b"")
    assert os_file.exists() is True

    copied = sample_file.copy_to_location(os_file.location())
    copied.close()
    assert sample_file.path() == "/test_files/test.txt"
    assert copied.path() == str(tmp_path / "test.txt")
    assert copied.read(len(text)) == text
    assert sample_file.read(len(text)) == text


def test_copy_to_file(fs, sample_file):
    text = b"hello world"
    other = fs.new_file("", "/test.txt")
    assert sample_file.write(text) == len(text)
    sample_file.close()
    other.touch()
    sample_file.copy_to_file(other)

    first = sample_file.read(len(text))
    again = fs.new_file("", "/test.txt")
    assert again.read(len(text)) == first == text


def test_copy_to_file_os(tmp_path, sample_file):
    os_file = OsFileSystem().new_file("", str(tmp_path / "osFile.txt"))
    os_file.write(b"")
    assert sample_file.write(b"Hello World!") == 12
    sample_file.close()

    sample_file.copy_to_file(os_file)
    os_file.close()
    assert sample_file.size() == os_file.size() == 12


def test_empty_copy_to_file(fs):
    other = fs.new_file("", "/some/path/otherfile.txt")
    other.write(b"yooooooooooo")
    other.close()

    empty = fs.new_file("C", "/test_files/empty.txt")
    empty.write(b"")
    empty.close()
    empty.copy_to_file(other)

    assert other.size() == 0
    assert other.read() == b""


def test_copy_missing_file_raises(fs):
    missing = fs.new_file("", "/nowhere/missing.txt")
    with pytest.raises(FileNotFoundError):
        missing.copy_to_location(fs.new_location("", "/else/"))


def test_move_to_location(fs, sample_file):
    new_file = fs.new_file("", "/otherDir/foo.txt")
    new_file.touch()
    moved = new_file.move_to_location(sample_file.location())
    assert new_file.exists() is False
    new_file.touch()
    assert moved.name() == "foo.txt"
    assert moved.location().path() == "/test_files/"


def test_move_to_location_existing_name(fs):
    text = b"Who ya calling pinhead?"
    new_file = fs.new_file("", "/otherDir/foo.txt")
    new_file.touch()

    other = fs.new_file("", "/thisDir/foo.txt")
    other.write(text)
    other.close()

    moved = other.move_to_location(new_file.location())
    assert moved.path() == "/otherDir/foo.txt"
    assert other.exists() is False
    assert moved.read(len(text)) == text


def test_move_to_file(fs, sample_file):
    data = b"Hello World!"
    new_file = fs.new_file("", "/samples/test.txt")
    new_file.touch()
    sample_file.write(data)
    sample_file.close()

    sample_file.move_to_file(new_file)
    again = fs.new_file("", "/samples/test.txt")
    assert sample_file.exists() is False
    assert again.read(len(data)) == data
    assert again.path() == "/samples/test.txt"


def test_move_to_file_different_name(fs, sample_file):
    data = b"Hello World!"
    new_file = fs.new_file("", "/samples/diffName.txt")
    new_file.touch()
    sample_file.write(data)
    sample_file.close()

    sample_file.move_to_file(new_file)
    assert sample_file.exists() is False
    assert new_file.read(len(data)) == data
    assert new_file.path() == "/samples/diffName.txt"


def test_write_returns_length(sample_file):
    data = b"I'm fed up with this world"
    assert sample_file.write(data) == len(data)


def test_read_in_chunks(fs):
    data = b"Hello World!"
    file = fs.new_file("", "/fileToRead.txt")
    assert file.write(data) == len(data)
    file.close()
    assert file.read(5) == data[:5]
    assert file.read(5) == data[5:10]
    assert file.read(5) == data[10:]
    assert file.read(5) == b""


def test_write_then_read_no_close(fs):
    text = b"new file"
    file = fs.new_file("", "/test_files/new.txt")
    file.write(text)
    assert file.seek(0, 0) == 0
    assert file.read(len(text)) == b""
    file.close()
    assert file.read(len(text)) == text
    assert file.exists() is True
    file.delete()
    assert file.exists() is False


def test_last_modified_advances(sample_file):
    sample_file.write(b"Hello World!")
    first = sample_file.last_modified()
    time.sleep(0.05)
    sample_file.write(b"hey!")
    second = sample_file.last_modified()
    assert second > first


def test_name(fs):
    file = fs.new_file("", "/test_files/lots/of/directories/here/we/go/test.txt")
    file.touch()
    assert file.name() == "test.txt"


def test_size(fs, sample_file):
    other = fs.new_file("", "/test.txt")
    sample_file.write(bytes(64))
    other.write(bytes(32))
    sample_file.close()
    other.close()
    assert sample_file.size() == 64
    assert other.size() == 32


def test_path(fs):
    fs.new_file("", "/home/some/directory/test_files/test.txt")
    fs.new_file("", "/test_files/bar.txt")
    file = fs.new_file("", "/directory/bar.txt")
    file.touch()
    fs.new_file("", "/directory/test_files/test.txt")
    assert file.path() == "/directory/bar.txt"


def test_uri(fs):
    file = fs.new_file("C", "/test_files/lots/of/directories/here/we/go/test.txt")
    file.touch()
    assert file.uri() == "mem://C/test_files/lots/of/directories/here/we/go/test.txt"


def test_str(fs):
    file = fs.new_file("", "/test_files/lots/of/directories/here/we/go/test.txt")
    file.touch()
    assert str(file) == "mem:///test_files/lots/of/directories/here/we/go/test.txt"


def test_missing_file_errors(fs):
    missing = fs.new_file("", "/nothing/here.txt")
    with pytest.raises(FileNotFoundError):
        missing.read(1)
    with pytest.raises(FileNotFoundError):
        missing.delete()
    with pytest.raises(FileNotFoundError):
        missing.size()
    with pytest.raises(FileNotFoundError):
        missing.last_modified()


def test_new_file_for(fs):
    location = fs.new_location("", "/a/b/")
    file = new_file_for("x.txt", location)
    assert file.path() == "/a/b/x.txt"
    assert file.exists() is False
    file.write(b"abc")
    file.close()
    assert file.read() == b"abc"


def test_deep_copy_shares_state(fs):
    source = fs.new_file("", "/d/a.txt")
    source.write(b"xy")
    source.close()
    copy = deep_copy(fs.fs_map[""]["/d/a.txt"])
    assert copy.path() == "/d/a.txt"
    assert copy.read() == b"xy"
    copy.delete()
    assert source.exists() is False


def test_context_manager_commits(fs):
    file = fs.new_file("", "/ctx/file.txt")
    with file:
        file.write(b"data")
    assert file.read() == b"data"