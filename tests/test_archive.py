"""Tests for archive reading."""

import pytest

from shelf.archive import ArchiveEntry, ZipArchiveWrapper, open_archive
from shelf.errors import ArchiveUnreadable

from conftest import write_zip


def test_entries_lists_files_and_directories(tmp_path):
    path = write_zip(tmp_path / "foo.zip", {"cover/": None, "a.jpg": b"aaaa", "b.png": b"bb"})

    with open_archive(path) as archive:
        entries = archive.entries()

    by_name = {entry.name: entry for entry in entries}
    assert by_name["cover/"] == ArchiveEntry("cover/", True, 0)
    assert by_name["a.jpg"] == ArchiveEntry("a.jpg", False, 4)
    assert by_name["b.png"] == ArchiveEntry("b.png", False, 2)


def test_read_returns_entry_bytes(tmp_path):
    path = write_zip(tmp_path / "foo.cbz", {"a.jpg": b"page-a"})

    with open_archive(path) as archive:
        assert archive.read("a.jpg") == b"page-a"


def test_read_unknown_entry_raises(tmp_path):
    path = write_zip(tmp_path / "foo.zip", {"a.jpg": b"page-a"})

    with open_archive(path) as archive:
        with pytest.raises(ArchiveUnreadable):
            archive.read("missing.jpg")


def test_corrupt_archive_raises(tmp_path):
    path = tmp_path / "broken.zip"
    path.write_bytes(b"this is not an archive")

    with pytest.raises(ArchiveUnreadable):
        open_archive(path)


def test_missing_archive_raises(tmp_path):
    with pytest.raises(ArchiveUnreadable):
        open_archive(tmp_path / "nope.zip")


def test_misnamed_zip_opens_through_fallback(tmp_path):
    """A zip file with a .cbr extension is still readable."""
    path = write_zip(tmp_path / "mislabeled.cbr", {"a.jpg": b"page-a"})

    with open_archive(path) as archive:
        assert isinstance(archive, ZipArchiveWrapper)
        assert [e.name for e in archive.entries()] == ["a.jpg"]
