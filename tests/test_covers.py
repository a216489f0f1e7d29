"""Tests for cover extraction helpers."""

from shelf.covers import cleanup_orphaned_covers, cover_file, cover_suffix
from shelf.models import ComicRecord, utc_now

from conftest import image_bytes


def test_cover_suffix_follows_image_content():
    assert cover_suffix(image_bytes("PNG"), "001.jpg", True) == ".png"
    assert cover_suffix(image_bytes("JPEG"), "001.png", True) == ".jpg"
    assert cover_suffix(image_bytes("GIF"), "001.jpg", True) == ".gif"


def test_cover_suffix_falls_back_to_entry_name():
    assert cover_suffix(b"not really an image", "dir/001.WEBP", True) == ".webp"


def test_cover_suffix_legacy_jpg():
    assert cover_suffix(image_bytes("PNG"), "001.png", False) == ".jpg"


def test_cover_file_maps_public_reference(tmp_path):
    assert cover_file("/covers/abc.png", tmp_path) == tmp_path / "abc.png"


def test_cleanup_removes_only_orphans(config, index):
    config.covers_dir.mkdir(parents=True)
    record = ComicRecord(
        id="keep-me",
        file_name="foo.zip",
        file_path="/comics/foo.zip",
        title="foo",
        cover="/covers/keep-me.png",
        page_count=1,
        added_at=utc_now(),
    )
    index.append(record)
    (config.covers_dir / "keep-me.png").write_bytes(b"x")
    (config.covers_dir / "orphan.jpg").write_bytes(b"x")

    assert cleanup_orphaned_covers(index, config) == 1
    assert [p.name for p in config.covers_dir.iterdir()] == ["keep-me.png"]


def test_cover_suffix_survives_decompression_bomb_check(monkeypatch):
    monkeypatch.setattr("PIL.Image.MAX_IMAGE_PIXELS", 10)
    assert cover_suffix(image_bytes("PNG"), "001.png", True) == ".png"
    assert cover_suffix(image_bytes("PNG"), "001.jpg", True) == ".jpg"
