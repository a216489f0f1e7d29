"""Cover extraction for Shelf.

Copies the first page of an archive to `covers/{comic_id}{ext}` and returns
the public path it is served under (`/covers/{comic_id}{ext}`).
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path, PurePosixPath
from typing import Optional, Sequence

from PIL import Image, UnidentifiedImageError

from .archive import Archive, ArchiveEntry
from .config import ShelfConfig
from .errors import CoverWriteFailure
from .index import ComicIndex
from .logging_config import get_logger

logger = get_logger(__name__)

COVERS_URL_PREFIX = "/covers"
LEGACY_COVER_SUFFIX = ".jpg"

_FORMAT_SUFFIXES = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "GIF": ".gif",
    "WEBP": ".webp",
}


def _sniff_suffix(data: bytes) -> Optional[str]:
    """Return the file suffix matching the actual image codec, if Pillow knows it."""
    try:
        with Image.open(BytesIO(data)) as im:
            return _FORMAT_SUFFIXES.get(im.format or "")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
        return None


def cover_suffix(data: bytes, entry_name: str, preserve_format: bool) -> str:
    if not preserve_format:
        return LEGACY_COVER_SUFFIX
    return _sniff_suffix(data) or PurePosixPath(entry_name).suffix.lower()


def cover_url(file_name: str) -> str:
    return f"{COVERS_URL_PREFIX}/{file_name}"


def extract_cover(
    comic_id: str,
    pages: Sequence[ArchiveEntry],
    archive: Archive,
    config: ShelfConfig,
) -> str:
    """Write the first page of `pages` as the cover of `comic_id`.

    `pages` must be non-empty. Raises CoverWriteFailure if the file cannot be
    written; ArchiveUnreadable from reading the entry propagates unchanged.
    """
    first = pages[0]
    data = archive.read(first.name)

    suffix = cover_suffix(data, first.name, config.covers.preserve_format)
    file_name = f"{comic_id}{suffix}"
    cover_path = config.covers_dir / file_name
    try:
        cover_path.parent.mkdir(parents=True, exist_ok=True)
        cover_path.write_bytes(data)
    except OSError as exc:
        raise CoverWriteFailure(f"Cannot write cover {cover_path}: {exc}") from exc

    return cover_url(file_name)


def cover_file(cover: str, covers_dir: Path) -> Path:
    """Map a public cover reference back to its file in `covers_dir`."""
    return covers_dir / PurePosixPath(cover).name


def remove_cover(cover: str, covers_dir: Path) -> None:
    path = cover_file(cover, covers_dir)
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.error(f"Failed to delete cover {path}: {exc}")


def cleanup_orphaned_covers(index: ComicIndex, config: ShelfConfig) -> int:
    """Remove cover files that don't belong to any indexed comic.

    Returns count of deleted covers.
    """
    covers_dir = config.covers_dir
    if not covers_dir.exists():
        return 0

    valid_ids = {record.id for record in index.records()}
    deleted = 0
    for path in covers_dir.iterdir():
        if not path.is_file() or path.stem in valid_ids:
            continue
        try:
            path.unlink()
            deleted += 1
        except OSError as exc:
            logger.error(f"Failed to delete orphaned cover {path}: {exc}")
    return deleted
