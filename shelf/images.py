"""Image entry classification.

The ordering produced here defines page numbering: page N is the Nth image
entry by plain code-point order of the entry name (identical to byte-wise
UTF-8 order, independent of locale).
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Iterable, List

from .archive import ArchiveEntry

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def _suffix(name: str) -> str:
    return PurePosixPath(name).suffix.lower()


def is_image(name: str) -> bool:
    return _suffix(name) in IMAGE_EXTENSIONS


def classify_entries(entries: Iterable[ArchiveEntry]) -> List[ArchiveEntry]:
    """Return the image entries of an archive in page order."""
    pages = [e for e in entries if not e.is_dir and is_image(e.name)]
    pages.sort(key=lambda e: e.name)
    return pages


def content_type_for(name: str) -> str:
    return _CONTENT_TYPES.get(_suffix(name), DEFAULT_CONTENT_TYPE)
