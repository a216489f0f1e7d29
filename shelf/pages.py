"""Page retrieval: comic lookup and single-page extraction.

Page order is re-derived from the archive on every request; the page count
stored in the index is never used for bounds checking.
"""

from __future__ import annotations

from typing import NamedTuple

from .archive import open_archive
from .errors import ArchiveMissing, ComicNotFound, InvalidPageIndex
from .images import classify_entries, content_type_for
from .index import ComicIndex
from .logging_config import get_logger

logger = get_logger(__name__)


class PageImage(NamedTuple):
    data: bytes
    content_type: str
    name: str


class PageService:
    def __init__(self, index: ComicIndex):
        self.index = index

    def get_page(self, comic_id: str, page_index: int) -> PageImage:
        """Return the image at 0-based `page_index` of comic `comic_id`.

        Raises ComicNotFound, ArchiveMissing, InvalidPageIndex, or
        ArchiveUnreadable when the archive cannot be opened or read.
        """
        comic = self.index.find_by_id(comic_id)
        if comic is None:
            raise ComicNotFound(f"Comic not found: {comic_id}")

        path = comic.path
        if not path.is_file():
            logger.warning(f"Archive missing on disk for {comic_id}: {path}")
            raise ArchiveMissing(f"File not found: {path}")

        with open_archive(path) as archive:
            pages = classify_entries(archive.entries())
            if not 0 <= page_index < len(pages):
                raise InvalidPageIndex(
                    f"Page {page_index} out of range for {comic.file_name} ({len(pages)} pages)"
                )
            entry = pages[page_index]
            data = archive.read(entry.name)

        logger.debug(f"{comic.file_name} page {page_index} -> {entry.name} ({len(data)} bytes)")
        return PageImage(data, content_type_for(entry.name), entry.name)
