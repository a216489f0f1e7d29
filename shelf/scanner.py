"""Library reconciliation for Shelf.

Compares the archives in the library directory against the comic index and
indexes every archive that has no record yet. Records are never updated or
removed here: a deleted archive keeps its record, and a changed archive
keeps its original page count until it is re-indexed.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Iterable, List

from .archive import open_archive
from .config import ShelfConfig
from .covers import extract_cover, remove_cover
from .errors import ArchiveUnreadable, CoverWriteFailure, IndexPersistFailure, NoImageEntries
from .images import classify_entries
from .index import ComicIndex
from .logging_config import get_logger
from .models import ComicRecord, new_comic_id, utc_now

logger = get_logger(__name__)


def _should_ignore(name: str, ignore_patterns: Iterable[str]) -> bool:
    """Check if a file should be ignored based on patterns or macOS temp files."""
    if name.startswith("._"):
        return True
    return name in ignore_patterns


class LibraryScanner:
    """Creates missing index records for the archives in the library directory.

    Calls to reconcile() are serialized so two overlapping passes can never
    both index the same archive.
    """

    def __init__(self, index: ComicIndex, config: ShelfConfig):
        self.index = index
        self.config = config
        self._gate = threading.Lock()
        self._suffixes = {f".{fmt}" for fmt in config.scanner.supported_formats}

    def is_comic_file(self, path: Path) -> bool:
        return path.suffix.lower() in self._suffixes

    def list_archives(self) -> List[Path]:
        """Return the archive files directly under the library directory, sorted by name."""
        root = self.config.library_path
        if not root.is_dir():
            raise FileNotFoundError(f"Library path does not exist: {root}")

        ignore_patterns = self.config.scanner.ignore_patterns
        return sorted(
            path
            for path in root.iterdir()
            if path.is_file()
            and not _should_ignore(path.name, ignore_patterns)
            and self.is_comic_file(path)
        )

    def reconcile(self) -> dict:
        """Index every archive that has no record yet.

        :return: Dictionary with scan statistics (added, skipped, empty, failed).
        """
        with self._gate:
            stats = {"added": 0, "skipped": 0, "empty": 0, "failed": 0}

            for path in self.list_archives():
                if self.index.find_by_file_name(path.name) is not None:
                    stats["skipped"] += 1
                    continue

                try:
                    record = self.build_record(path)
                except NoImageEntries:
                    logger.debug(f"- {path.name} - no images, not indexed")
                    stats["empty"] += 1
                    continue
                except ArchiveUnreadable as exc:
                    logger.warning(f"✗ {path.name} - UNREADABLE: {exc}")
                    stats["failed"] += 1
                    continue
                except CoverWriteFailure as exc:
                    logger.error(f"✗ {path.name} - {exc}")
                    stats["failed"] += 1
                    continue
                except Exception as exc:
                    logger.exception(f"✗ {path.name} - unexpected error: {exc}")
                    stats["failed"] += 1
                    continue

                try:
                    self.index.append(record)
                except IndexPersistFailure as exc:
                    logger.error(f"✗ {path.name} - {exc}")
                    remove_cover(record.cover, self.config.covers_dir)
                    stats["failed"] += 1
                    continue

                logger.info(f"✓ {path.name} ({record.page_count} pages)")
                stats["added"] += 1

            return stats

    def build_record(self, path: Path) -> ComicRecord:
        """Open `path`, extract its cover and return a complete record.

        Raises ArchiveUnreadable, NoImageEntries or CoverWriteFailure; nothing
        is added to the index here.
        """
        with open_archive(path) as archive:
            pages = classify_entries(archive.entries())
            if not pages:
                raise NoImageEntries(f"No images found in archive {path.name}")

            comic_id = new_comic_id()
            cover = extract_cover(comic_id, pages, archive, self.config)

        return ComicRecord(
            id=comic_id,
            file_name=path.name,
            file_path=str(path.resolve()),
            title=path.stem,
            cover=cover,
            page_count=len(pages),
            added_at=utc_now(),
            tags=[],
        )
