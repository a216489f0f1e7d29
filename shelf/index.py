"""Durable comic index.

The whole collection lives in memory as an immutable tuple and on disk as a
single JSON array, rewritten in full (temp file + atomic rename) on every
append. Readers use whatever tuple is current; writers are serialized.
"""

from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from .errors import IndexPersistFailure
from .logging_config import get_logger
from .models import ComicRecord

logger = get_logger(__name__)

_records_adapter = TypeAdapter(List[ComicRecord])


class ComicIndex:
    """In-memory mirror of the comic index file."""

    def __init__(self, path: Path):
        self.path = path
        self._records: Tuple[ComicRecord, ...] = ()
        self._write_lock = threading.Lock()

    def load(self) -> None:
        """Read the snapshot from disk.

        A missing file initializes (and persists) an empty index. A file that
        exists but cannot be parsed raises IndexPersistFailure.
        """
        with self._write_lock:
            if not self.path.exists():
                logger.info(f"No index at {self.path}, creating an empty one")
                self._write_snapshot(())
                self._records = ()
                return

            try:
                records = _records_adapter.validate_json(self.path.read_bytes())
            except (OSError, ValidationError) as exc:
                raise IndexPersistFailure(f"Cannot load index {self.path}: {exc}") from exc

            self._records = tuple(records)
            logger.info(f"Loaded {len(self._records)} comics from {self.path.name}")

    def records(self) -> Tuple[ComicRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def find_by_file_name(self, file_name: str) -> Optional[ComicRecord]:
        for record in self._records:
            if record.file_name == file_name:
                return record
        return None

    def find_by_id(self, comic_id: str) -> Optional[ComicRecord]:
        for record in self._records:
            if record.id == comic_id:
                return record
        return None

    def append(self, record: ComicRecord) -> None:
        """Add a record and persist the full snapshot as one unit.

        The in-memory collection only changes once the snapshot is on disk, so
        a failed write leaves both states as they were.
        """
        with self._write_lock:
            updated = self._records + (record,)
            self._write_snapshot(updated)
            self._records = updated

    def _write_snapshot(self, records: Tuple[ComicRecord, ...]) -> None:
        payload = _records_adapter.dump_json(list(records), by_alias=True, indent=2)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise IndexPersistFailure(f"Cannot write index {self.path}: {exc}") from exc
