"""Archive handling utilities for Shelf.

Provides a unified, read-only interface over Zip (zip/cbz) and Rar (cbr)
archives. Listing entries never extracts content; bytes are only read for
an explicitly named entry.
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import List, NamedTuple, Protocol

import rarfile

from .errors import ArchiveUnreadable


ZIP_SUFFIXES = {".zip", ".cbz"}
RAR_SUFFIXES = {".rar", ".cbr"}


class ArchiveEntry(NamedTuple):
    name: str
    is_dir: bool
    size: int


class Archive(Protocol):
    path: Path

    def entries(self) -> List[ArchiveEntry]:
        ...

    def read(self, name: str) -> bytes:
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> "Archive":
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...


class ZipArchiveWrapper:
    def __init__(self, path: Path):
        self.path = path
        self.zf = zipfile.ZipFile(path, mode="r")

    def entries(self) -> List[ArchiveEntry]:
        return [
            ArchiveEntry(info.filename, info.is_dir(), info.file_size)
            for info in self.zf.infolist()
        ]

    def read(self, name: str) -> bytes:
        try:
            return self.zf.read(name)
        except Exception as exc:
            raise ArchiveUnreadable(f"Cannot read {name!r} from {self.path.name}: {exc}") from exc

    def close(self) -> None:
        self.zf.close()

    def __enter__(self) -> "ZipArchiveWrapper":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class RarArchiveWrapper:
    def __init__(self, path: Path):
        self.path = path
        self.rf = rarfile.RarFile(path, mode="r")

    def entries(self) -> List[ArchiveEntry]:
        return [
            ArchiveEntry(info.filename, info.is_dir(), info.file_size)
            for info in self.rf.infolist()
        ]

    def read(self, name: str) -> bytes:
        try:
            return self.rf.read(name)
        except Exception as exc:
            raise ArchiveUnreadable(f"Cannot read {name!r} from {self.path.name}: {exc}") from exc

    def close(self) -> None:
        self.rf.close()

    def __enter__(self) -> "RarArchiveWrapper":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def open_archive(path: Path) -> Archive:
    """Open an archive, detecting format by extension with fallback.

    Tries the expected format first (zip/cbz -> zip, rar/cbr -> rar).
    If that fails, tries the other format (handles misnamed files).
    Raises ArchiveUnreadable if neither works.
    """
    suffix = path.suffix.lower()
    if suffix in RAR_SUFFIXES:
        primary, fallback = RarArchiveWrapper, ZipArchiveWrapper
    else:
        primary, fallback = ZipArchiveWrapper, RarArchiveWrapper

    try:
        return primary(path)
    except FileNotFoundError as exc:
        raise ArchiveUnreadable(f"File not found: {path}") from exc
    except Exception as exc:
        first_error = exc

    try:
        return fallback(path)
    except Exception:
        raise ArchiveUnreadable(f"Cannot open {path.name}: {first_error}") from first_error
