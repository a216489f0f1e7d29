import io
import zipfile
from pathlib import Path
from typing import Dict, Optional

import pytest
from PIL import Image

from shelf.config import LibraryConfig, ShelfConfig
from shelf.index import ComicIndex


def image_bytes(fmt: str = "PNG", color: str = "red") -> bytes:
    """Encode a tiny image in the given Pillow format."""
    buffer = io.BytesIO()
    Image.new("RGB", (10, 10), color=color).save(buffer, format=fmt)
    return buffer.getvalue()


def write_zip(path: Path, entries: Dict[str, Optional[bytes]]) -> Path:
    """Create a zip archive; a None value (or a name ending in '/') adds a directory entry."""
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in entries.items():
            if data is None or name.endswith("/"):
                zf.writestr(name.rstrip("/") + "/", b"")
            else:
                zf.writestr(name, data)
    return path


@pytest.fixture
def library(tmp_path):
    path = tmp_path / "comics"
    path.mkdir()
    return path


@pytest.fixture
def config(tmp_path, library):
    return ShelfConfig(
        library=LibraryConfig(path=library, name="Test Library"),
        data_dir=tmp_path / "data",
    )


@pytest.fixture
def index(config):
    comic_index = ComicIndex(config.index_path)
    comic_index.load()
    return comic_index
