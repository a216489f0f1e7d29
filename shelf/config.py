"""Config management for Shelf.

Reads `config.ini` from the data directory (DATA_DIR env var, defaulting to
the project root).
"""

from __future__ import annotations

import configparser
import dataclasses
import os
import pathlib
from typing import Optional

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]

# DATA_DIR holds all persistent state (config.ini, comics.json, covers/, shelf.log).
DATA_DIR = pathlib.Path(os.environ.get("DATA_DIR", str(PROJECT_ROOT)))
DEFAULT_CONFIG_PATH = DATA_DIR / "config.ini"

DEFAULT_FORMATS = ("zip", "cbz", "cbr")
DEFAULT_IGNORE_PATTERNS = (".DS_Store", "Thumbs.db", "@eaDir")


@dataclasses.dataclass
class LibraryConfig:
    path: pathlib.Path
    name: str = "My Comics"


@dataclasses.dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 5239


@dataclasses.dataclass
class ScannerConfig:
    supported_formats: tuple[str, ...] = DEFAULT_FORMATS
    ignore_patterns: tuple[str, ...] = DEFAULT_IGNORE_PATTERNS


@dataclasses.dataclass
class CoverConfig:
    """When preserve_format is off, covers are always named `<id>.jpg`."""

    preserve_format: bool = True


@dataclasses.dataclass
class ShelfConfig:
    library: LibraryConfig
    server: ServerConfig = dataclasses.field(default_factory=ServerConfig)
    scanner: ScannerConfig = dataclasses.field(default_factory=ScannerConfig)
    covers: CoverConfig = dataclasses.field(default_factory=CoverConfig)
    data_dir: pathlib.Path = DATA_DIR

    @property
    def library_path(self) -> pathlib.Path:
        return self.library.path

    @property
    def server_host(self) -> str:
        return self.server.host

    @property
    def server_port(self) -> int:
        return self.server.port

    @property
    def index_path(self) -> pathlib.Path:
        return self.data_dir / "comics.json"

    @property
    def covers_dir(self) -> pathlib.Path:
        return self.data_dir / "covers"


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def load_config(config_path: Optional[pathlib.Path] = None) -> ShelfConfig:
    """Load configuration from config.ini.

    Defaults to `config.ini` in the data directory.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    parser = configparser.ConfigParser()
    parser.read(path)

    library = LibraryConfig(
        path=pathlib.Path(
            parser.get("library", "path", fallback=str(DATA_DIR / "comics"))
        ).expanduser(),
        name=parser.get("library", "name", fallback="My Comics"),
    )

    server = ServerConfig(
        host=parser.get("server", "host", fallback="0.0.0.0"),
        port=parser.getint("server", "port", fallback=5239),
    )

    scanner = ScannerConfig(
        supported_formats=tuple(
            f.lower().lstrip(".")
            for f in _parse_list(
                parser.get("scanner", "supported_formats", fallback="zip,cbz,cbr")
            )
        ),
        ignore_patterns=_parse_list(
            parser.get(
                "scanner",
                "ignore_patterns",
                fallback=",".join(DEFAULT_IGNORE_PATTERNS),
            )
        ),
    )

    covers = CoverConfig(
        preserve_format=_parse_bool(
            parser.get("covers", "preserve_format", fallback=None), True
        ),
    )

    return ShelfConfig(
        library=library,
        server=server,
        scanner=scanner,
        covers=covers,
        data_dir=path.parent,
    )


def write_default_config(
    config_path: pathlib.Path, library_path: pathlib.Path, library_name: str
) -> None:
    """Write a config.ini pointing at `library_path` with default settings."""
    parser = configparser.ConfigParser()

    parser["library"] = {
        "path": str(library_path.expanduser()),
        "name": library_name,
    }
    parser["server"] = {
        "host": "0.0.0.0",
        "port": "5239",
    }
    parser["scanner"] = {
        "supported_formats": ",".join(DEFAULT_FORMATS),
        "ignore_patterns": ",".join(DEFAULT_IGNORE_PATTERNS),
    }
    parser["covers"] = {
        "preserve_format": "true",
    }

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w") as handle:
        parser.write(handle)


_cached_config: Optional[ShelfConfig] = None


def get_config() -> ShelfConfig:
    """Return the cached config singleton. Loads from disk on first call."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reset_config_cache() -> None:
    """Clear the cached config (useful for tests)."""
    global _cached_config
    _cached_config = None
