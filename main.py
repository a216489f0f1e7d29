"""Shelf CLI entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from shelf import __version__
from shelf.app import create_app, run_server
from shelf.config import DEFAULT_CONFIG_PATH, ShelfConfig, load_config, write_default_config
from shelf.covers import cleanup_orphaned_covers, cover_file
from shelf.errors import IndexPersistFailure
from shelf.index import ComicIndex
from shelf.logging_config import get_logger, setup_logging
from shelf.scanner import LibraryScanner


app = typer.Typer(add_completion=False, help="Shelf comic library server")
logger = get_logger(__name__)


def _ensure_config() -> ShelfConfig:
    try:
        return load_config()
    except FileNotFoundError:
        typer.echo("[ERROR] config.ini not found. Run: shelf init --library /path/to/comics")
        raise typer.Exit(code=1)


def _load_index(config: ShelfConfig) -> ComicIndex:
    index = ComicIndex(config.index_path)
    try:
        index.load()
    except IndexPersistFailure as exc:
        logger.error(f"Comic index is corrupt, refusing to start: {exc}")
        raise typer.Exit(code=1)
    return index


def _reconcile(scanner: LibraryScanner) -> dict:
    try:
        return scanner.reconcile()
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}")
        raise typer.Exit(code=1)


@app.command()
def init(
    library: Path = typer.Option(..., "--library", help="Path to your comics folder"),
    name: str = typer.Option("My Comics", "--name", help="Library name"),
) -> None:
    """Initialize config.ini with default settings."""
    write_default_config(DEFAULT_CONFIG_PATH, library, name)
    typer.echo(f"[OK] Config created at {DEFAULT_CONFIG_PATH}")


@app.command()
def scan() -> None:
    """Index archives that are not in the library yet."""
    config = _ensure_config()
    setup_logging(data_dir=config.data_dir)

    index = _load_index(config)
    stats = _reconcile(LibraryScanner(index, config))

    typer.echo(
        "✓ Scan completed: "
        f"{stats['added']} comics added, "
        f"{stats['skipped']} already indexed, "
        f"{stats['empty']} without images, "
        f"{stats['failed']} failed."
    )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Server host"),
    port: Optional[int] = typer.Option(None, "--port", help="Server port"),
) -> None:
    """Load the index, reconcile the library and start the HTTP server."""
    config = _ensure_config()
    setup_logging(data_dir=config.data_dir)
    logger.info(f"Shelf {__version__}")

    index = _load_index(config)
    server_app = create_app(config, index)

    logger.info("Running initial library scan...")
    stats = _reconcile(server_app.state.scanner)
    logger.info(
        f"Scan complete: {stats['added']} added, {stats['skipped']} already indexed, "
        f"{stats['empty']} without images, {stats['failed']} failed."
    )

    try:
        run_server(server_app, config, host=host, port=port)
    except KeyboardInterrupt:
        pass


@app.command()
def cleanup() -> None:
    """Remove orphaned cover files."""
    config = _ensure_config()
    index = _load_index(config)
    deleted = cleanup_orphaned_covers(index, config)
    typer.echo(f"[INFO] Removed {deleted} orphaned covers")


@app.command()
def stats() -> None:
    """Show library statistics."""
    config = _ensure_config()
    index = _load_index(config)
    comics = index.records()

    total_comics = len(comics)
    total_pages = sum(comic.page_count for comic in comics)
    covers_present = len(
        [c for c in comics if cover_file(c.cover, config.covers_dir).exists()]
    )
    missing = len([c for c in comics if not c.path.exists()])

    typer.echo("Library Statistics:")
    typer.echo(f"  Total comics: {total_comics}")
    typer.echo(f"  Total pages: {total_pages}")
    typer.echo(f"  Covers present: {covers_present} / {total_comics}")
    typer.echo(f"  Archives missing on disk: {missing}")


if __name__ == "__main__":
    app()
