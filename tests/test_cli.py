"""Tests for the typer CLI."""

import pytest
from typer.testing import CliRunner

import main

from conftest import write_zip

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    path = tmp_path / "data" / "config.ini"
    monkeypatch.setattr("main.DEFAULT_CONFIG_PATH", path)
    monkeypatch.setattr("shelf.config.DEFAULT_CONFIG_PATH", path)
    monkeypatch.setattr("main.setup_logging", lambda **kwargs: None)
    return path


def test_commands_require_config(config_path):
    result = runner.invoke(main.app, ["scan"])
    assert result.exit_code == 1
    assert "config.ini not found" in result.output


def test_init_scan_and_stats(config_path, library):
    write_zip(library / "foo.zip", {"a.jpg": b"a", "b.jpg": b"b"})
    write_zip(library / "empty.zip", {"readme.txt": b"hi"})

    result = runner.invoke(main.app, ["init", "--library", str(library)])
    assert result.exit_code == 0
    assert config_path.exists()

    result = runner.invoke(main.app, ["scan"])
    assert result.exit_code == 0
    assert "1 comics added" in result.output
    assert "1 without images" in result.output

    result = runner.invoke(main.app, ["stats"])
    assert result.exit_code == 0
    assert "Total comics: 1" in result.output
    assert "Total pages: 2" in result.output
    assert "Covers present: 1 / 1" in result.output


def test_corrupt_index_is_fatal(config_path, library):
    runner.invoke(main.app, ["init", "--library", str(library)])
    (config_path.parent / "comics.json").write_text("[{broken")

    result = runner.invoke(main.app, ["scan"])
    assert result.exit_code == 1


def test_cleanup_removes_orphans(config_path, library):
    runner.invoke(main.app, ["init", "--library", str(library)])
    covers = config_path.parent / "covers"
    covers.mkdir(parents=True)
    (covers / "stale.jpg").write_bytes(b"x")

    result = runner.invoke(main.app, ["cleanup"])
    assert result.exit_code == 0
    assert "Removed 1 orphaned covers" in result.output
    assert not (covers / "stale.jpg").exists()
