"""Integration tests for the swbrowse command line.

Runs the real Typer app through :class:`~typer.testing.CliRunner`, with the
configuration and cache directories isolated to ``tmp_path`` and the HTTP
layer replaced by the fake catalog's :class:`httpx.MockTransport`. The disk
cache is real, so consecutive invocations share cached responses the same
way separate program runs do.
"""

from __future__ import annotations

import functools
import json
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from swbrowse import __version__
from swbrowse.app import app
from swbrowse.client import SyncClient
from swbrowse.config import load_global_config


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def catalog(fake_catalog, isolated_config: Path, monkeypatch: pytest.MonkeyPatch):
    """Route every client the CLI opens through the fake catalog."""
    monkeypatch.setattr(
        "swbrowse.commands.browse.SyncClient",
        functools.partial(SyncClient, transport=fake_catalog.transport),
    )
    return fake_catalog


def _invoke(runner: CliRunner, *args: str):
    return runner.invoke(app, ["--no-color", *args])


# ---------------------------------------------------------------------------
# Root options
# ---------------------------------------------------------------------------


class TestRoot:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"swbrowse {__version__}" in result.output

    def test_categories(self, runner: CliRunner, isolated_config: Path) -> None:
        result = _invoke(runner, "--plain", "categories")
        assert result.exit_code == 0
        lines = result.output.strip().split("\n")
        assert lines[0] == "category"
        assert {"planets", "films", "people", "starships", "vehicles", "species"} <= set(lines)


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


class TestList:
    def test_default_category_first_page(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "--plain", "list")
        assert result.exit_code == 0, result.output
        assert "1\t1\tpeople-1" in result.output
        assert "10\t10\tpeople-10" in result.output
        assert "Page 1 of 9 (82 total)" in result.output
        assert "swbrowse list people --page 2" in result.output

    def test_numbering_continues_on_later_pages(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "--plain", "list", "people", "--page", "9")
        assert result.exit_code == 0, result.output
        assert "81\t81\tpeople-81" in result.output
        assert "Page 9 of 9" in result.output
        assert "--page 10" not in result.output

    def test_films_use_title(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "--plain", "list", "films")
        assert "1\t1\tfilms-1" in result.output

    def test_json_output(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "--json", "-q", "list", "planets")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["category"] == "planets"
        assert data["count"] == 3
        assert data["total_pages"] == 1
        assert len(data["results"]) == 3

    def test_second_run_served_from_disk_cache(self, runner: CliRunner, catalog) -> None:
        assert _invoke(runner, "list", "planets").exit_code == 0
        assert _invoke(runner, "list", "planets").exit_code == 0
        assert len(catalog.requests) == 1

    def test_max_age_zero_forces_refetch(self, runner: CliRunner, catalog) -> None:
        _invoke(runner, "list", "planets")
        _invoke(runner, "--max-age", "0", "list", "planets")
        assert len(catalog.requests) == 2

    def test_no_cache_bypasses_store(self, runner: CliRunner, catalog, isolated_config: Path) -> None:
        _invoke(runner, "--no-cache", "list", "planets")
        _invoke(runner, "--no-cache", "list", "planets")
        assert len(catalog.requests) == 2
        stats = json.loads(_invoke(runner, "--json", "-q", "cache", "stats").output)
        assert stats["size"] == 0

    def test_verbose_reports_cache_hit(self, runner: CliRunner, catalog) -> None:
        _invoke(runner, "list", "species")
        result = _invoke(runner, "-v", "list", "species")
        assert "Cache hit: http://localhost:3001/api/species?page=1" in result.output

    def test_unknown_category_exit_2(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "list", "droids")
        assert result.exit_code == 2
        assert "Unknown category 'droids'" in result.output
        assert catalog.requests == []

    def test_page_zero_exit_2(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "list", "people", "--page", "0")
        assert result.exit_code == 2

    def test_page_past_end_exit_4(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "list", "starships", "--page", "3")
        assert result.exit_code == 4
        assert "HTTP 404" in result.output

    def test_server_down_exit_6(self, runner: CliRunner, catalog) -> None:
        catalog.fail_with = httpx.ConnectError("Connection refused")
        result = _invoke(runner, "list")
        assert result.exit_code == 6
        assert "Connection failed" in result.output

    def test_server_error_exit_5(self, runner: CliRunner, catalog) -> None:
        catalog.fail_with = httpx.Response(500, json={"detail": "database on fire"})
        result = _invoke(runner, "list")
        assert result.exit_code == 5
        assert "database on fire" in result.output


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


class TestShow:
    def test_show_renders_references(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "--plain", "show", "people", "1")
        assert result.exit_code == 0, result.output
        assert "name\tLuke Skywalker" in result.output
        assert "homeworld\tplanets/1" in result.output
        assert "films\tfilms/1, films/2" in result.output
        assert "url\thttp://localhost:3001/api/people/1/" in result.output

    def test_show_accepts_slash_form(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "--plain", "show", "planets/2")
        assert result.exit_code == 0, result.output
        assert "name\tplanets-2" in result.output

    def test_show_json_is_raw(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "--json", "show", "people", "1")
        data = json.loads(result.output)
        assert data["homeworld"] == "http://localhost:3001/api/planets/1/"

    def test_show_missing_id_exit_2(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "show", "people")
        assert result.exit_code == 2
        assert catalog.requests == []

    def test_show_unknown_entity_exit_4(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "show", "vehicles", "404")
        assert result.exit_code == 4


# ---------------------------------------------------------------------------
# cache
# ---------------------------------------------------------------------------


class TestCacheCommands:
    def test_stats_after_browsing(self, runner: CliRunner, catalog, isolated_config: Path) -> None:
        _invoke(runner, "list", "films")
        _invoke(runner, "show", "films", "2")

        result = _invoke(runner, "--json", "-q", "cache", "stats")
        assert result.exit_code == 0, result.output
        stats = json.loads(result.output)
        assert stats["backend"] == "disk"
        assert stats["size"] == 2
        assert stats["max_age_seconds"] == 3600
        assert stats["directory"].startswith(str(isolated_config / "cache"))
        assert stats["enabled"] is True
        assert stats["persist"] is True

    def test_stats_without_persistence(self, runner: CliRunner, catalog) -> None:
        _invoke(runner, "list", "films")
        _invoke(runner, "config", "set", "cache.persist", "false")

        stats = json.loads(_invoke(runner, "--json", "-q", "cache", "stats").output)
        assert stats["backend"] == "memory"
        assert stats["size"] == 0
        assert stats["persist"] is False

    def test_stats_reflects_max_age_flag(self, runner: CliRunner, isolated_config: Path) -> None:
        stats = json.loads(_invoke(runner, "--json", "-q", "--max-age", "60", "cache", "stats").output)
        assert stats["max_age_seconds"] == 60

    def test_show_fresh_entry(self, runner: CliRunner, catalog) -> None:
        _invoke(runner, "list", "planets")

        result = _invoke(runner, "--json", "-q", "cache", "show", "/planets?page=1")
        assert result.exit_code == 0, result.output
        entry = json.loads(result.output)
        assert entry["key"] == "http://localhost:3001/api/planets?page=1"
        assert entry["fresh"] is True
        assert 0 <= entry["age_seconds"] < 3600
        assert entry["data"]["count"] == 3
        assert len(catalog.requests) == 1

    def test_show_entry_under_zero_window(self, runner: CliRunner, catalog) -> None:
        _invoke(runner, "show", "films", "1")

        result = _invoke(runner, "--json", "-q", "--max-age", "0", "cache", "show", "/films/1")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["fresh"] is False
        assert len(catalog.requests) == 1

    def test_show_missing_entry_exit_4(self, runner: CliRunner, catalog) -> None:
        result = _invoke(runner, "cache", "show", "/people?page=3")
        assert result.exit_code == 4
        assert "No cached entry for http://localhost:3001/api/people?page=3" in result.output
        assert catalog.requests == []

    def test_clear_with_force(self, runner: CliRunner, catalog) -> None:
        _invoke(runner, "list", "films")
        result = _invoke(runner, "--force", "cache", "clear")
        assert result.exit_code == 0
        assert "Removed 1 cached response(s)." in result.output

        _invoke(runner, "list", "films")
        assert len(catalog.requests) == 2

    def test_clear_declined(self, runner: CliRunner, catalog) -> None:
        _invoke(runner, "list", "films")
        result = runner.invoke(app, ["--no-color", "cache", "clear"], input="n\n")
        assert result.exit_code == 0
        assert "Cancelled." in result.output

        _invoke(runner, "list", "films")
        assert len(catalog.requests) == 1


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_set_and_show(self, runner: CliRunner, isolated_config: Path) -> None:
        result = _invoke(runner, "config", "set", "cache.max_age_seconds", "600")
        assert result.exit_code == 0, result.output
        assert load_global_config().cache.max_age_seconds == 600

        shown = _invoke(runner, "--json", "-q", "config", "show")
        assert json.loads(shown.output)["cache"]["max_age_seconds"] == 600

    def test_set_bool_and_timeout(self, runner: CliRunner, isolated_config: Path) -> None:
        _invoke(runner, "config", "set", "cache.persist", "false")
        _invoke(runner, "config", "set", "request.timeout", "none")
        cfg = load_global_config()
        assert cfg.cache.persist is False
        assert cfg.request.timeout is None

    def test_set_unknown_key(self, runner: CliRunner, isolated_config: Path) -> None:
        result = _invoke(runner, "config", "set", "cache.color", "blue")
        assert result.exit_code == 2
        assert "Unknown config key" in result.output

    def test_set_bad_integer(self, runner: CliRunner, isolated_config: Path) -> None:
        result = _invoke(runner, "config", "set", "page_size", "many")
        assert result.exit_code == 2

    def test_set_fails_validation(self, runner: CliRunner, isolated_config: Path) -> None:
        result = _invoke(runner, "config", "set", "page_size", "0")
        assert result.exit_code == 2
        assert "Validation error" in result.output

    def test_configured_base_url_is_used(self, runner: CliRunner, catalog) -> None:
        _invoke(runner, "config", "set", "base_url", "http://other.example/api")
        _invoke(runner, "list", "films")
        assert catalog.requests == ["http://other.example/api/films?page=1"]

    def test_base_url_flag_overrides(self, runner: CliRunner, catalog) -> None:
        _invoke(runner, "--base-url", "http://flag.example/api", "list", "films")
        assert catalog.requests == ["http://flag.example/api/films?page=1"]

    def test_reset_with_force(self, runner: CliRunner, isolated_config: Path) -> None:
        _invoke(runner, "config", "set", "page_size", "25")
        result = _invoke(runner, "--force", "config", "reset")
        assert result.exit_code == 0
        assert load_global_config().page_size == 10
