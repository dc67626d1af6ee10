"""Shared test fixtures for swbrowse.

Provides a manual clock, in-memory stores, a fake catalog API served
through :class:`httpx.MockTransport`, isolated config directories, and
output-state management. These fixtures are discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import httpx
import pytest

from swbrowse.cache import MemoryStore
from swbrowse.models import GlobalConfig
from swbrowse.output import reset_output


BASE_URL = "http://localhost:3001/api"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams the
    cached references go stale, so a fresh manager is forced per test.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Clock and store
# ---------------------------------------------------------------------------


class ManualClock:
    """Clock whose time only moves when a test advances it."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


# ---------------------------------------------------------------------------
# Fake catalog API
# ---------------------------------------------------------------------------


class FakeCatalog:
    """A tiny in-memory catalog API with request counting.

    ``people`` has 82 entries (9 pages of 10); every other category has 3.
    ``people/1`` is a fully populated entity with references.
    """

    COUNTS = {"people": 82}

    def __init__(self) -> None:
        self.requests: list[str] = []
        self.fail_with: httpx.Response | Exception | None = None

    def _item(self, category: str, i: int) -> dict[str, Any]:
        key = "title" if category == "films" else "name"
        return {key: f"{category}-{i}", "url": f"{BASE_URL}/{category}/{i}/"}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(str(request.url))
        if isinstance(self.fail_with, Exception):
            raise self.fail_with
        if self.fail_with is not None:
            return self.fail_with

        path = request.url.path
        match = re.fullmatch(r"/api/(\w+)/?", path)
        if match:
            category = match.group(1)
            count = self.COUNTS.get(category, 3)
            page = int(request.url.params.get("page", "1"))
            start = (page - 1) * 10 + 1
            stop = min(start + 10, count + 1)
            if start > count:
                return httpx.Response(404, json={"detail": "Not found"})
            return httpx.Response(
                200,
                json={
                    "count": count,
                    "next": None,
                    "previous": None,
                    "results": [self._item(category, i) for i in range(start, stop)],
                },
            )

        match = re.fullmatch(r"/api/(\w+)/(\d+)/?", path)
        if match:
            category, ident = match.group(1), int(match.group(2))
            if category == "people" and ident == 1:
                return httpx.Response(200, json=LUKE)
            if ident > self.COUNTS.get(category, 3):
                return httpx.Response(404, json={"detail": "Not found"})
            return httpx.Response(200, json=self._item(category, ident))

        return httpx.Response(404, json={"detail": "Not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


LUKE: dict[str, Any] = {
    "name": "Luke Skywalker",
    "height": "172",
    "homeworld": f"{BASE_URL}/planets/1/",
    "films": [f"{BASE_URL}/films/1/", f"{BASE_URL}/films/2/"],
    "species": [],
    "url": f"{BASE_URL}/people/1/",
}


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def luke() -> dict[str, Any]:
    return dict(LUKE)


@pytest.fixture
def config() -> GlobalConfig:
    return GlobalConfig(base_url=BASE_URL)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears the
    SWBROWSE_* environment variables, and changes the working directory to
    tmp_path.
    """
    monkeypatch.setattr("swbrowse.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["SWBROWSE_BASE_URL", "SWBROWSE_MAX_AGE"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path

