"""Canonical Pydantic models shared across all swbrowse modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`CacheConfig`, :class:`RequestConfig`, :class:`OutputConfig`, and
    :class:`GlobalConfig`.

**Cache models** -- the persisted shape of a cached response:
    :class:`CacheEntry`.

**Catalog models** -- produced by :mod:`swbrowse.catalog` and consumed by
the CLI commands:
    :class:`ListPage` and :class:`EntityRef`.

All models use Pydantic v2.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "http://localhost:3001/api"
DEFAULT_MAX_AGE_SECONDS = 3600


# --- Config ---


class CacheConfig(BaseModel):
    """Response cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Route GET requests through the cache")
    max_age_seconds: int = Field(
        default=DEFAULT_MAX_AGE_SECONDS,
        description="Freshness window in seconds; 0 or less always refetches",
    )
    persist: bool = Field(
        default=True, description="Keep entries on disk across invocations"
    )


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every API call."""

    timeout: Optional[float] = Field(
        default=30.0, description="Request timeout in seconds (null disables it)"
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/swbrowse/config.json``.

    Loaded and saved by :func:`~swbrowse.config.load_global_config` and
    :func:`~swbrowse.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~swbrowse.config.resolve_config`
    for the full precedence chain.
    """

    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Root of the catalog API"
    )
    page_size: int = Field(
        default=10, ge=1, description="Items per listing page on the server"
    )
    cache: CacheConfig = Field(default_factory=CacheConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Cache ---


class CacheEntry(BaseModel):
    """A cached response body and the instant it was stored.

    Serialised as ``{"timestamp": <epoch seconds>, "data": <JSON>}``. One
    entry exists per cache key; a refetch replaces it entirely.
    Validation is strict: the timestamp must be a finite JSON number and the
    ``data`` key must be present (it may be ``null``).
    """

    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    timestamp: float
    data: Any

    def age(self, now: float) -> float:
        """Return how many seconds old the entry is at *now*."""
        return now - self.timestamp


# --- Catalog ---


class EntityRef(BaseModel):
    """A reference from one catalog entity to another, parsed from its URL."""

    category: str
    id: str
    url: str

    @property
    def label(self) -> str:
        """``category/id`` form accepted by ``swbrowse show``."""
        return f"{self.category}/{self.id}"


class ListPage(BaseModel):
    """One page of a category listing.

    ``count`` is the total number of items in the category as reported by
    the server; ``total_pages`` is derived from it and the page size.
    """

    category: str
    page: int
    count: int
    total_pages: int
    results: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
