"""Catalog navigation on top of the cached client.

The catalog is a set of categories, each listed page by page at
``/<category>?page=N`` (``{"count": ..., "results": [...]}``) with single
entities at ``/<category>/<id>``. Entity fields that hold URLs of other
entities are references; :func:`resolve_links` turns them into
:class:`~swbrowse.models.EntityRef` objects so they can be followed with
``swbrowse show``.
"""

from __future__ import annotations

import math
from typing import Any, Protocol
from urllib.parse import urlsplit

from swbrowse.exceptions import InvalidUsageError, ServerError
from swbrowse.models import EntityRef, ListPage

CATEGORIES: tuple[str, ...] = ("planets", "films", "people", "starships", "vehicles", "species")
"""Categories exposed by the catalog API."""

DEFAULT_CATEGORY = "people"


class JsonGetter(Protocol):
    def get_json(self, path: str, params: Any = None, max_age_seconds: Any = None) -> Any: ...


def validate_category(category: str) -> str:
    """Return *category* lower-cased, or raise if the catalog has no such category."""
    normalised = category.strip().lower()
    if normalised not in CATEGORIES:
        raise InvalidUsageError(
            f"Unknown category '{category}'. Choose one of: {', '.join(CATEGORIES)}"
        )
    return normalised


def total_pages(count: int, page_size: int) -> int:
    """Number of listing pages for *count* items, never less than one."""
    if count <= 0:
        return 1
    return math.ceil(count / page_size)


def entity_label(item: dict[str, Any]) -> str:
    """Display name of a catalog item: ``name``, else ``title`` (films)."""
    return str(item.get("name") or item.get("title") or "?")


def parse_entity_ref(value: Any) -> EntityRef | None:
    """Parse an entity URL like ``https://host/api/people/1/`` into a reference.

    The last non-empty path segment is the id and the segment before it is
    the category. Returns ``None`` for anything that is not an ``http(s)``
    URL with at least two path segments.
    """
    if not isinstance(value, str):
        return None
    parts = urlsplit(value.strip())
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None
    segments = [s for s in parts.path.split("/") if s]
    if len(segments) < 2:
        return None
    return EntityRef(category=segments[-2], id=segments[-1], url=value)


def resolve_links(entity: dict[str, Any]) -> dict[str, Any]:
    """Replace reference URLs in *entity* with :class:`EntityRef` objects.

    String fields holding an entity URL become a single ref; list fields
    whose items are all entity URLs become a list of refs. Everything else
    (including ``url`` itself and non-URL lists) is passed through.
    """
    resolved: dict[str, Any] = {}
    for key, value in entity.items():
        if isinstance(value, list) and value:
            refs = [parse_entity_ref(v) for v in value]
            if all(r is not None for r in refs):
                resolved[key] = refs
                continue
        elif key != "url":
            ref = parse_entity_ref(value)
            if ref is not None:
                resolved[key] = ref
                continue
        resolved[key] = value
    return resolved


def entity_id(item: dict[str, Any]) -> str:
    """Id of a listed item, taken from its ``url`` field."""
    ref = parse_entity_ref(item.get("url"))
    return ref.id if ref is not None else ""


class CatalogBrowser:
    """Reads listings and entities through a (cached) client.

    Args:
        client: Anything with ``get_json(path, params, max_age_seconds)``,
            normally a :class:`~swbrowse.client.SyncClient`.
        page_size: Items per server page, used to compute ``total_pages``.
        max_age_seconds: Freshness window passed to every read; ``None``
            leaves the client's default in place.
    """

    def __init__(
        self,
        client: JsonGetter,
        page_size: int = 10,
        max_age_seconds: float | None = None,
    ) -> None:
        self._client = client
        self._page_size = page_size
        self._max_age = max_age_seconds

    @property
    def page_size(self) -> int:
        return self._page_size

    def list_page(self, category: str = DEFAULT_CATEGORY, page: int = 1) -> ListPage:
        """Fetch one page of *category*.

        Raises:
            InvalidUsageError: Unknown category or ``page < 1``.
            ServerError: The listing body does not have the expected shape.
            FetchError: The request failed.
        """
        category = validate_category(category)
        if page < 1:
            raise InvalidUsageError(f"Page must be 1 or greater, got {page}")

        body = self._client.get_json(
            f"/{category}", params={"page": page}, max_age_seconds=self._max_age
        )
        if not isinstance(body, dict) or not isinstance(body.get("results"), list):
            raise ServerError(f"Unexpected listing body for {category} page {page}")

        count = body.get("count")
        if not isinstance(count, int):
            count = len(body["results"])
        return ListPage(
            category=category,
            page=page,
            count=count,
            total_pages=total_pages(count, self._page_size),
            results=body["results"],
        )

    def get_entity(self, category: str, entity_id: str | int) -> dict[str, Any]:
        """Fetch a single entity.

        Raises:
            InvalidUsageError: Unknown category.
            NotFoundError: No entity with that id.
            ServerError: The body is not a JSON object.
        """
        category = validate_category(category)
        body = self._client.get_json(
            f"/{category}/{entity_id}", max_age_seconds=self._max_age
        )
        if not isinstance(body, dict):
            raise ServerError(f"Unexpected entity body for {category}/{entity_id}")
        return body
