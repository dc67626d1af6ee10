"""Synchronous HTTP client that reads the catalog through the expiring cache.

This module provides :class:`SyncClient`, the blocking client used by the
swbrowse CLI commands. It wraps :class:`httpx.Client` and layers on:

- **URL building** -- relative catalog paths are joined to the configured
  ``base_url`` and query parameters are merged into the URL, which then
  serves as the cache key.
- **Response caching** -- GETs go through an
  :class:`~swbrowse.cache.ExpiringFetchCache` when a store is attached.
- **Error mapping** -- transport failures and HTTP error statuses become
  :class:`~swbrowse.exceptions.FetchError` subclasses. Nothing is retried.

See Also:
    :class:`~swbrowse.client.async_client.AsyncClient` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from swbrowse.cache import CacheStore, Clock, ExpiringFetchCache
from swbrowse.client.response import build_url, decode_json, map_response_error
from swbrowse.exceptions import ConnectionError_
from swbrowse.models import GlobalConfig
from swbrowse.output import get_output


class SyncClient:
    """Synchronous HTTP client for catalog reads.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        config: Effective configuration (``base_url``, request and cache
            settings).
        store: Optional cache store. When ``None`` or when caching is
            disabled in *config*, every call goes to the network.
        clock: Optional time source handed to the cache.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`.

    Example::

        with SyncClient(config, store=DiskStore(get_cache_dir())) as client:
            page = client.get_json("/people", params={"page": 1})
    """

    def __init__(
        self,
        config: GlobalConfig,
        store: Optional[CacheStore] = None,
        clock: Optional[Clock] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        self._cache: Optional[ExpiringFetchCache] = None
        if store is not None and config.cache.enabled:
            self._cache = ExpiringFetchCache(
                store,
                self.fetch,
                clock=clock,
                default_max_age=config.cache.max_age_seconds,
            )
        self.network_calls = 0

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        request = self._config.request
        self._client = httpx.Client(
            timeout=request.timeout,
            verify=request.verify_ssl,
            follow_redirects=True,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    @property
    def cache(self) -> Optional[ExpiringFetchCache]:
        return self._cache

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def url_for(self, path: str, params: Optional[dict[str, Any]] = None) -> str:
        """Return the absolute URL (and cache key) for *path* and *params*."""
        return build_url(self._config.base_url, path, params)

    def get_json(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        max_age_seconds: Optional[float] = None,
    ) -> Any:
        """GET *path* and return the decoded JSON body, using the cache if attached.

        Args:
            path: Catalog path such as ``/people/1`` or an absolute URL.
            params: Query parameters merged into the URL.
            max_age_seconds: Freshness window for this call. ``None`` uses
                the configured default; zero or negative forces a refetch.

        Raises:
            NotFoundError: On 404.
            ServerError: On any other HTTP error status.
            InvalidResponseError: When the body is not JSON.
            ConnectionError_: On network / timeout errors.
        """
        url = self.url_for(path, params)
        if self._cache is None:
            return self.fetch(url)

        before = self.network_calls
        data = self._cache.get(url, max_age_seconds)
        if self.network_calls == before:
            get_output().debug(f"Cache hit: {url}")
        return data

    def fetch(self, url: str) -> Any:
        """Send ``GET url`` over the network and return decoded JSON.

        This is the fetcher the cache calls on a miss.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        get_output().debug(f"GET {url}")
        self.network_calls += 1
        try:
            response = self._client.get(url)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Connection failed: {exc}", url=url) from exc

        map_response_error(response, url)
        return decode_json(response, url)
