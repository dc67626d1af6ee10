"""Asynchronous HTTP client -- mirrors :class:`~swbrowse.client.sync_client.SyncClient` API.

This module provides :class:`AsyncClient`, the non-blocking counterpart to
:class:`~swbrowse.client.sync_client.SyncClient`. It wraps
:class:`httpx.AsyncClient` and reads through an
:class:`~swbrowse.cache.AsyncExpiringFetchCache`. The fetch suspends during
network I/O; concurrent misses on one URL each hit the network and the last
response written wins.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from swbrowse.cache import AsyncExpiringFetchCache, CacheStore, Clock
from swbrowse.client.response import build_url, decode_json, map_response_error
from swbrowse.exceptions import ConnectionError_
from swbrowse.models import GlobalConfig
from swbrowse.output import get_output


class AsyncClient:
    """Asynchronous HTTP client for catalog reads.

    Takes the same arguments as :class:`~swbrowse.client.sync_client.SyncClient`
    and must be used as an async context manager.

    Example::

        async with AsyncClient(config, store=MemoryStore()) as client:
            person = await client.get_json("/people/1")
    """

    def __init__(
        self,
        config: GlobalConfig,
        store: Optional[CacheStore] = None,
        clock: Optional[Clock] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._cache: Optional[AsyncExpiringFetchCache] = None
        if store is not None and config.cache.enabled:
            self._cache = AsyncExpiringFetchCache(
                store,
                self.fetch,
                clock=clock,
                default_max_age=config.cache.max_age_seconds,
            )
        self.network_calls = 0

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        request = self._config.request
        self._client = httpx.AsyncClient(
            timeout=request.timeout,
            verify=request.verify_ssl,
            follow_redirects=True,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def cache(self) -> Optional[AsyncExpiringFetchCache]:
        return self._cache

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def url_for(self, path: str, params: Optional[dict[str, Any]] = None) -> str:
        return build_url(self._config.base_url, path, params)

    async def get_json(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        max_age_seconds: Optional[float] = None,
    ) -> Any:
        """Async counterpart of :meth:`SyncClient.get_json`."""
        url = self.url_for(path, params)
        if self._cache is None:
            return await self.fetch(url)
        return await self._cache.get(url, max_age_seconds)

    async def fetch(self, url: str) -> Any:
        """Send ``GET url`` over the network and return decoded JSON."""
        assert self._client is not None, "Client not initialised -- use as async context manager"

        get_output().debug(f"GET {url}")
        self.network_calls += 1
        try:
            response = await self._client.get(url)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Connection failed: {exc}", url=url) from exc

        map_response_error(response, url)
        return decode_json(response, url)
