"""Expiring read-through cache in front of an HTTP GET.

Each entry is stored as a JSON string ``{"timestamp": ..., "data": ...}``
under the exact request URL (query string included). A read returns the
stored ``data`` while the entry is younger than the freshness window;
otherwise the fetcher is called and its result replaces the entry.

Rules shared by both cache flavours:

* ``max_age_seconds <= 0`` always refetches.
* An entry that cannot be decoded is a :class:`~swbrowse.exceptions.CacheCorruption`,
  logged and treated as a miss. The next successful fetch overwrites it.
* A failed fetch raises :class:`~swbrowse.exceptions.FetchError` and leaves
  the store untouched, so a stale entry survives for later reads.
* Concurrent misses on one key are not coalesced; each caller fetches and
  the last write wins.

See Also:
    :mod:`swbrowse.cache.store` -- the key/value stores.
    :mod:`swbrowse.cache.clock` -- the injectable time source.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from pydantic import ValidationError

from swbrowse.cache.clock import Clock, SystemClock
from swbrowse.cache.store import CacheStore
from swbrowse.exceptions import CacheCorruption, FetchError
from swbrowse.models import DEFAULT_MAX_AGE_SECONDS, CacheEntry

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Any]
AsyncFetcher = Callable[[str], Awaitable[Any]]

_MISS = object()


def decode_entry(key: str, raw: Any) -> CacheEntry:
    """Parse a stored value into a :class:`CacheEntry`.

    Raises:
        CacheCorruption: If *raw* is not a JSON object with a numeric
            ``timestamp``.
    """
    if not isinstance(raw, (str, bytes, bytearray)):
        raise CacheCorruption(key, f"unexpected stored type {type(raw).__name__}")
    try:
        return CacheEntry.model_validate_json(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise CacheCorruption(key, first.get("msg", "invalid entry")) from exc


def encode_entry(timestamp: float, data: Any) -> str:
    """Serialise a fresh entry for the store."""
    return CacheEntry(timestamp=timestamp, data=data).model_dump_json()


class _ExpiringCacheBase:
    def __init__(
        self,
        store: CacheStore,
        clock: Optional[Clock] = None,
        default_max_age: float = DEFAULT_MAX_AGE_SECONDS,
    ) -> None:
        self._store = store
        self._clock: Clock = clock if clock is not None else SystemClock()
        self._default_max_age = default_max_age

    @property
    def store(self) -> CacheStore:
        return self._store

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def default_max_age(self) -> float:
        return self._default_max_age

    def peek(self, key: str) -> Optional[CacheEntry]:
        """Return the stored entry for *key* without fetching, fresh or not.

        Corrupt entries read as ``None``.
        """
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return decode_entry(key, raw)
        except CacheCorruption:
            return None

    def stats(self) -> dict[str, Any]:
        """Describe the backing store and the default freshness window."""
        describe = getattr(self._store, "describe", None)
        info: dict[str, Any] = dict(describe()) if callable(describe) else {}
        info["max_age_seconds"] = self._default_max_age
        return info

    def _lookup(self, key: str, max_age: float) -> Any:
        """Return fresh cached data for *key*, or ``_MISS``."""
        if max_age <= 0:
            return _MISS
        raw = self._store.get(key)
        if raw is None:
            return _MISS
        try:
            entry = decode_entry(key, raw)
        except CacheCorruption as exc:
            logger.warning("%s; refetching", exc)
            return _MISS
        if entry.age(self._clock.now()) < max_age:
            return entry.data
        return _MISS

    def _save(self, key: str, data: Any) -> None:
        self._store.set(key, encode_entry(self._clock.now(), data))

    def _resolve_max_age(self, max_age_seconds: Optional[float]) -> float:
        if max_age_seconds is None:
            return self._default_max_age
        return max_age_seconds


class ExpiringFetchCache(_ExpiringCacheBase):
    """Read-through cache for a blocking fetcher.

    Args:
        store: Where serialised entries live (see :mod:`swbrowse.cache.store`).
        fetcher: Called with the key on a miss; returns decoded JSON or
            raises :class:`~swbrowse.exceptions.FetchError`.
        clock: Time source; defaults to :class:`~swbrowse.cache.clock.SystemClock`.
        default_max_age: Freshness window used when :meth:`get` is called
            without one.

    Example::

        cache = ExpiringFetchCache(MemoryStore(), fetch_json)
        people = cache.get("http://localhost:3001/api/people?page=1", 3600)
    """

    def __init__(
        self,
        store: CacheStore,
        fetcher: Fetcher,
        clock: Optional[Clock] = None,
        default_max_age: float = DEFAULT_MAX_AGE_SECONDS,
    ) -> None:
        super().__init__(store, clock, default_max_age)
        self._fetcher = fetcher

    def get(self, key: str, max_age_seconds: Optional[float] = None) -> Any:
        """Return data for *key*, fetching it when missing or stale.

        Args:
            key: The exact request URL.
            max_age_seconds: Freshness window. ``None`` uses the default;
                zero or negative forces a refetch.

        Raises:
            FetchError: The fetch failed. The store is left unchanged.
        """
        cached = self._lookup(key, self._resolve_max_age(max_age_seconds))
        if cached is not _MISS:
            return cached
        try:
            data = self._fetcher(key)
        except FetchError:
            raise
        except Exception as exc:
            raise FetchError(f"Fetch failed for {key}: {exc}", url=key) from exc
        self._save(key, data)
        return data


class AsyncExpiringFetchCache(_ExpiringCacheBase):
    """Read-through cache for a coroutine fetcher.

    Behaves exactly like :class:`ExpiringFetchCache`; the fetcher is awaited
    and no lock is held across the await.
    """

    def __init__(
        self,
        store: CacheStore,
        fetcher: AsyncFetcher,
        clock: Optional[Clock] = None,
        default_max_age: float = DEFAULT_MAX_AGE_SECONDS,
    ) -> None:
        super().__init__(store, clock, default_max_age)
        self._fetcher = fetcher

    async def get(self, key: str, max_age_seconds: Optional[float] = None) -> Any:
        """Async counterpart of :meth:`ExpiringFetchCache.get`."""
        cached = self._lookup(key, self._resolve_max_age(max_age_seconds))
        if cached is not _MISS:
            return cached
        try:
            data = await self._fetcher(key)
        except FetchError:
            raise
        except Exception as exc:
            raise FetchError(f"Fetch failed for {key}: {exc}", url=key) from exc
        self._save(key, data)
        return data
