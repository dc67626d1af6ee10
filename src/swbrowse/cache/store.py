"""Key/value stores backing the response cache.

A store holds one serialised :class:`~swbrowse.models.CacheEntry` string
per key and knows nothing about freshness. Two implementations are
provided:

* :class:`DiskStore` -- persists entries with :mod:`diskcache` under the
  XDG cache directory so they survive across invocations.
* :class:`MemoryStore` -- a plain dict, for tests and ``persist = false``.

Any object with ``get(key)`` and ``set(key, value)`` satisfies
:class:`CacheStore`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

import diskcache


@runtime_checkable
class CacheStore(Protocol):
    """Synchronous string key/value store used by the expiring cache."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store backed by a dict. Entries vanish with the process."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def describe(self) -> dict[str, object]:
        return {"backend": "memory", "size": len(self._data)}

    def close(self) -> None:
        pass


class DiskStore:
    """Disk-backed store built on :class:`diskcache.Cache`.

    Entries are written without a diskcache ``expire`` and with
    culling disabled (``eviction_policy="none"``), so staleness is decided by
    the expiring cache at read time and the store never drops entries. A stale
    entry therefore stays on disk until it is overwritten by a refetch.

    Args:
        cache_dir: Root directory for the cache. A ``responses/``
            subdirectory is created inside it.

    Example::

        store = DiskStore(get_cache_dir())
        store.set("http://localhost:3001/api/people?page=1", '{"timestamp": 0, "data": {}}')
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self._directory = Path(cache_dir) / "responses"
        self._cache: Optional[diskcache.Cache] = diskcache.Cache(
            str(self._directory), eviction_policy="none"
        )

    @property
    def directory(self) -> Path:
        return self._directory

    def get(self, key: str) -> Optional[str]:
        return self._require().get(key)

    def set(self, key: str, value: str) -> None:
        self._require().set(key, value)

    def clear(self) -> None:
        """Remove every entry from the store."""
        self._require().clear()

    def __len__(self) -> int:
        return len(self._require())

    def describe(self) -> dict[str, object]:
        return {
            "backend": "disk",
            "size": len(self),
            "directory": str(self._directory),
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()
            self._cache = None

    def _require(self) -> diskcache.Cache:
        if self._cache is None:
            raise RuntimeError("DiskStore is closed")
        return self._cache
