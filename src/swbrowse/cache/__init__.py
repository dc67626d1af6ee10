"""Expiring read-through response cache for swbrowse.

This package provides :class:`ExpiringFetchCache` and its async twin
:class:`AsyncExpiringFetchCache`. Both sit in front of a fetcher, keyed by
the exact request URL, and return stored data while it is younger than a
freshness window. Entries live in a :class:`CacheStore`: a
:class:`DiskStore` built on :mod:`diskcache` in production, or a
:class:`MemoryStore` in tests.

The cache is consumed by :class:`~swbrowse.client.sync_client.SyncClient`
and :class:`~swbrowse.client.async_client.AsyncClient`, and is controlled
by the ``cache`` section of the global configuration
(:class:`~swbrowse.models.CacheConfig`).
"""

from swbrowse.cache.cache import (
    AsyncExpiringFetchCache,
    ExpiringFetchCache,
    decode_entry,
    encode_entry,
)
from swbrowse.cache.clock import Clock, SystemClock
from swbrowse.cache.store import CacheStore, DiskStore, MemoryStore

__all__ = [
    "AsyncExpiringFetchCache",
    "CacheStore",
    "Clock",
    "DiskStore",
    "ExpiringFetchCache",
    "MemoryStore",
    "SystemClock",
    "decode_entry",
    "encode_entry",
]
