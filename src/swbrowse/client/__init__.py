"""HTTP client module for swbrowse.

Provides synchronous and asynchronous HTTP clients that wrap :mod:`httpx`
and read the catalog through the expiring response cache.

Classes:
    :class:`SyncClient` -- blocking client backed by :class:`httpx.Client`.
    :class:`AsyncClient` -- non-blocking client backed by :class:`httpx.AsyncClient`.

Both clients are context managers and accept the same parameters: the
effective :class:`~swbrowse.models.GlobalConfig`, an optional cache store,
an optional clock, and an optional httpx transport.

Example::

    from swbrowse.client import SyncClient

    with SyncClient(config, store=store) as client:
        page = client.get_json("/people", params={"page": 1})
"""

from swbrowse.client.async_client import AsyncClient
from swbrowse.client.sync_client import SyncClient

__all__ = ["SyncClient", "AsyncClient"]
