"""Cache commands -- inspect or wipe the persisted response cache.

The expiring cache never deletes entries by itself; stale ones are simply
overwritten on the next read. ``swbrowse cache clear`` is the operator's
way to drop everything at once.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from swbrowse.cache import ExpiringFetchCache
from swbrowse.models import GlobalConfig
from swbrowse.output import error, format_response, info, success


cache_app = typer.Typer(no_args_is_help=True)


@contextmanager
def open_cache(config: GlobalConfig) -> Iterator[ExpiringFetchCache]:
    """Yield the response cache the browse commands read through.

    The store is the one :func:`~swbrowse.commands.browse.open_store` picks
    for *config*, and the fetcher is the client's network GET. Nothing is
    fetched by the cache commands themselves.
    """
    from swbrowse.client import SyncClient
    from swbrowse.commands.browse import open_store

    store = open_store(config)
    try:
        yield ExpiringFetchCache(
            store,
            SyncClient(config).fetch,
            default_max_age=config.cache.max_age_seconds,
        )
    finally:
        store.close()


@cache_app.command("stats")
def cache_stats(ctx: typer.Context) -> None:
    """Show where the cache lives, how many entries it holds, and the freshness window.

    Example::

        swbrowse cache stats
    """
    from swbrowse.commands.browse import exit_on_error, load_effective_config

    with exit_on_error():
        config = load_effective_config(ctx)

    with open_cache(config) as cache:
        stats = cache.stats()
    stats["enabled"] = config.cache.enabled
    stats["persist"] = config.cache.persist
    format_response(stats)


@cache_app.command("show")
def cache_show(
    ctx: typer.Context,
    path: str = typer.Argument(help="Catalog path (e.g. '/people?page=1') or absolute URL."),
) -> None:
    """Show the stored entry for one request without fetching it.

    Reports the cache key, when the entry was stored, its age, and whether
    it is still fresh under the current window.

    Example::

        swbrowse cache show /people?page=1
        swbrowse cache show http://localhost:3001/api/films/1/
    """
    from swbrowse.client.response import build_url
    from swbrowse.commands.browse import exit_on_error, load_effective_config
    from swbrowse.exit_codes import EXIT_NOT_FOUND

    with exit_on_error():
        config = load_effective_config(ctx)

    key = build_url(config.base_url, path)
    with open_cache(config) as cache:
        entry = cache.peek(key)
        now = cache.clock.now()
        max_age = cache.default_max_age

    if entry is None:
        error(f"No cached entry for {key}")
        raise typer.Exit(code=EXIT_NOT_FOUND)

    age = entry.age(now)
    format_response(
        {
            "key": key,
            "timestamp": entry.timestamp,
            "age_seconds": round(age, 3),
            "fresh": max_age > 0 and age < max_age,
            "data": entry.data,
        }
    )


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Delete every cached response.

    Asks for confirmation unless ``--force`` is active.

    Example::

        swbrowse cache clear --force
    """
    from swbrowse.cache import DiskStore
    from swbrowse.config import get_cache_dir

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Delete all cached responses?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    store = DiskStore(get_cache_dir())
    try:
        removed = len(store)
        store.clear()
    finally:
        store.close()
    success(f"Removed {removed} cached response(s).")
