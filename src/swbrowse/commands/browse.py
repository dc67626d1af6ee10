"""Browse commands -- list categories, page through listings, show entities.

Provides the ``swbrowse categories``, ``swbrowse list`` and
``swbrowse show`` commands. Each one resolves the effective configuration
from the options stored on the root context, opens a
:class:`~swbrowse.client.SyncClient` backed by the response cache, and
renders the result through :mod:`swbrowse.output`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

import typer

from swbrowse.cache import DiskStore, MemoryStore
from swbrowse.catalog import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    CatalogBrowser,
    entity_id,
    entity_label,
    resolve_links,
)
from swbrowse.client import SyncClient
from swbrowse.exceptions import SwbrowseError
from swbrowse.models import EntityRef, GlobalConfig
from swbrowse.output import OutputFormat, error, format_response, get_output, info, print_table, suggest


def _ctx_options(ctx: typer.Context) -> dict[str, Any]:
    return ctx.obj if isinstance(ctx.obj, dict) else {}


def load_effective_config(ctx: typer.Context) -> GlobalConfig:
    """Resolve configuration from the root options stored in ``ctx.obj``."""
    from swbrowse.config import resolve_config

    opts = _ctx_options(ctx)
    return resolve_config(
        cli_base_url=opts.get("base_url"),
        cli_max_age=opts.get("max_age"),
        no_cache=opts.get("no_cache", False),
    )


def open_store(config: GlobalConfig) -> DiskStore | MemoryStore:
    """Disk store under the XDG cache dir, or an in-memory one when not persisting."""
    from swbrowse.config import get_cache_dir

    if config.cache.persist:
        return DiskStore(get_cache_dir())
    return MemoryStore()


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report a :class:`SwbrowseError` on stderr and exit with its code."""
    try:
        yield
    except SwbrowseError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@contextmanager
def open_browser(ctx: typer.Context) -> Iterator[CatalogBrowser]:
    """Yield a :class:`CatalogBrowser` over a cached client, closing both afterwards."""
    config = load_effective_config(ctx)
    store = open_store(config) if config.cache.enabled else None
    try:
        with SyncClient(config, store=store) as client:
            yield CatalogBrowser(client, page_size=config.page_size)
    finally:
        if store is not None:
            store.close()


def _render_value(value: Any) -> str:
    if isinstance(value, EntityRef):
        return value.label
    if isinstance(value, list):
        return ", ".join(_render_value(v) for v in value)
    if value is None:
        return ""
    return str(value)


def categories_command() -> None:
    """List the catalog categories.

    Example::

        swbrowse categories
    """
    print_table(["category"], [[c] for c in CATEGORIES], title="Categories")


def list_command(
    ctx: typer.Context,
    category: str = typer.Argument(
        DEFAULT_CATEGORY, help=f"Category to list ({', '.join(CATEGORIES)})."
    ),
    page: int = typer.Option(1, "--page", "-P", help="Page number, starting at 1."),
) -> None:
    """List one page of a category.

    Example::

        swbrowse list planets --page 2
        swbrowse --json list films
    """
    with exit_on_error(), open_browser(ctx) as browser:
        listing = browser.list_page(category, page)
        first = (listing.page - 1) * browser.page_size + 1

    if get_output().format == OutputFormat.JSON:
        format_response(listing.model_dump(mode="json"))
        return

    rows = [
        [str(i), entity_id(item), entity_label(item)]
        for i, item in enumerate(listing.results, start=first)
    ]
    print_table(["#", "id", "name"], rows, title=listing.category.capitalize())
    info(f"Page {listing.page} of {listing.total_pages} ({listing.count} total)")
    if listing.has_next:
        suggest(f"swbrowse list {listing.category} --page {listing.page + 1}")


def show_command(
    ctx: typer.Context,
    category: str = typer.Argument(help="Entity category, or 'category/id'."),
    entity: str = typer.Argument("", help="Entity id."),
) -> None:
    """Show every field of one entity; references print as ``category/id``.

    Example::

        swbrowse show people 1
        swbrowse show planets/1
    """
    if not entity and "/" in category:
        category, entity = category.split("/", 1)
    if not entity:
        error("Missing entity id. Usage: swbrowse show CATEGORY ID")
        raise typer.Exit(code=2)

    with exit_on_error(), open_browser(ctx) as browser:
        data = browser.get_entity(category, entity)

    if get_output().format == OutputFormat.JSON:
        format_response(data)
        return

    resolved = resolve_links(data)
    rows = [[key, _render_value(value)] for key, value in resolved.items()]
    print_table(["field", "value"], rows, title=f"{category}/{entity}")
