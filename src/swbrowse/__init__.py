"""swbrowse -- Browse a paginated REST catalog from the terminal.

This package talks to a Star Wars style REST API (``/api/<category>`` listings
and ``/api/<category>/<id>`` entities) and renders listings and entity details
in the terminal. Every GET request goes through an expiring, read-through
cache persisted on disk so that repeated browsing does not hit the network.

Typical workflow::

    swbrowse list people --page 2
    swbrowse show people 1
    swbrowse cache stats

Modules:
    app: Typer application and CLI entry point.
    cache: Expiring read-through cache with pluggable store and clock.
    catalog: Listing pagination and entity reference parsing.
    client: httpx-based clients that fetch through the cache.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration management.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
