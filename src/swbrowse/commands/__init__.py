"""Built-in CLI sub-commands for swbrowse.

* :mod:`~swbrowse.commands.browse` -- ``categories``, ``list`` and ``show``.
* :mod:`~swbrowse.commands.cache` -- inspect and clear the response cache.
* :mod:`~swbrowse.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``cache`` and ``config``) or plain callback
functions registered directly on the root app.
"""
