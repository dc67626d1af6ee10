"""Config commands -- view and modify global configuration.

Provides the ``swbrowse config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~swbrowse.models.GlobalConfig`): API base URL, page size, cache
freshness window, request timeout, and output format.
"""

from __future__ import annotations

from typing import Any

import typer

from swbrowse.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the stored global configuration.

    Example::

        swbrowse config show
        swbrowse --json config show
    """
    from swbrowse.commands.browse import exit_on_error
    from swbrowse.config import get_config_dir, load_global_config

    with exit_on_error():
        config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


def _coerce(current: Any, value: str, key: str) -> Any:
    """Convert *value* to the type of the field it replaces."""
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    if isinstance(current, float) or (current is None and key == "request.timeout"):
        if value.lower() in ("none", "null", ""):
            return None
        try:
            return float(value)
        except ValueError:
            error(f"Expected number for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    return value


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'cache.max_age_seconds')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to the existing
    field's type and the result is validated before saving.

    Example::

        swbrowse config set base_url https://swapi.dev/api
        swbrowse config set cache.max_age_seconds 600
        swbrowse config set cache.persist false
    """
    from pydantic import ValidationError

    from swbrowse.commands.browse import exit_on_error
    from swbrowse.config import load_global_config, save_global_config
    from swbrowse.models import GlobalConfig

    with exit_on_error():
        config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    coerced = _coerce(target[final_key], value, key)
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Example::

        swbrowse config reset --force
    """
    from swbrowse.config import save_global_config
    from swbrowse.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
