"""Config commands -- view and modify global configuration.

Provides the ``specmine config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~specmine.models.GlobalConfig`): the documentation site, the pages
to read, the snowflake URL tokens, and cache and request settings.
"""

from __future__ import annotations

import json

import typer
from pydantic import ValidationError

from specmine.exceptions import ConfigError
from specmine.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Prints the config directory on stderr and the configuration, after
    project config and environment variables are applied, on stdout.

    Example::

        specmine config show
        specmine --json config show
    """
    from specmine.config import get_config_dir, resolve_config

    try:
        config = resolve_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


def _coerce(current: object, value: str, key: str) -> object:
    """Convert the CLI string *value* to the type of the *current* setting."""
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    if isinstance(current, list):
        # Either a JSON array or a comma-separated list.
        if value.lstrip().startswith("["):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                error(f"Expected a JSON array for {key}, got: {value}")
                raise typer.Exit(code=2) from None
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g. 'cache.ttl_seconds')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the existing field. Lists accept a
    comma-separated value or a JSON array. The result is validated before
    it is saved.

    Example::

        specmine config set docs_url https://example.com/docs
        specmine config set resources channel,guild
        specmine config set cache.ttl_seconds 600
    """
    from specmine.config import load_global_config, save_global_config
    from specmine.models import GlobalConfig

    try:
        config = load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
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

        specmine --force config reset
    """
    from specmine.config import save_global_config
    from specmine.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
