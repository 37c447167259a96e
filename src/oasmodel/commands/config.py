"""Config commands -- view and modify global configuration.

Provides the ``oasmodel config`` sub-command group for reading,
updating, and resetting the user's global configuration file
(:class:`~oasmodel.models.GlobalConfig`). Settings are persisted in
the oasmodel config directory and control defaults such as the output
format and modeler strictness.
"""

from __future__ import annotations

from typing import Any

import typer

from oasmodel.exit_codes import EXIT_INVALID_USAGE
from oasmodel.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False,
        "--effective",
        help="Show the resolved config (env and ./oasmodel.json applied).",
    ),
) -> None:
    """Show current configuration.

    Prints the config directory path followed by the global configuration
    (or, with ``--effective``, the fully resolved one).

    Example::

        oasmodel config show
        oasmodel --json config show --effective
    """
    from oasmodel.config import get_config_dir, load_global_config, resolve_config
    from oasmodel.exceptions import ConfigError

    try:
        config = resolve_config() if effective else load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    format_response(_flatten(config.model_dump(mode="json")))


def _flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested sections into dot-notation keys (``output.format``)."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{name}."))
        else:
            flat[name] = value
    return flat


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'output.format')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type. The updated config is validated against
    :class:`~oasmodel.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid or validation
            fails.

    Example::

        oasmodel config set output.format yaml
        oasmodel config set modeler.strict_allow_empty_value true
    """
    from oasmodel.config import load_global_config, save_global_config
    from oasmodel.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    # Navigate the dot-separated key path.
    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    current = target[final_key]
    coerced: Any = value
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes", "on")

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
) -> None:
    """Reset configuration to defaults.

    Replaces the persisted global config with a fresh
    :class:`~oasmodel.models.GlobalConfig`. Asks for confirmation unless
    ``--force`` is active.

    Example::

        oasmodel config reset
        oasmodel --force config reset
    """
    from oasmodel.config import save_global_config
    from oasmodel.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
