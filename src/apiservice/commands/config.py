"""Config commands -- view and modify the settings file.

Provides the ``apiservice config`` sub-command group. Settings are persisted
in the apiservice config directory as a
:class:`~apiservice.models.ServiceConfig`.
"""

from __future__ import annotations

import typer

from apiservice.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the stored settings. The token key is masked.

    Example::

        apiservice config show
        apiservice --json config show
    """
    from apiservice.config import config_path, load_config

    data = load_config().model_dump(mode="json")
    if data.get("token_key"):
        data["token_key"] = "****"
    info(f"Config file: {config_path()}")
    format_response(data)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Setting name, e.g. 'base_url' or 'timeout'."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a single setting.

    The value is coerced to the existing field's type (bool, number, or
    str) and the result is validated against
    :class:`~apiservice.models.ServiceConfig` before saving.

    Raises:
        typer.Exit: With code 2 for unknown keys or invalid values.

    Example::

        apiservice config set base_url https://api.example.com
        apiservice config set timeout 10
    """
    from apiservice.config import load_config, save_config
    from apiservice.models import ServiceConfig

    data = load_config().model_dump(mode="json")
    if key not in ServiceConfig.model_fields:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = data.get(key)
    if isinstance(current, bool):
        coerced: object = value.lower() in ("true", "1", "yes")
    elif isinstance(current, (int, float)):
        try:
            coerced = float(value)
        except ValueError:
            error(f"Expected a number for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    else:
        coerced = value

    data[key] = coerced
    try:
        new_config = ServiceConfig.model_validate(data)
    except Exception as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_config(new_config)
    shown = "****" if key == "token_key" else coerced
    success(f"Set {key} = {shown}")
