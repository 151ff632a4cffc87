"""Typer application and CLI entry point for apiservice.

Registers the request commands (``get``, ``post``, ``put``, ``delete``), the
``cache`` and ``config`` sub-command groups, and ``token``. The :func:`main`
function is the console-script entry point declared in ``pyproject.toml``.

See Also:
    :mod:`apiservice.config`: Settings resolution used by every request command.
    :mod:`apiservice.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from apiservice import __version__
from apiservice.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="apiservice",
    help="Call an HTTP API with bearer auth and day-granularity GET caching.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from apiservice.commands.auth import token_command  # noqa: E402
from apiservice.commands.cache import cache_app  # noqa: E402
from apiservice.commands.config import config_app  # noqa: E402
from apiservice.commands.request import (  # noqa: E402
    delete_command,
    get_command,
    post_command,
    put_command,
)

app.command("get")(get_command)
app.command("post")(post_command)
app.command("put")(put_command)
app.command("delete")(delete_command)
app.command("token")(token_command)
app.add_typer(cache_app, name="cache", help="Inspect and clear cached GET payloads.")
app.add_typer(config_app, name="config", help="View and edit stored settings.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"apiservice {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, quiet: bool) -> None:
    """Send library log records to stderr through Rich."""
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the configured base URL."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print payloads as JSON."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Print payloads as tab-separated text."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only print payloads, warnings and errors."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log cache decisions and requests."
    ),
) -> None:
    """Global options, applied before any command runs.

    Installs the global :class:`~apiservice.output.OutputManager`, configures
    logging, and stores shared options in ``ctx.obj``.
    """
    from apiservice.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose, quiet)

    ctx.ensure_object(dict)
    ctx.obj["base_url"] = base_url
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Exit with status 130 on Ctrl-C instead of printing a traceback."""

    def _handle_sigint(signum: int, frame: object) -> None:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handle_sigint)


def main() -> None:
    """CLI entry point invoked by the ``apiservice`` console script.

    :class:`~apiservice.exceptions.ApiServiceError` instances that escape a
    command cause a clean exit with the error's ``exit_code``; anything else
    exits with :data:`~apiservice.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from apiservice.exceptions import ApiServiceError
        from apiservice.output import error

        if isinstance(exc, ApiServiceError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
