"""Request commands -- ``get``, ``post``, ``put``, ``delete``.

Each command resolves the effective configuration
(:func:`~apiservice.config.resolve_config`), opens an
:class:`~apiservice.client.ApiService`, performs one call, and renders the
payload to stdout. ``get`` goes through the cache when ``--cache-key`` is
given.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Callable, Optional

import typer

from apiservice.client import ApiService
from apiservice.config import resolve_config
from apiservice.exceptions import ApiServiceError
from apiservice.models import CacheOptions
from apiservice.output import error, format_response


def build_service(base_url: Optional[str] = None) -> ApiService:
    """Create a client from the resolved configuration and default stores."""
    return ApiService(resolve_config(cli_base_url=base_url))


def _parse_body(body: Optional[str]) -> Any:
    """Parse *body* as JSON if possible, returning the raw string on failure."""
    if body is None:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return body


def _run(ctx: typer.Context, call: Callable[[ApiService], Awaitable[Any]]) -> None:
    """Run *call* against a fresh client and print its result.

    :class:`~apiservice.exceptions.ApiServiceError` is reported on stderr and
    turned into the matching exit code.
    """
    base_url = (ctx.obj or {}).get("base_url")

    async def _invoke() -> Any:
        async with build_service(base_url) as api:
            return await call(api)

    try:
        data = asyncio.run(_invoke())
    except ApiServiceError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    format_response(data)


def get_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path relative to the base URL, or an absolute URL."),
    cache_key: Optional[str] = typer.Option(
        None, "--cache-key", "-k", help="Cache the response under this key."
    ),
    max_age: int = typer.Option(
        1, "--max-age", min=1, help="Days a cached response stays fresh."
    ),
    force: bool = typer.Option(
        False, "--force", help="Fetch even if a fresh cached response exists."
    ),
    no_token: bool = typer.Option(
        False, "--no-token", help="Send without the Authorization header."
    ),
) -> None:
    """Send a GET request, optionally through the local cache.

    Example::

        apiservice get /items
        apiservice get /items --cache-key items --max-age 7
    """
    options = CacheOptions(
        use_cache=cache_key is not None,
        cache_key=cache_key,
        max_age_in_days=max_age,
        force_fetch=force,
        no_token=no_token,
    )
    _run(ctx, lambda api: api.get(path, options))


def post_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path relative to the base URL, or an absolute URL."),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON request body."),
) -> None:
    """Send a POST request."""
    body = _parse_body(data)
    _run(ctx, lambda api: api.post(path, body))


def put_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path relative to the base URL, or an absolute URL."),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON request body."),
) -> None:
    """Send a PUT request."""
    body = _parse_body(data)
    _run(ctx, lambda api: api.put(path, body))


def delete_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path relative to the base URL, or an absolute URL."),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON request body."),
) -> None:
    """Send a DELETE request."""
    body = _parse_body(data)
    _run(ctx, lambda api: api.delete(path, body))
