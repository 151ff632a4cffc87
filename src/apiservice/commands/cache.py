"""Cache commands -- list, show, and clear cached GET payloads.

Operates directly on the on-disk store used by the request commands
(:func:`~apiservice.config.get_store_dir`); no base URL or token is needed.
"""

from __future__ import annotations

import contextlib
from typing import Iterator

import typer

from apiservice.cache import CacheStore, decode_payload
from apiservice.config import get_store_dir
from apiservice.exit_codes import EXIT_GENERIC_FAILURE
from apiservice.output import error, format_response, info, print_table, success, warning
from apiservice.storage import DiskKeyValueStore


cache_app = typer.Typer(no_args_is_help=True)


@contextlib.contextmanager
def open_cache() -> Iterator[CacheStore]:
    """Yield a :class:`~apiservice.cache.CacheStore` over the default disk store."""
    store = DiskKeyValueStore(get_store_dir())
    try:
        yield CacheStore(store)
    finally:
        store.close()


@cache_app.command("list")
def cache_list() -> None:
    """List cached keys with their fetch dates and payload sizes.

    Example::

        apiservice cache list
        apiservice --json cache list
    """
    with open_cache() as cache:
        keys = sorted(cache.list_cache_keys())
        if not keys:
            info("Cache is empty.")
            return
        rows = [
            [key, cache.get_date(key) or "-", str(len(cache.get(key) or ""))]
            for key in keys
        ]
    print_table(["key", "fetched", "bytes"], rows, title="Cached responses")


@cache_app.command("show")
def cache_show(
    key: str = typer.Argument(help="Logical cache key."),
) -> None:
    """Print the cached payload for KEY.

    JSON payloads are pretty-printed; anything else is printed verbatim.
    """
    with open_cache() as cache:
        entry = cache.entry(key)
    if entry is None:
        error(f"No cache found for key '{key}'")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)

    info(f"Fetched: {entry.fetch_date.isoformat() if entry.fetch_date else 'unknown'}")
    decoded = decode_payload(key, entry.payload)
    format_response(decoded.value if decoded.ok else entry.payload)


@cache_app.command("clear")
def cache_clear(
    key: str = typer.Argument(help="Logical cache key."),
) -> None:
    """Remove the cached payload and fetch date for KEY."""
    with open_cache() as cache:
        if not cache.has(key):
            warning(f"No cache found for key '{key}'")
            return
        cache.clear(key)
    success(f"Cleared cache for key '{key}'")
