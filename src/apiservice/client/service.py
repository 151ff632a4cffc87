"""The public apiservice client with day-granularity GET caching.

:class:`ApiService` composes the request executor, the cache store, the
freshness policy, and the token provider. A cached ``get`` moves through
these states:

1. **no-cache path** -- ``use_cache`` is off: one request, no cache access.
2. **cache hit** -- the entry is fresh and decodes: returned without a
   request.
3. **miss / forced** -- the entry is stale, missing, corrupt (cleared on the
   spot), or ``force_fetch`` is set: one request.
4. **fetch success** -- payload and today's date are stored, payload returned.
5. **fetch failure with fallback** -- a previously stored payload is decoded
   and returned regardless of its age.
6. **fetch failure without fallback** -- the original
   :class:`~apiservice.exceptions.ServerError` or
   :class:`~apiservice.exceptions.TransportError` propagates.

Concurrent ``get`` calls for the same key are not coordinated: both may
miss, both fetch, and the last write wins.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any, Callable, Optional

import httpx

from apiservice.auth.credential_store import FileSecureStore, SecureStore
from apiservice.auth.token import TokenProvider
from apiservice.cache.freshness import is_valid
from apiservice.cache.store import CacheStore, decode_payload
from apiservice.client.executor import RequestExecutor
from apiservice.client.response import ResponseBody
from apiservice.config import get_store_dir
from apiservice.exceptions import ConfigurationError, ServerError, TransportError
from apiservice.models import CacheOptions, ServiceConfig
from apiservice.storage import DiskKeyValueStore, KeyValueStore

logger = logging.getLogger(__name__)


class ApiService:
    """HTTP client with bearer-token auth and optional per-key GET caching.

    Must be used as an async context manager for request methods; the cache
    inspection methods and :meth:`get_token` work without it (call
    :meth:`close` afterwards to release the default store).

    Args:
        config: Endpoint configuration.
        store: Key-value store for cache records. Defaults to a
            :class:`~apiservice.storage.DiskKeyValueStore` under
            :func:`~apiservice.config.get_store_dir`, closed on exit.
        secure_store: Where the bearer token is persisted. Defaults to
            :class:`~apiservice.auth.credential_store.FileSecureStore`.
        transport: Optional httpx transport passed to the executor.
        today: Callable returning the current calendar date.

    Example::

        async with ApiService(config) as api:
            items = await api.get(
                "/items", {"use_cache": True, "cache_key": "items"}
            )
    """

    def __init__(
        self,
        config: ServiceConfig,
        store: Optional[KeyValueStore] = None,
        secure_store: Optional[SecureStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        today: Callable[[], datetime.date] = datetime.date.today,
    ) -> None:
        self._config = config
        self._token_provider = TokenProvider(
            config.token_key,
            secure_store if secure_store is not None else FileSecureStore(),
        )
        self._owns_store = store is None
        self._store: KeyValueStore = store if store is not None else DiskKeyValueStore(get_store_dir())
        self._cache = CacheStore(self._store)
        self._executor = RequestExecutor(config, self._token_provider.get_token, transport)
        self._today = today

    @property
    def config(self) -> ServiceConfig:
        return self._config

    @property
    def cache(self) -> CacheStore:
        return self._cache

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> ApiService:
        await self._executor.__aenter__()
        return self

    async def __aexit__(self, *args: object) -> None:
        try:
            await self._executor.__aexit__(*args)
        finally:
            self.close()

    def close(self) -> None:
        """Close the default on-disk store if this client opened it.

        Call this when the client is only used for cache inspection, outside
        ``async with``. A store passed in by the caller is left open.
        """
        if self._owns_store and isinstance(self._store, DiskKeyValueStore):
            self._store.close()

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    async def request(
        self,
        path: str,
        method: str,
        body: Any = None,
        no_token: bool = False,
    ) -> ResponseBody:
        """Send one uncached request and return the tagged response body."""
        return await self._executor.request(path, method, body, no_token=no_token)

    async def get(
        self,
        path: str,
        options: CacheOptions | dict[str, Any] | None = None,
    ) -> Any:
        """GET *path*, optionally through the cache.

        Args:
            path: URL path or absolute URL.
            options: :class:`~apiservice.models.CacheOptions` or an
                equivalent dict.

        Returns:
            The decoded payload: fresh from the server, from a fresh cache
            entry, or from a stale entry when the request failed.

        Raises:
            ConfigurationError: ``use_cache`` is set without ``cache_key``.
            ServerError: Non-2xx response and no stale payload to fall back to.
            TransportError: Network failure and no stale payload to fall back to.
        """
        opts = CacheOptions.coerce(options)

        if not opts.use_cache:
            body = await self._executor.request(path, "GET", no_token=opts.no_token)
            return body.value

        if not opts.cache_key:
            raise ConfigurationError("`cache_key` is required when `use_cache` is true.")

        key = opts.cache_key
        cached_payload = self._cache.get(key)
        cached_date = self._cache.get_date(key)

        if (
            not opts.force_fetch
            and is_valid(cached_date, opts.max_age_in_days, self._today())
            and cached_payload is not None
        ):
            logger.debug("Using cache for key '%s'", key)
            decoded = decode_payload(key, cached_payload)
            if decoded.ok:
                return decoded.value
            logger.error("%s; clearing entry", decoded.error)
            self._cache.discard(key)

        logger.info("Fetching fresh data for key '%s'", key)
        try:
            body = await self._executor.request(path, "GET", no_token=opts.no_token)
        except (ServerError, TransportError):
            if cached_payload is None:
                raise
            logger.warning("Fetch failed, falling back to cached data for key '%s'", key)
            stale = decode_payload(key, cached_payload)
            if not stale.ok:
                logger.error("%s; clearing entry", stale.error)
                self._cache.discard(key)
                raise
            return stale.value

        self._cache.set(key, body.value, self._today())
        return body.value

    async def post(self, path: str, data: Any = None) -> Any:
        """POST *data* as JSON to *path*; never cached."""
        return (await self._executor.request(path, "POST", data)).value

    async def put(self, path: str, data: Any = None) -> Any:
        """PUT *data* as JSON to *path*; never cached."""
        return (await self._executor.request(path, "PUT", data)).value

    async def delete(self, path: str, data: Any = None) -> Any:
        """DELETE *path*, with an optional JSON body; never cached."""
        return (await self._executor.request(path, "DELETE", data)).value

    del_ = delete

    # ------------------------------------------------------------------ #
    # Cache inspection and management
    # ------------------------------------------------------------------ #

    def has_cache(self, key: str) -> bool:
        return self._cache.has(key)

    def get_cache(self, key: str) -> Optional[str]:
        """Raw stored payload for *key*, not decoded."""
        return self._cache.get(key)

    def get_cache_date(self, key: str) -> Optional[str]:
        return self._cache.get_date(key)

    def clear_cache(self, key: str) -> None:
        """Remove the entry for *key*; a missing entry is only logged."""
        self._cache.clear(key)

    def get_cache_keys(self) -> list[str]:
        """Storage keys of payload records (``cache_data_`` prefix included)."""
        return self._cache.list_payload_keys()

    def get_cache_date_keys(self) -> list[str]:
        """Storage keys of date records (``cache_date_`` prefix included)."""
        return self._cache.list_date_keys()

    # ------------------------------------------------------------------ #
    # Auth
    # ------------------------------------------------------------------ #

    def get_token(self) -> str:
        """The ``Authorization`` header value, created on first use."""
        return self._token_provider.get_token()
