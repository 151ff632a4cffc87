"""apiservice -- a thin HTTP API client with day-granularity GET caching.

Requests carry a bearer token derived once from a base64 seed and persisted
in a secure store. GET requests can opt into a local cache keyed by a
caller-chosen name: a cached payload is served for the rest of the day it was
fetched on (or up to ``max_age_in_days``), a stale payload is served when the
server cannot be reached, and a corrupt payload is discarded and refetched.

Typical use::

    from apiservice import ApiService, ServiceConfig

    config = ServiceConfig(base_url="https://api.example.com", token_key="c2VjcmV0")
    async with ApiService(config) as api:
        items = await api.get("/items", {"use_cache": True, "cache_key": "items"})

Modules:
    client: The :class:`ApiService` client and the request executor.
    cache: Cache records and the freshness policy.
    auth: Token provider and secure stores.
    storage: Key-value stores backing the cache.
    config: XDG paths, settings file, and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from apiservice.client import ApiService  # noqa: E402
from apiservice.exceptions import (  # noqa: E402
    ApiServiceError,
    ConfigurationError,
    ServerError,
    TransportError,
)
from apiservice.models import CacheOptions, ServiceConfig  # noqa: E402

__all__ = [
    "__version__",
    "ApiService",
    "ApiServiceError",
    "CacheOptions",
    "ConfigurationError",
    "ServerError",
    "ServiceConfig",
    "TransportError",
]
