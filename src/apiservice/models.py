"""Canonical Pydantic models shared across apiservice modules.

**Configuration** -- :class:`ServiceConfig` is serialised as JSON in the user's
config directory and passed explicitly to
:class:`~apiservice.client.service.ApiService`. It is frozen: the base URL and
token seed are fixed for the lifetime of a client.

**Per-call options** -- :class:`CacheOptions` controls the cached GET path.
It accepts both snake_case field names and the camelCase spellings used by
JavaScript callers (``useCache``, ``cacheKey``, ``maxAgeInDays``,
``forceFetch``, ``noToken``).

**Cache records** -- :class:`CacheEntry` is a read-only view of the two
records the cache store keeps per key.
"""

from __future__ import annotations

import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceConfig(BaseModel):
    """Endpoint configuration for a client instance.

    Example::

        ServiceConfig(
            base_url="https://api.example.com",
            token_key="c2VjcmV0LXRva2Vu",
        )
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        default="", description="Prefix for relative request paths"
    )
    token_key: Optional[str] = Field(
        default=None,
        description="Base64-encoded secret; decoded once into the bearer token",
    )
    timeout: float = Field(default=30, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class CacheOptions(BaseModel):
    """Options for a single :meth:`~apiservice.client.service.ApiService.get` call.

    ``cache_key`` is only required when ``use_cache`` is set; the client raises
    :class:`~apiservice.exceptions.ConfigurationError` at call time rather
    than at construction so that a missing key surfaces from ``get`` itself.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    use_cache: bool = Field(default=False, alias="useCache")
    cache_key: Optional[str] = Field(default=None, alias="cacheKey")
    max_age_in_days: int = Field(default=1, ge=1, alias="maxAgeInDays")
    force_fetch: bool = Field(default=False, alias="forceFetch")
    no_token: bool = Field(
        default=False,
        alias="noToken",
        description="Send the request without an Authorization header",
    )

    @classmethod
    def coerce(cls, options: CacheOptions | dict[str, Any] | None) -> CacheOptions:
        """Build options from ``None``, a dict, or an existing instance."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.model_validate(options)


class CacheEntry(BaseModel):
    """The payload and fetch date stored for one logical cache key."""

    cache_key: str
    payload: str = Field(description="Serialised payload exactly as stored")
    fetch_date: Optional[datetime.date] = Field(
        default=None, description="Calendar date of the fetch that produced payload"
    )
