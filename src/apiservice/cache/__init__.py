"""Day-granularity GET caching for apiservice.

This package provides :class:`CacheStore`, which keeps a serialised payload
and its fetch date per logical cache key in a
:class:`~apiservice.storage.KeyValueStore`, and :func:`is_valid`, the
freshness policy that decides whether a stored date is recent enough.

Both are consumed by :class:`~apiservice.client.service.ApiService` when a
``get`` call sets ``use_cache``.
"""

from apiservice.cache.freshness import is_valid
from apiservice.cache.store import CacheStore, DecodeResult, decode_payload

__all__ = ["CacheStore", "DecodeResult", "decode_payload", "is_valid"]
