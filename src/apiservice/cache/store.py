"""Cache records for GET payloads, kept in a string key-value store.

Every logical cache key owns two records in the underlying
:class:`~apiservice.storage.KeyValueStore`:

* ``cache_data_<key>`` -- the payload, JSON-serialised unless it already is a
  string, in which case it is stored verbatim.
* ``cache_date_<key>`` -- the fetch date as ``YYYY-MM-DD``.

Both records are written and removed together. Reading a payload back is a
separate, explicit step (:func:`decode_payload`) that returns a
:class:`DecodeResult` instead of raising, so that a corrupt entry can be
handled as a cache miss by the caller.
"""

from __future__ import annotations

import datetime
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from apiservice.cache.freshness import parse_fetch_date
from apiservice.exceptions import CacheCorruptionError
from apiservice.models import CacheEntry
from apiservice.storage import KeyValueStore

logger = logging.getLogger(__name__)

DATA_PREFIX = "cache_data_"
DATE_PREFIX = "cache_date_"


def data_key(cache_key: str) -> str:
    """Storage key of the payload record for *cache_key*."""
    return f"{DATA_PREFIX}{cache_key}"


def date_key(cache_key: str) -> str:
    """Storage key of the fetch-date record for *cache_key*."""
    return f"{DATE_PREFIX}{cache_key}"


def serialize_payload(payload: Any) -> str:
    """Return the stored form of *payload*: strings verbatim, anything else as JSON."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload)


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding a cached payload.

    Exactly one of :attr:`value` (on success) or :attr:`error` is meaningful;
    check :attr:`ok` first since ``None`` is a legitimate decoded value.
    """

    value: Any = None
    error: Optional[CacheCorruptionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def decode_payload(cache_key: str, payload: str) -> DecodeResult:
    """JSON-decode a stored payload without raising on corruption."""
    try:
        return DecodeResult(value=json.loads(payload))
    except (ValueError, TypeError, RecursionError) as exc:
        return DecodeResult(error=CacheCorruptionError(cache_key, str(exc)))


class CacheStore:
    """Payload and fetch-date records for logical cache keys.

    Args:
        store: Backing key-value store. The cache store owns every record
            under the ``cache_data_`` and ``cache_date_`` prefixes.

    Example::

        cache = CacheStore(MemoryKeyValueStore())
        cache.set("items", {"a": 1}, datetime.date(2024, 5, 1))
        cache.get("items")       # '{"a": 1}'
        cache.get_date("items")  # '2024-05-01'
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @property
    def backend(self) -> KeyValueStore:
        """The underlying key-value store."""
        return self._store

    def get(self, cache_key: str) -> Optional[str]:
        """Return the raw stored payload, or ``None`` when absent or empty."""
        return self._store.get_string(data_key(cache_key)) or None

    def get_date(self, cache_key: str) -> Optional[str]:
        """Return the stored fetch date string, or ``None`` when absent or empty."""
        return self._store.get_string(date_key(cache_key)) or None

    def has(self, cache_key: str) -> bool:
        """Whether a payload record exists; the date record is not consulted."""
        return self._store.has_key(data_key(cache_key))

    def set(self, cache_key: str, payload: Any, fetch_date: datetime.date) -> None:
        """Store *payload* and its *fetch_date*, replacing any previous entry.

        Both records are written in one :meth:`~apiservice.storage.KeyValueStore.set_many`
        call; a failed write leaves the previous entry intact.
        """
        self._store.set_many(
            {
                data_key(cache_key): serialize_payload(payload),
                date_key(cache_key): fetch_date.isoformat(),
            }
        )

    def clear(self, cache_key: str) -> None:
        """Remove both records for *cache_key*.

        Logs a warning and returns without touching the store when no payload
        record exists.
        """
        if not self._store.has_key(data_key(cache_key)):
            logger.warning("No cache found for key '%s'", cache_key)
            return
        self._store.remove(data_key(cache_key))
        self._store.remove(date_key(cache_key))
        logger.info("Cleared cache for key '%s'", cache_key)

    def discard(self, cache_key: str) -> None:
        """Remove both records unconditionally, without logging absence."""
        self._store.remove(data_key(cache_key))
        self._store.remove(date_key(cache_key))

    def entry(self, cache_key: str) -> Optional[CacheEntry]:
        """Return both records as a :class:`~apiservice.models.CacheEntry`, or ``None``."""
        payload = self.get(cache_key)
        if payload is None:
            return None
        return CacheEntry(
            cache_key=cache_key,
            payload=payload,
            fetch_date=parse_fetch_date(self.get_date(cache_key)),
        )

    def list_payload_keys(self) -> list[str]:
        """Storage keys of all payload records, prefix included."""
        return [k for k in self._store.get_all_keys() if k.startswith(DATA_PREFIX)]

    def list_date_keys(self) -> list[str]:
        """Storage keys of all fetch-date records, prefix included."""
        return [k for k in self._store.get_all_keys() if k.startswith(DATE_PREFIX)]

    def list_cache_keys(self) -> list[str]:
        """Logical cache keys that have a payload record, prefix stripped."""
        return [k[len(DATA_PREFIX):] for k in self.list_payload_keys()]
