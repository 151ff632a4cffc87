"""Persistent string key-value stores.

The cache layer only needs a handful of operations on string keys and values,
captured by the :class:`KeyValueStore` protocol. Two implementations ship
with the package:

* :class:`DiskKeyValueStore` -- persists to a :mod:`diskcache` directory,
  surviving process restarts. This is the default used by the CLI.
* :class:`MemoryKeyValueStore` -- a plain dict, for tests and short-lived
  processes.

Values never expire at this layer; freshness is decided by
:mod:`apiservice.cache.freshness` from the stored fetch date.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

import diskcache


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal string store consumed by :class:`~apiservice.cache.store.CacheStore`."""

    def get_string(self, key: str) -> Optional[str]: ...

    def set_string(self, key: str, value: str) -> None: ...

    def set_many(self, items: dict[str, str]) -> None:
        """Write every item or, if any write fails, none of them."""
        ...

    def remove(self, key: str) -> None: ...

    def has_key(self, key: str) -> bool: ...

    def get_all_keys(self) -> list[str]: ...


class DiskKeyValueStore:
    """Key-value store backed by a :class:`diskcache.Cache` directory.

    Each ``set_string`` is a single SQLite transaction inside diskcache, so
    individual records are never partially written.

    Args:
        directory: Directory holding the diskcache database. Created on
            first use.

    Example::

        store = DiskKeyValueStore("/tmp/apiservice-store")
        store.set_string("greeting", "hello")
        assert store.get_string("greeting") == "hello"
        store.close()
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)
        self._cache = diskcache.Cache(str(self._directory))

    @property
    def directory(self) -> Path:
        """Filesystem location of the store."""
        return self._directory

    def get_string(self, key: str) -> Optional[str]:
        value = self._cache.get(key)
        if value is None:
            return None
        return str(value)

    def set_string(self, key: str, value: str) -> None:
        self._cache.set(key, value)

    def set_many(self, items: dict[str, str]) -> None:
        """Write all *items* in one diskcache transaction."""
        with self._cache.transact():
            for key, value in items.items():
                self.set_string(key, value)

    def remove(self, key: str) -> None:
        self._cache.delete(key)

    def has_key(self, key: str) -> bool:
        return key in self._cache

    def get_all_keys(self) -> list[str]:
        return [str(key) for key in self._cache.iterkeys()]

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        self._cache.close()


class MemoryKeyValueStore:
    """In-process key-value store; contents are lost when the object is dropped."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get_string(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_string(self, key: str, value: str) -> None:
        self._data[key] = value

    def set_many(self, items: dict[str, str]) -> None:
        snapshot = dict(self._data)
        try:
            for key, value in items.items():
                self.set_string(key, value)
        except BaseException:
            self._data = snapshot
            raise

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def has_key(self, key: str) -> bool:
        return key in self._data

    def get_all_keys(self) -> list[str]:
        return list(self._data)

    def close(self) -> None:
        """No-op, present for interface parity with :class:`DiskKeyValueStore`."""
