"""Persistent key-value storage for apiservice.

Exposes the :class:`KeyValueStore` protocol consumed by the cache layer and
its two implementations, :class:`DiskKeyValueStore` (backed by
:mod:`diskcache`) and :class:`MemoryKeyValueStore`.
"""

from apiservice.storage.kv import DiskKeyValueStore, KeyValueStore, MemoryKeyValueStore

__all__ = ["KeyValueStore", "DiskKeyValueStore", "MemoryKeyValueStore"]
