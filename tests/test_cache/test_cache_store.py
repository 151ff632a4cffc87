"""Tests for the CacheStore records and the payload decode step."""

from __future__ import annotations

import datetime
import json
import logging
import sys

import pytest

from apiservice.cache import CacheStore, decode_payload
from apiservice.exceptions import CacheCorruptionError
from apiservice.storage import MemoryKeyValueStore


FETCHED = datetime.date(2024, 5, 1)

needs_int_digit_limit = pytest.mark.skipif(
    not hasattr(sys, "get_int_max_str_digits"),
    reason="interpreter has no integer string-conversion limit",
)


class DateWriteFails(MemoryKeyValueStore):
    """Raises on any write to a fetch-date record."""

    def set_string(self, key: str, value: str) -> None:
        if key.startswith("cache_date_"):
            raise OSError("disk full")
        super().set_string(key, value)


@pytest.fixture()
def cache(memory_store: MemoryKeyValueStore) -> CacheStore:
    return CacheStore(memory_store)


# ------------------------------------------------------------------ #
# Writing and reading
# ------------------------------------------------------------------ #


class TestSetAndGet:
    def test_roundtrip_structured_payload(self, cache: CacheStore) -> None:
        cache.set("k", {"a": 1}, FETCHED)
        assert json.loads(cache.get("k")) == {"a": 1}

    def test_writes_both_records(self, cache: CacheStore, memory_store: MemoryKeyValueStore) -> None:
        cache.set("items", [1, 2, 3], FETCHED)
        assert memory_store.get_string("cache_data_items") == "[1, 2, 3]"
        assert memory_store.get_string("cache_date_items") == "2024-05-01"
        assert cache.get_date("items") == "2024-05-01"

    def test_string_payload_stored_verbatim(self, cache: CacheStore) -> None:
        cache.set("k", "plain text", FETCHED)
        assert cache.get("k") == "plain text"

    def test_none_payload_stored_as_json_null(self, cache: CacheStore) -> None:
        cache.set("k", None, FETCHED)
        assert cache.get("k") == "null"

    def test_overwrites_previous_entry(self, cache: CacheStore) -> None:
        cache.set("k", {"v": 1}, FETCHED)
        cache.set("k", {"v": 2}, datetime.date(2024, 5, 2))
        assert json.loads(cache.get("k")) == {"v": 2}
        assert cache.get_date("k") == "2024-05-02"

    def test_missing_key_reads_as_none(self, cache: CacheStore) -> None:
        assert cache.get("missing") is None
        assert cache.get_date("missing") is None

    def test_empty_record_reads_as_none(self, memory_store: MemoryKeyValueStore, cache: CacheStore) -> None:
        memory_store.set_string("cache_data_k", "")
        assert cache.get("k") is None

    def test_has_checks_payload_record_only(self, memory_store: MemoryKeyValueStore, cache: CacheStore) -> None:
        memory_store.set_string("cache_date_k", "2024-05-01")
        assert cache.has("k") is False
        memory_store.set_string("cache_data_k", "{}")
        assert cache.has("k") is True

    def test_entry(self, cache: CacheStore) -> None:
        cache.set("k", {"a": 1}, FETCHED)
        entry = cache.entry("k")
        assert entry is not None
        assert entry.cache_key == "k"
        assert entry.payload == '{"a": 1}'
        assert entry.fetch_date == FETCHED

    def test_entry_missing(self, cache: CacheStore) -> None:
        assert cache.entry("missing") is None


# ------------------------------------------------------------------ #
# Clearing
# ------------------------------------------------------------------ #


class TestClear:
    def test_clear_removes_both_records(self, cache: CacheStore, memory_store: MemoryKeyValueStore) -> None:
        cache.set("k", {"a": 1}, FETCHED)
        cache.clear("k")
        assert memory_store.get_all_keys() == []

    def test_clear_nonexistent_is_noop(
        self,
        cache: CacheStore,
        memory_store: MemoryKeyValueStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        cache.set("other", {"a": 1}, FETCHED)
        before = dict.fromkeys(memory_store.get_all_keys())

        with caplog.at_level(logging.WARNING, logger="apiservice.cache.store"):
            cache.clear("missing")

        assert dict.fromkeys(memory_store.get_all_keys()) == before
        assert "No cache found for key 'missing'" in caplog.text

    def test_clear_keeps_orphan_date_when_payload_missing(
        self, cache: CacheStore, memory_store: MemoryKeyValueStore
    ) -> None:
        memory_store.set_string("cache_date_k", "2024-05-01")
        cache.clear("k")
        assert memory_store.has_key("cache_date_k")

    def test_discard_removes_unconditionally(self, cache: CacheStore, memory_store: MemoryKeyValueStore) -> None:
        memory_store.set_string("cache_date_k", "2024-05-01")
        cache.discard("k")
        assert memory_store.get_all_keys() == []


# ------------------------------------------------------------------ #
# Key listings
# ------------------------------------------------------------------ #


class TestListing:
    def test_lists_prefixed_storage_keys(self, cache: CacheStore, memory_store: MemoryKeyValueStore) -> None:
        cache.set("a", 1, FETCHED)
        cache.set("b", 2, FETCHED)
        memory_store.set_string("unrelated", "x")

        assert sorted(cache.list_payload_keys()) == ["cache_data_a", "cache_data_b"]
        assert sorted(cache.list_date_keys()) == ["cache_date_a", "cache_date_b"]

    def test_lists_logical_keys(self, cache: CacheStore) -> None:
        cache.set("users/1", {}, FETCHED)
        assert cache.list_cache_keys() == ["users/1"]


# ------------------------------------------------------------------ #
# Decode step
# ------------------------------------------------------------------ #


class TestDecodePayload:
    def test_valid_json(self) -> None:
        result = decode_payload("k", '{"a": 1}')
        assert result.ok
        assert result.value == {"a": 1}

    def test_json_null_is_a_success(self) -> None:
        result = decode_payload("k", "null")
        assert result.ok
        assert result.value is None

    def test_corrupt_payload_returns_error(self) -> None:
        result = decode_payload("k", "{not json")
        assert not result.ok
        assert isinstance(result.error, CacheCorruptionError)
        assert result.error.cache_key == "k"
        assert "corrupt" in str(result.error)

    @needs_int_digit_limit
    def test_oversized_integer_is_corrupt(self) -> None:
        result = decode_payload("k", "1" * 5000)
        assert not result.ok
        assert isinstance(result.error, CacheCorruptionError)

    def test_deeply_nested_payload_is_corrupt(self) -> None:
        result = decode_payload("k", "[" * 200000)
        assert not result.ok
        assert isinstance(result.error, CacheCorruptionError)


class TestFailedWrite:
    def test_failed_date_write_keeps_previous_entry(self) -> None:
        store = DateWriteFails(
            {"cache_data_k": '{"old": 1}', "cache_date_k": "2024-05-09"}
        )
        cache = CacheStore(store)
        with pytest.raises(OSError):
            cache.set("k", {"new": 1}, datetime.date(2024, 5, 10))
        assert cache.get("k") == '{"old": 1}'
        assert cache.get_date("k") == "2024-05-09"

    def test_failed_first_write_leaves_nothing(self) -> None:
        cache = CacheStore(DateWriteFails())
        with pytest.raises(OSError):
            cache.set("k", {"new": 1}, FETCHED)
        assert cache.has("k") is False
        assert cache.backend.get_all_keys() == []
