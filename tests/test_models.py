"""Tests for the shared Pydantic models."""

from __future__ import annotations

import pydantic
import pytest

from apiservice.models import CacheOptions, ServiceConfig


class TestCacheOptions:
    def test_defaults(self) -> None:
        options = CacheOptions()
        assert options.use_cache is False
        assert options.cache_key is None
        assert options.max_age_in_days == 1
        assert options.force_fetch is False
        assert options.no_token is False

    def test_camel_case_aliases(self) -> None:
        options = CacheOptions.model_validate(
            {
                "useCache": True,
                "cacheKey": "items",
                "maxAgeInDays": 3,
                "forceFetch": True,
                "noToken": True,
            }
        )
        assert options == CacheOptions(
            use_cache=True, cache_key="items", max_age_in_days=3, force_fetch=True, no_token=True
        )

    @pytest.mark.parametrize("value", [0, -1])
    def test_max_age_must_be_positive(self, value: int) -> None:
        with pytest.raises(pydantic.ValidationError):
            CacheOptions(max_age_in_days=value)

    def test_coerce(self) -> None:
        options = CacheOptions(use_cache=True, cache_key="k")
        assert CacheOptions.coerce(options) is options
        assert CacheOptions.coerce(None) == CacheOptions()
        assert CacheOptions.coerce({"cacheKey": "k", "use_cache": True}) == options


class TestServiceConfig:
    def test_frozen(self) -> None:
        config = ServiceConfig(base_url="https://api.example.com")
        with pytest.raises(pydantic.ValidationError):
            config.base_url = "https://other.example.com"

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ServiceConfig(timeout=0)
