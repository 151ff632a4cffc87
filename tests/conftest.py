"""Shared test fixtures for apiservice.

Provides isolated config directories and in-memory stores. Fixtures are
discovered by pytest and available to every test module.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from apiservice.auth import MemorySecureStore
from apiservice.output import reset_output
from apiservice.storage import MemoryKeyValueStore


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager caches Rich consoles bound to the streams that were current
    when it was created; CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every XDG directory at tmp_path and clear APISERVICE_* variables.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("apiservice.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["APISERVICE_BASE_URL", "APISERVICE_TOKEN_KEY"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def secure_store() -> MemorySecureStore:
    return MemorySecureStore()
