"""Secure secret storage.

The token provider talks to its store through the two-method
:class:`SecureStore` protocol (``get_sync`` / ``set_sync``). Two
implementations are provided:

* :class:`FileSecureStore` -- keeps all secrets in one JSON file,
  ``~/.local/share/apiservice/credentials/secrets.json`` by default (XDG) or
  the platform-equivalent directory. Writes go through
  :func:`apiservice.config._atomic_write` with ``0o600`` permissions so the
  file is never world-readable, even momentarily.
* :class:`MemorySecureStore` -- a dict, for tests.

See Also:
    :class:`~apiservice.auth.token.TokenProvider` -- the only consumer.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from apiservice.config import _atomic_write, get_credentials_dir


@runtime_checkable
class SecureStore(Protocol):
    """Synchronous secret store keyed by name."""

    def get_sync(self, key: str) -> Optional[str]: ...

    def set_sync(self, key: str, value: str) -> None: ...


class StoredSecret(BaseModel):
    """A single secret persisted by :class:`FileSecureStore`."""

    value: str = Field(description="The secret value")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the secret was first written (UTC)",
    )


class FileSecureStore:
    """Read/write secrets kept in a single ``0o600`` JSON file.

    Args:
        path: File to use. Defaults to ``secrets.json`` inside
            :func:`~apiservice.config.get_credentials_dir`.

    Example::

        store = FileSecureStore(tmp_path / "secrets.json")
        store.set_sync("token", "Bearer abc")
        assert store.get_sync("token") == "Bearer abc"
    """

    def __init__(self, path: Optional[str | Path] = None) -> None:
        self._path = Path(path) if path is not None else get_credentials_dir() / "secrets.json"

    @property
    def path(self) -> Path:
        """The filesystem path of the secrets file."""
        return self._path

    def get_sync(self, key: str) -> Optional[str]:
        """Return the secret stored under *key*, or ``None`` when absent."""
        secret = self._load().get(key)
        return secret.value if secret is not None else None

    def set_sync(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value.

        Raises:
            OSError: If the file cannot be written (permissions, disk full, etc.).
        """
        secrets = self._load()
        secrets[key] = StoredSecret(value=value)
        data = {name: secret.model_dump(mode="json") for name, secret in secrets.items()}
        _atomic_write(self._path, json.dumps(data, indent=2) + "\n", mode=0o600)

    def clear(self) -> None:
        """Delete the secrets file. No-op when it does not exist."""
        if self._path.is_file():
            self._path.unlink()

    def _load(self) -> dict[str, StoredSecret]:
        """Read every secret from disk; an unreadable file counts as empty."""
        if not self._path.is_file():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return {name: StoredSecret.model_validate(item) for name, item in raw.items()}
        except (json.JSONDecodeError, ValueError, AttributeError, OSError):
            return {}


class MemorySecureStore:
    """In-process :class:`SecureStore`; records writes in :attr:`writes` for tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self.writes = 0

    def get_sync(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_sync(self, key: str, value: str) -> None:
        self.writes += 1
        self._data[key] = value
