"""Settings, on-disk locations, and precedence resolution.

* **Locations** -- XDG base directories on Linux/BSD, ``~/.apiservice/`` on
  macOS and Windows (:func:`get_config_dir`, :func:`get_cache_dir`,
  :func:`get_data_dir`). The cache store lives in :func:`get_store_dir`, the
  bearer token in :func:`get_credentials_dir`.
* **Settings file** -- one :class:`~apiservice.models.ServiceConfig` as JSON.
* **Resolution** -- :func:`resolve_config` layers the ``--base-url`` flag and
  ``APISERVICE_*`` variables over the settings file.

Files are replaced atomically (:func:`_atomic_write`), never edited in place.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from apiservice.exceptions import ConfigurationError
from apiservice.models import ServiceConfig

_APP_NAME = "apiservice"
_CONFIG_FILENAME = "config.json"

ENV_BASE_URL = "APISERVICE_BASE_URL"
ENV_TOKEN_KEY = "APISERVICE_TOKEN_KEY"

# kind -> (XDG variable, default under $HOME, sub-directory of ~/.apiservice)
_DIR_KINDS: dict[str, tuple[str, tuple[str, ...], Optional[str]]] = {
    "config": ("XDG_CONFIG_HOME", (".config",), None),
    "cache": ("XDG_CACHE_HOME", (".cache",), "cache"),
    "data": ("XDG_DATA_HOME", (".local", "share"), "data"),
}


# --- Locations ---


def _is_xdg_platform() -> bool:
    """True on Linux and the BSDs."""
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    """Resolve and create the *kind* directory (``config``, ``cache`` or ``data``)."""
    env_var, home_segments, fallback_sub = _DIR_KINDS[kind]
    if _is_xdg_platform():
        base = os.environ.get(env_var) or str(Path.home().joinpath(*home_segments))
        path = Path(base) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if fallback_sub:
            path = path / fallback_sub
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/apiservice`` or ``~/.apiservice``."""
    return _app_dir("config")


def get_cache_dir() -> Path:
    """``$XDG_CACHE_HOME/apiservice`` or ``~/.apiservice/cache``.

    Only holds cached GET payloads; safe to delete.
    """
    return _app_dir("cache")


def get_data_dir() -> Path:
    """``$XDG_DATA_HOME/apiservice`` or ``~/.apiservice/data``."""
    return _app_dir("data")


def get_store_dir() -> Path:
    """Directory of the default on-disk key-value store."""
    return get_cache_dir() / "store"


def get_credentials_dir() -> Path:
    path = get_data_dir() / "credentials"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic writes ---


def _atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Replace *path* with *data* via a sibling temp file and ``os.replace``.

    With *mode*, the temp file gets its permissions before the content is
    written, so a secret is never readable by others.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            if mode is not None:
                os.chmod(tmp_path, mode)
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


# --- Settings file ---


def config_path() -> Path:
    """Path to the settings file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_config() -> ServiceConfig:
    """Load the settings file from the config directory.

    Returns:
        The deserialised :class:`~apiservice.models.ServiceConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigurationError: If the file exists but contains invalid JSON or
            fails Pydantic validation.
    """
    path = config_path()
    if not path.is_file():
        return ServiceConfig()
    try:
        text = path.read_text(encoding="utf-8")
        return ServiceConfig.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: ServiceConfig) -> None:
    """Persist the settings atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_config(
    cli_base_url: Optional[str] = None,
    require_base_url: bool = True,
) -> ServiceConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flag (``cli_base_url``)
        2. Environment variables (``APISERVICE_BASE_URL``, ``APISERVICE_TOKEN_KEY``)
        3. Settings file (``~/.config/apiservice/config.json``)
        4. Defaults

    Raises:
        ConfigurationError: If *require_base_url* is set and no base URL is
            configured anywhere.
    """
    config = load_config()
    updates: dict[str, str] = {}

    env_token = os.environ.get(ENV_TOKEN_KEY)
    if env_token:
        updates["token_key"] = env_token

    env_base_url = os.environ.get(ENV_BASE_URL)
    if cli_base_url is not None:
        updates["base_url"] = cli_base_url
    elif env_base_url:
        updates["base_url"] = env_base_url

    if updates:
        config = config.model_copy(update=updates)

    if require_base_url and not config.base_url:
        raise ConfigurationError(
            f"No base URL configured. Set {ENV_BASE_URL}, pass --base-url, "
            "or run 'apiservice config set base_url <url>'."
        )
    return config
