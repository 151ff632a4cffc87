"""Exception hierarchy for apiservice.

All public exceptions inherit from :class:`ApiServiceError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apiservice.exit_codes`.
The CLI entry point in :func:`apiservice.app.main` catches ``ApiServiceError``
and exits with the appropriate code.

Subclass hierarchy::

    ApiServiceError (exit 1)
    +-- ConfigurationError    (exit 2)
    +-- ServerError           (exit 5)
    +-- TransportError        (exit 6)
    +-- CacheCorruptionError  (exit 1, never leaves the client)
"""

from apiservice.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_SERVER_ERROR,
    EXIT_TRANSPORT_ERROR,
)


class ApiServiceError(Exception):
    """Base exception for all apiservice errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(ApiServiceError):
    """Raised for missing or invalid configuration.

    Covers a cached ``get`` without a ``cache_key``, an unset base URL, an
    undecodable token seed, and unreadable settings files.
    """

    exit_code = EXIT_CONFIG_ERROR


class ServerError(ApiServiceError):
    """Raised when the API answers with a status code outside 200-299.

    Args:
        status_code: The HTTP status code returned by the server.
        message: Optional description; defaults to
            ``"Server responded with status <code>"``.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(self, status_code: int, message: str | None = None):
        super().__init__(message or f"Server responded with status {status_code}")
        self.status_code = status_code


class TransportError(ApiServiceError):
    """Raised on network-level failures or when a request body cannot be serialised.

    The underlying exception is always chained as ``__cause__``.
    """

    exit_code = EXIT_TRANSPORT_ERROR


class CacheCorruptionError(ApiServiceError):
    """A cached payload could not be decoded as JSON.

    Produced by :func:`apiservice.cache.store.decode_payload` and handled
    inside :class:`~apiservice.client.service.ApiService` by clearing the
    entry. Callers of the public API never see it.

    Args:
        cache_key: The logical cache key whose payload is corrupt.
        reason: The decoder's error message.
    """

    def __init__(self, cache_key: str, reason: str):
        super().__init__(f"Cached payload for '{cache_key}' is corrupt: {reason}")
        self.cache_key = cache_key
        self.reason = reason
