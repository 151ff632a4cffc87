"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apiservice.exceptions.ApiServiceError` subclass.
Shell wrappers can inspect the exit code of the ``apiservice`` command to
tell a rejected request from an unreachable server without parsing stderr.

Example::

    $ apiservice get /items
    $ echo $?
    5   # EXIT_SERVER_ERROR -- the API answered with a non-2xx status
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_CONFIG_ERROR = 2
"""Required configuration is missing or invalid (base URL, token seed, cache key)."""

EXIT_SERVER_ERROR = 5
"""The remote API answered with a status outside the 2xx range."""

EXIT_TRANSPORT_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
