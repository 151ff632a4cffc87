"""Bearer token provider.

The API authorises requests with a single static bearer token. Its secret is
shipped base64-encoded as :attr:`~apiservice.models.ServiceConfig.token_key`
and decoded exactly once, on first use, into ``"Bearer <secret>"``. The
result is persisted in a :class:`~apiservice.auth.credential_store.SecureStore`
under the ``"token"`` key and reused from there by every later call and every
later process. The token is never rotated.
"""

from __future__ import annotations

import base64
import binascii
import logging
import threading
from typing import Optional

from apiservice.auth.credential_store import SecureStore
from apiservice.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

TOKEN_STORE_KEY = "token"


def decode_token_key(token_key: str) -> str:
    """Decode the base64 seed into the ``Authorization`` header value.

    Raises:
        ConfigurationError: If *token_key* is not valid base64 or does not
            decode to UTF-8 text.
    """
    try:
        secret = base64.b64decode(token_key, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Token key is not valid base64: {exc}") from exc
    return f"Bearer {secret}"


class TokenProvider:
    """Get-or-create access to the persisted bearer token.

    The first :meth:`get_token` call that finds the store empty decodes the
    seed and writes the token; the write happens under a lock, so threads
    racing through first use produce a single store write.

    Args:
        token_key: Base64-encoded secret, or ``None`` when the store is
            expected to hold a token already.
        store: Where the token is persisted.
    """

    def __init__(self, token_key: Optional[str], store: SecureStore) -> None:
        self._token_key = token_key
        self._store = store
        self._lock = threading.Lock()

    def get_token(self) -> str:
        """Return the stored token, creating it from the seed on first use.

        Raises:
            ConfigurationError: If no token is stored and there is no valid
                seed to derive one from.
        """
        token = self._store.get_sync(TOKEN_STORE_KEY)
        if token:
            return token

        with self._lock:
            token = self._store.get_sync(TOKEN_STORE_KEY)
            if token:
                return token
            if not self._token_key:
                raise ConfigurationError(
                    "No token stored and no token key configured"
                )
            self._store.set_sync(TOKEN_STORE_KEY, decode_token_key(self._token_key))
            logger.debug("Stored bearer token derived from token key")
            token = self._store.get_sync(TOKEN_STORE_KEY)

        if not token:
            raise ConfigurationError("Secure store did not retain the token")
        return token
