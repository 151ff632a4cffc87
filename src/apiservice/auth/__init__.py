"""Authorization for apiservice.

* :class:`TokenProvider` -- derives the bearer token once from the configured
  seed and persists it.
* :class:`SecureStore` -- the storage protocol the provider writes to, with
  :class:`FileSecureStore` and :class:`MemorySecureStore` implementations.
"""

from apiservice.auth.credential_store import (
    FileSecureStore,
    MemorySecureStore,
    SecureStore,
    StoredSecret,
)
from apiservice.auth.token import TOKEN_STORE_KEY, TokenProvider, decode_token_key

__all__ = [
    "SecureStore",
    "FileSecureStore",
    "MemorySecureStore",
    "StoredSecret",
    "TokenProvider",
    "TOKEN_STORE_KEY",
    "decode_token_key",
]
