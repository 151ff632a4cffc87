"""Single-shot HTTP request execution.

:class:`RequestExecutor` wraps :class:`httpx.AsyncClient` and performs exactly
one HTTP call per :meth:`~RequestExecutor.request`:

- **URL resolution** -- absolute URLs are used as-is, anything else is
  appended to :attr:`~apiservice.models.ServiceConfig.base_url`.
- **Headers** -- ``Content-Type: application/json`` always, plus
  ``Authorization`` from the token provider unless the call opts out.
- **Status mapping** -- 2xx decodes the body (see
  :func:`~apiservice.client.response.decode_body`); anything else raises
  :class:`~apiservice.exceptions.ServerError`.
- **Transport failures** -- network errors and unusable URLs are wrapped in
  :class:`~apiservice.exceptions.TransportError`, logged, and raised. There
  is no retry at this layer.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import httpx

from apiservice.client.response import ResponseBody, decode_body
from apiservice.exceptions import ServerError, TransportError
from apiservice.models import ServiceConfig

logger = logging.getLogger(__name__)

NO_TOKEN_FLAG = "noToken"


def is_absolute_url(path: str) -> bool:
    """Whether *path* already carries a scheme and host."""
    parts = urlsplit(path)
    return bool(parts.scheme and parts.netloc)


def split_no_token(body: Any, no_token: bool = False) -> tuple[Any, bool]:
    """Separate the ``noToken`` flag from a request body.

    The flag is removed from a copy of a dict body so it is never sent and the
    caller's dict is left untouched.

    Returns:
        ``(body_to_send, no_token)``.
    """
    if isinstance(body, dict) and NO_TOKEN_FLAG in body:
        body = dict(body)
        no_token = bool(body.pop(NO_TOKEN_FLAG)) or no_token
    return body, no_token


class RequestExecutor:
    """Executes HTTP calls against the configured endpoint.

    Must be used as an async context manager so that the underlying
    :class:`httpx.AsyncClient` is opened and closed.

    Args:
        config: Endpoint configuration (base URL, timeout, SSL verification).
        token_provider: Callable returning the ``Authorization`` header value.
            When ``None``, requests are sent without a token.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`.

    Example::

        async with RequestExecutor(config, provider.get_token) as executor:
            body = await executor.request("/items", "GET")
    """

    def __init__(
        self,
        config: ServiceConfig,
        token_provider: Optional[Callable[[], str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._token_provider = token_provider
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> RequestExecutor:
        self._client = httpx.AsyncClient(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def resolve_url(self, path: str) -> str:
        """Return *path* unchanged if absolute, else ``base_url + path``."""
        if is_absolute_url(path):
            return path
        return f"{self._config.base_url}{path}"

    def build_headers(self, no_token: bool = False) -> dict[str, str]:
        """Headers for a request, with ``Authorization`` unless *no_token*."""
        headers = {"Content-Type": "application/json"}
        if not no_token and self._token_provider is not None:
            headers["Authorization"] = self._token_provider()
        return headers

    async def request(
        self,
        path: str,
        method: str,
        body: Any = None,
        no_token: bool = False,
    ) -> ResponseBody:
        """Send one request and decode the response.

        Args:
            path: URL path (appended to ``base_url``) or absolute URL.
            method: HTTP method.
            body: JSON-serialisable body; a dict may carry ``noToken``.
            no_token: Omit the ``Authorization`` header.

        Returns:
            The decoded :data:`~apiservice.client.response.ResponseBody`.

        Raises:
            ServerError: On a status outside 200-299.
            TransportError: On network failures, an invalid URL, or an
                unserialisable body.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        url = self.resolve_url(path)
        payload, no_token = split_no_token(body, no_token)
        headers = self.build_headers(no_token)

        try:
            content = json.dumps(payload) if payload is not None else None
        except (TypeError, ValueError, RecursionError) as exc:
            logger.error("ApiService request error: cannot serialise body for %s %s: %s", method, url, exc)
            raise TransportError(f"Cannot serialise request body: {exc}") from exc

        try:
            response = await self._client.request(method, url, headers=headers, content=content)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("ApiService request error: %s %s: %s", method, url, exc)
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            logger.error("ApiService request error: %s %s returned %d", method, url, response.status_code)
            raise ServerError(response.status_code)

        return decode_body(response)
