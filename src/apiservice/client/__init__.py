"""HTTP client module for apiservice.

Classes:
    :class:`ApiService` -- the public client: uncached requests, cached GET
    with stale fallback, cache inspection, and token access.
    :class:`RequestExecutor` -- a single HTTP call over :class:`httpx.AsyncClient`.

Response bodies are returned by :meth:`ApiService.request` as the tagged union
:data:`ResponseBody` (:class:`Structured`, :class:`Text`, :class:`Empty`).

Example::

    from apiservice.client import ApiService

    async with ApiService(config) as api:
        profile = await api.get("/me")
"""

from apiservice.client.executor import RequestExecutor
from apiservice.client.response import EMPTY, Empty, ResponseBody, Structured, Text, decode_body
from apiservice.client.service import ApiService

__all__ = [
    "ApiService",
    "RequestExecutor",
    "ResponseBody",
    "Structured",
    "Text",
    "Empty",
    "EMPTY",
    "decode_body",
]
