"""Decoded response bodies.

A successful response body is one of three shapes, modelled as a small tagged
union so callers can dispatch on the type instead of guessing from the value:

* :class:`Structured` -- the body parsed as JSON.
* :class:`Text` -- the body was not JSON; the raw text is kept.
* :class:`Empty` -- the response had no body.

All three expose :attr:`value`, the plain Python value the public
:class:`~apiservice.client.service.ApiService` methods return
(the JSON value, the text, or ``None``).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Union

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Structured:
    """A body that decoded as JSON."""

    value: Any


@dataclass(frozen=True)
class Text:
    """A non-JSON body, kept as text."""

    text: str

    @property
    def value(self) -> str:
        return self.text


@dataclass(frozen=True)
class Empty:
    """A successful response without content."""

    @property
    def value(self) -> None:
        return None


ResponseBody = Union[Structured, Text, Empty]

EMPTY = Empty()


def decode_body(response: httpx.Response) -> ResponseBody:
    """Decode a successful response leniently.

    Attempts JSON first; a body that is not valid JSON is returned as
    :class:`Text` rather than failing the call.

    Args:
        response: The :class:`httpx.Response` to read (already received).

    Returns:
        :class:`Structured`, :class:`Text`, or :data:`EMPTY`.
    """
    if not response.content:
        return EMPTY

    text = response.text
    try:
        return Structured(json.loads(text))
    except (ValueError, RecursionError) as exc:
        logger.warning("Failed to parse JSON, returning as plain text: %s", exc)
        return Text(text)
