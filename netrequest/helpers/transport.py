"""Single-attempt HTTP transport used by the retrying request helper.

The transport performs exactly one round trip and raises on failure. Retries,
delays and result shaping all live in ``http_client``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any, Protocol

import requests


class Transport(Protocol):
    async def send(self, request: Mapping[str, Any]) -> tuple[Any, str | None]:
        """Send one request and return ``(response, body_text)``."""
        ...


class RequestsTransport:
    """Run ``requests`` in a worker thread so the event loop never blocks."""

    def __init__(self, session: requests.Session | None = None):
        self._session = session

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        if self._session is not None:
            return self._session.request(method, url, **kwargs)
        # A fresh session per attempt; no pooling across attempts or calls.
        with requests.Session() as session:
            return session.request(method, url, **kwargs)

    async def send(self, request: Mapping[str, Any]) -> tuple[requests.Response, str | None]:
        params = dict(request)
        method = str(params.pop("method", "GET")).upper()
        url = params.pop("url", None)
        if not url:
            raise requests.exceptions.MissingSchema("Request descriptor has no url")

        response = await asyncio.to_thread(self._request, method, url, **params)
        return response, response.text
