"""Retrying HTTP request helper.

One call describes one logical request. Transport failures are retried up to
``retries`` times with a fixed ``retry_delay_ms`` pause between attempts, and a
successful transmission is returned in one of three shapes:

- the full response object (``return_full_response=True``)
- the body parsed as JSON (``force_json=True``)
- the body text (default)

Everything else in the descriptor is handed to the transport untouched.
"""

from __future__ import annotations

import asyncio
import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from netrequest.config import DEFAULT_RETRIES, DEFAULT_RETRY_DELAY_MS, RequestConfig
from netrequest.helpers.errors import ArgumentError, ParseFailure, TransportExhausted

CONTROL_KEYS: frozenset[str] = frozenset(
    {"retries", "retry_delay_ms", "return_full_response", "force_json"}
)


@dataclass(frozen=True)
class RequestOptions:
    """Control values pulled out of a request descriptor."""

    target: str | None
    retries: int = DEFAULT_RETRIES
    retry_delay_ms: float = DEFAULT_RETRY_DELAY_MS
    return_full_response: bool = False
    force_json: bool = False

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000.0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _retries(value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ArgumentError(f"retries must be a non-negative integer, got {value!r}")
    return value


def _delay_ms(value: Any) -> float:
    if not _is_number(value) or not math.isfinite(value) or value < 0:
        raise ArgumentError(f"retry_delay_ms must be a finite non-negative number, got {value!r}")
    return value


def _flag(name: str, value: Any) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ArgumentError(f"{name} must be a bool, got {value!r}")
    return value


def split_descriptor(
    descriptor: Mapping[str, Any],
    *,
    default_retries: int = DEFAULT_RETRIES,
    default_retry_delay_ms: float = DEFAULT_RETRY_DELAY_MS,
) -> tuple[RequestOptions, dict[str, Any]]:
    """Separate control options from the transport request.

    Returns ``(options, request)`` where ``request`` is a new dict without any
    of ``CONTROL_KEYS``. The caller's mapping is left as it was.
    """
    if not isinstance(descriptor, Mapping):
        raise ArgumentError(
            f"HTTP requires a mapping describing the request, got {type(descriptor).__name__}"
        )

    retries = descriptor.get("retries")
    delay_ms = descriptor.get("retry_delay_ms")
    options = RequestOptions(
        target=descriptor.get("url"),
        retries=_retries(default_retries if retries is None else retries),
        retry_delay_ms=_delay_ms(default_retry_delay_ms if delay_ms is None else delay_ms),
        return_full_response=_flag("return_full_response", descriptor.get("return_full_response")),
        force_json=_flag("force_json", descriptor.get("force_json")),
    )
    request = {key: value for key, value in descriptor.items() if key not in CONTROL_KEYS}
    return options, request


def shape_result(options: RequestOptions, response: Any, body: Any) -> Any:
    """Turn a successful transmission into the value the caller asked for."""
    if options.return_full_response:
        return response
    if options.force_json:
        try:
            return json.loads(body)
        except (TypeError, ValueError) as exc:
            raise ParseFailure(body, exc) from exc
    return body


def _single_argument(args: tuple[Any, ...]) -> Any:
    if len(args) != 1:
        raise ArgumentError(
            f"HTTP requires 1 argument, the request descriptor; got {len(args)}"
        )
    return args[0]


class RetryingRequest:
    """Issue requests through ``config.transport`` with bounded, fixed-delay retries."""

    def __init__(self, config: RequestConfig | None = None):
        self.config = config or RequestConfig()
        self._trace = self.config.tracer()

    def __call__(self, *args: Any) -> asyncio.Task:
        """Start one invocation and return its pending task.

        Argument problems raise ``ArgumentError`` right here, before anything
        is scheduled. The first transmission happens on a later loop turn.
        """
        descriptor = _single_argument(args)
        options, request = split_descriptor(
            descriptor,
            default_retries=self.config.default_retries,
            default_retry_delay_ms=self.config.default_retry_delay_ms,
        )
        loop = asyncio.get_running_loop()
        return loop.create_task(self._run(options, request))

    async def _run(self, options: RequestOptions, request: dict[str, Any]) -> Any:
        trace = self._trace
        target = options.target

        if self.config.offline:
            self.config.offline_network.enable_offline_mode()
            self.config.offline_network.block_real_network()

        trace(f"Making request to {target}")

        attempt = 0
        while True:
            try:
                response, body = await self.config.transport.send(dict(request))
            except Exception as exc:
                if attempt < options.retries:
                    attempt += 1
                    trace(
                        f"Network request failed attempt {attempt}/{options.retries} "
                        f"for URL {target}: {exc!r}"
                    )
                    await asyncio.sleep(options.retry_delay_seconds)
                    continue
                trace(f"Network request for URL {target} gave up after {attempt + 1} attempt(s): {exc!r}")
                raise TransportExhausted(exc, attempts=attempt + 1, target=target) from exc
            break

        try:
            result = shape_result(options, response, body)
        except ParseFailure as exc:
            trace(f"Unable to parse JSON from response at {target}: {exc.error}")
            raise

        if options.return_full_response:
            trace(f"Successfully fetched response for URL {target}")
        elif options.force_json:
            trace(f"Successfully fetched and parsed JSON from response at {target}")
        else:
            trace(f"Successfully fetched body for URL {target}")
        return result


def make_request(*args: Any, config: RequestConfig | None = None) -> asyncio.Task:
    """Make a network request with retries.

    Takes exactly one descriptor mapping. Without an explicit ``config`` the
    ``NETREQUEST_*`` environment variables are read at call time.
    """
    descriptor = _single_argument(args)
    client = RetryingRequest(config if config is not None else RequestConfig.from_env())
    return client(descriptor)


async def fetch_text(url: str, *, config: RequestConfig | None = None, **kwargs: Any) -> str | None:
    """Fetch a URL and return the body text."""
    descriptor = {**kwargs, "url": url, "return_full_response": False, "force_json": False}
    return await make_request(descriptor, config=config)


async def fetch_json(url: str, *, config: RequestConfig | None = None, **kwargs: Any) -> Any:
    """Fetch a URL and parse the body as JSON, whatever its content type."""
    descriptor = {**kwargs, "url": url, "return_full_response": False, "force_json": True}
    return await make_request(descriptor, config=config)


async def fetch_response(url: str, *, config: RequestConfig | None = None, **kwargs: Any) -> Any:
    """Fetch a URL and return the transport's full response object."""
    descriptor = {**kwargs, "url": url, "return_full_response": True}
    return await make_request(descriptor, config=config)
