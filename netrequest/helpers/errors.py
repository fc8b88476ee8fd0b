"""Errors surfaced by the retrying request helper."""

from __future__ import annotations

from typing import Any


class RequestError(Exception):
    """Base class for everything ``make_request`` raises on its own."""


class ArgumentError(RequestError, TypeError):
    """The entry point was called incorrectly (wrong arity or bad control values)."""


class TransportExhausted(RequestError):
    """Every transmission attempt failed; carries the most recent transport error."""

    def __init__(self, last_error: BaseException, *, attempts: int, target: str | None = None):
        self.last_error = last_error
        self.attempts = attempts
        self.target = target
        super().__init__(
            f"Request to {target} failed after {attempts} attempt(s): {last_error!r}"
        )


class ParseFailure(RequestError, ValueError):
    """The body of a successful transmission could not be parsed as JSON."""

    def __init__(self, body: Any, error: BaseException):
        self.body = body
        self.error = error
        super().__init__(f"Unable to parse {body!r} into a JSON object: {error}")
