"""Logging setup and the diagnostic trace sink."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

LOGGER_NAME = "netrequest"

Trace = Callable[[str], None]


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Return the package logger, attaching a stream handler on first use.

    The level comes from ``NETREQUEST_LOG_LEVEL`` (default INFO).
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = os.environ.get("NETREQUEST_LOG_LEVEL", "").strip().upper() or "INFO"
    logger.setLevel(getattr(logging, level, logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
    logger.addHandler(handler)
    return logger


def _noop(message: str) -> None:
    return None


def make_tracer(enabled: bool, sink: Trace | None = None) -> Trace:
    """Build the ``trace(message)`` callable used by the request helper.

    Disabled tracers drop everything. Enabled tracers forward to ``sink`` (or
    the package logger) and never raise.
    """
    if not enabled:
        return _noop

    target = sink or get_logger().info

    def trace(message: str) -> None:
        try:
            target(message)
        except Exception:
            logging.getLogger(LOGGER_NAME).debug("Trace sink failed", exc_info=True)

    return trace
