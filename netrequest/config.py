"""Runtime configuration for the retrying request helper."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from netrequest.helpers.debug import Trace, make_tracer
from netrequest.helpers.offline import (
    OfflineNetwork,
    release_shared_offline_network,
    shared_offline_network,
)
from netrequest.helpers.transport import RequestsTransport, Transport

DEFAULT_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 2000

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise RuntimeError(f"Environment variable {name} must be non-negative, got {value}")
    return value


def get_debug() -> bool:
    """Whether diagnostic tracing is on (``NETREQUEST_DEBUG``)."""
    return _env_flag("NETREQUEST_DEBUG")


def get_offline() -> bool:
    """Whether offline test mode is on (``NETREQUEST_OFFLINE_TESTS``)."""
    return _env_flag("NETREQUEST_OFFLINE_TESTS")


def get_default_retries() -> int:
    return _env_int("NETREQUEST_RETRIES", DEFAULT_RETRIES)


def get_default_retry_delay_ms() -> int:
    return _env_int("NETREQUEST_RETRY_DELAY_MS", DEFAULT_RETRY_DELAY_MS)


@dataclass(frozen=True)
class RequestConfig:
    """Everything a ``RetryingRequest`` needs besides the descriptor itself."""

    debug: bool = False
    offline: bool = False
    trace: Trace | None = None
    transport: Transport = field(default_factory=RequestsTransport)
    offline_network: OfflineNetwork = field(default_factory=OfflineNetwork)
    default_retries: int = DEFAULT_RETRIES
    default_retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS

    @classmethod
    def from_env(cls, **overrides) -> "RequestConfig":
        """Build a config from ``NETREQUEST_*`` variables; keyword overrides win.

        With offline mode on, every env-built config shares one offline
        network. With it off, that shared network is released so real
        requests go through again.
        """
        values = {
            "debug": get_debug(),
            "offline": get_offline(),
            "default_retries": get_default_retries(),
            "default_retry_delay_ms": get_default_retry_delay_ms(),
        }
        values.update(overrides)
        if values["offline"]:
            values.setdefault("offline_network", shared_offline_network())
        else:
            release_shared_offline_network()
        return cls(**values)

    def tracer(self) -> Trace:
        return make_tracer(self.debug, self.trace)
