"""Offline test mode: simulated responses with real network access blocked.

Backed by ``requests_mock``. Any request made through ``requests`` that was not
registered on the mocker fails with ``NoMockAddress``.

Env-driven configs share one network, built on first use. Its setup hook is
named by ``NETREQUEST_OFFLINE_SETUP`` as ``package.module:function``.
"""

from __future__ import annotations

import importlib
import os
from collections.abc import Callable

import requests_mock

OfflineSetup = Callable[[requests_mock.Mocker], None]

_shared_network: "OfflineNetwork | None" = None


class OfflineNetwork:
    """Offline-mode collaborator for ``RetryingRequest``."""

    def __init__(self, setup: OfflineSetup | None = None):
        self._setup = setup
        self.mocker = requests_mock.Mocker(real_http=False)
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def enable_offline_mode(self) -> None:
        """Run the setup hook so it can register simulated responses."""
        if self._setup is not None:
            self._setup(self.mocker)

    def block_real_network(self) -> None:
        """Start intercepting ``requests``; safe to call repeatedly."""
        if self._active:
            return
        self.mocker.start()
        self._active = True

    def restore(self) -> None:
        if not self._active:
            return
        self.mocker.stop()
        self._active = False

    def __enter__(self) -> "OfflineNetwork":
        self.block_real_network()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()


def load_setup(target: str) -> OfflineSetup:
    """Resolve ``package.module:function`` to the setup hook it names."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name.strip() or not attr.strip():
        raise RuntimeError(
            f"NETREQUEST_OFFLINE_SETUP must look like 'package.module:function', got {target!r}"
        )
    module = importlib.import_module(module_name.strip())
    try:
        setup = getattr(module, attr.strip())
    except AttributeError:
        raise RuntimeError(f"NETREQUEST_OFFLINE_SETUP: {module_name} has no attribute {attr!r}") from None
    if not callable(setup):
        raise RuntimeError(f"NETREQUEST_OFFLINE_SETUP: {target} is not callable")
    return setup


def shared_offline_network() -> OfflineNetwork:
    """Return the process-wide offline network, creating it on first use."""
    global _shared_network
    if _shared_network is None:
        target = os.environ.get("NETREQUEST_OFFLINE_SETUP", "").strip()
        _shared_network = OfflineNetwork(load_setup(target) if target else None)
    return _shared_network


def release_shared_offline_network() -> None:
    """Stop the shared network, if any, and forget it."""
    global _shared_network
    if _shared_network is not None:
        _shared_network.restore()
        _shared_network = None
