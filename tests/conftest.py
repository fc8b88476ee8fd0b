"""Shared test fixtures."""

import time

import pytest

from netrequest.config import RequestConfig
from netrequest.helpers.offline import release_shared_offline_network


@pytest.fixture(autouse=True)
def default_project_env(monkeypatch):
    """Keep NETREQUEST_* settings from the outer environment out of tests."""
    for key in (
        "NETREQUEST_DEBUG",
        "NETREQUEST_OFFLINE_TESTS",
        "NETREQUEST_RETRIES",
        "NETREQUEST_RETRY_DELAY_MS",
        "NETREQUEST_LOG_LEVEL",
        "NETREQUEST_OFFLINE_SETUP",
    ):
        monkeypatch.delenv(key, raising=False)
    yield
    release_shared_offline_network()


class FakeResponse:
    """Stand-in for the transport's response object."""

    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class FakeTransport:
    """Replays a script of outcomes: exceptions are raised, tuples returned.

    The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []
        self.started_at = []
        self.failed_at = []

    async def send(self, request):
        self.requests.append(request)
        self.started_at.append(time.monotonic())
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            self.failed_at.append(time.monotonic())
            raise outcome
        return outcome

    @property
    def calls(self):
        return len(self.requests)


@pytest.fixture
def fake_transport():
    """The FakeTransport class; call it with a script of outcomes."""
    return FakeTransport


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def ok_response():
    return FakeResponse(200, '{"data": [1, 2, 3]}')


@pytest.fixture
def make_config():
    """Build a config around a fake transport with no retry delay."""

    def _make(transport, **kwargs):
        kwargs.setdefault("default_retry_delay_ms", 0)
        return RequestConfig(transport=transport, **kwargs)

    return _make


@pytest.fixture
def sample_payload():
    """Sample JSON API payload."""
    return {
        "data": [
            {"Year": 2019, "Nation": "United States", "Population": 324697795},
            {"Year": 2020, "Nation": "United States", "Population": 326569308},
        ]
    }
