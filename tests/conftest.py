import json
import os
from typing import Callable, List

import httpx
import pytest
from typer.testing import CliRunner

from reviewclient.infrastructure.config import settings
from reviewclient.infrastructure.cli.display import ConsoleDisplay
from reviewclient.infrastructure.endpoint.resolver import EndpointConfig
from reviewclient.domain.models.common import BaseUrl, HostName

LOCAL_BASE_URL = "http://localhost:3000"


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays without waiting."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class RecordingHandler:
    """MockTransport handler that replays scripted responses and records requests.

    Each script entry is an httpx.Response, an exception instance to raise,
    or a callable taking the request.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(step, Exception):
            raise step
        if callable(step):
            return step(request)
        return step

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    def json_bodies(self) -> list:
        return [json.loads(request.content) for request in self.requests if request.content]


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def local_endpoint() -> EndpointConfig:
    return EndpointConfig(host=HostName("localhost"), base_url=BaseUrl(LOCAL_BASE_URL))


@pytest.fixture
def make_http_client() -> Callable[[RecordingHandler], httpx.AsyncClient]:
    """Builds an AsyncClient routed through httpx.MockTransport."""
    def _make(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return _make


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay to capture output easily."""
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('reviewclient.main.ConsoleDisplay', return_value=mock)
    return mock


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keeps tests away from the user's config file, .env and REVIEWCLIENT_ variables."""
    for key in list(os.environ):
        if key.startswith(settings.ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.setattr(settings, "_loaded", True)
    monkeypatch.setattr(settings, "_config", {})
    settings.clear_test_config()
    yield
    settings.clear_test_config()


@pytest.fixture
def make_handler() -> Callable[..., RecordingHandler]:
    """Factory for RecordingHandler instances (scripted MockTransport handlers)."""
    return RecordingHandler
