"""
Shared test configuration and fixtures for the higa client.

Provides a recording in-process API server built on aiohttp, so transport
and manager tests exercise real HTTP requests without leaving the machine.
"""

import json
import pytest
import pytest_asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple
from unittest.mock import AsyncMock, MagicMock

from aiohttp import web
from aiohttp.test_utils import TestServer

from higa.cache import CacheManager
from higa.client import Client
from higa.config import Config, HTTPConfig, RetryConfig
from higa.http import HTTPClient
from higa.managers.channel import ChannelManager


# Test data constants
TEST_TOKEN = "test-token-12345"
TEST_CHANNEL_ID = "41771983423143937"
TEST_MESSAGE_ID = "162701077035089920"
TEST_USER_ID = "80351110224678912"
API_PREFIX = "/api/v9"

TEST_CHANNEL = {
    "id": TEST_CHANNEL_ID,
    "type": 0,
    "name": "general",
    "topic": "24/7 chat about how to gank Mike #2",
}

TEST_MESSAGE = {
    "id": TEST_MESSAGE_ID,
    "channel_id": TEST_CHANNEL_ID,
    "content": "Supa Hot",
}


@dataclass
class RecordedRequest:
    """A request received by the fake API."""
    method: str
    path: str
    query: Dict[str, str]
    headers: Any
    body: Any


class FakeAPI:
    """
    Minimal stand-in for the REST API.

    Records every request and answers from canned responses keyed by
    ``(method, path)``. A list of responses is consumed one per request.
    Unknown routes answer ``200 {}``.
    """

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self.responses: Dict[Tuple[str, str], Any] = {}
        self.app = web.Application()
        self.app.router.add_route('*', '/{tail:.*}', self._handle)

    def respond(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        """Register the response for a route (path without the API prefix)."""
        self.responses[(method, API_PREFIX + path)] = (status, body)

    def respond_sequence(self, method: str, path: str, responses: List[Tuple[int, Any]]) -> None:
        """Register successive responses for a route."""
        self.responses[(method, API_PREFIX + path)] = list(responses)

    def requests_to(self, method: str, path: str) -> List[RecordedRequest]:
        return [
            request for request in self.requests
            if request.method == method and request.path == API_PREFIX + path
        ]

    async def _handle(self, request: web.Request) -> web.Response:
        raw = await request.text()
        self.requests.append(RecordedRequest(
            method=request.method,
            path=request.path,
            query=dict(request.query),
            headers=request.headers.copy(),
            body=json.loads(raw) if raw else None
        ))

        response = self.responses.get((request.method, request.path), (200, {}))
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        status, body = response

        if body is None:
            return web.Response(status=status)
        if isinstance(body, str):
            return web.Response(status=status, text=body, content_type='application/json')
        return web.json_response(body, status=status)


@pytest.fixture
def http_config():
    """Create a test HTTP configuration."""
    return HTTPConfig(token=TEST_TOKEN)


@pytest.fixture
def test_config(http_config):
    """Create a test configuration."""
    return Config(http=http_config, retry=RetryConfig(), log_level="DEBUG")


@pytest_asyncio.fixture
async def fake_api():
    """Start the fake API server for the duration of a test."""
    api = FakeAPI()
    server = TestServer(api.app)
    await server.start_server()
    api.base_url = str(server.make_url(API_PREFIX))
    yield api
    await server.close()


@pytest_asyncio.fixture
async def client(test_config, fake_api):
    """Create a client pointed at the fake API."""
    client = Client(test_config, base_url=fake_api.base_url)
    yield client
    await client.close()


@pytest.fixture
def mock_http():
    """Create a mock transport."""
    http = MagicMock(spec=HTTPClient)
    http.request = AsyncMock(return_value=None)
    return http


@pytest.fixture
def cache():
    """Create an empty cache."""
    return CacheManager()


@pytest.fixture
def mock_channel_manager(mock_http, cache):
    """Create a channel manager backed by the mock transport."""
    return ChannelManager(mock_http, cache)
