"""
Pytest configuration and shared fixtures for property_command tests.
"""

import asyncio
import os

import httpx
import pytest

from property_command.config import CREDENTIAL_FIELDS, get_settings
from property_command.sources.base import SourceFetcher

# Real credentials in the developer's environment must never reach a test run
for _name in CREDENTIAL_FIELDS:
    os.environ.pop(_name.upper(), None)


class FakeFetcher(SourceFetcher):
    """
    Scripted SourceFetcher for aggregation tests.

    Returns ``value`` (or raises ``error``) after an optional delay, and
    counts how many times it was called.
    """

    def __init__(self, category, value=None, error=None, delay=0.0, source_id=None):
        self.category = category
        self.source_id = source_id or f"fake_{category.value}"
        self.value = value
        self.error = error
        self.delay = delay
        self.calls = 0

    async def fetch(self, address):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.value


@pytest.fixture
def fake_fetcher():
    """The FakeFetcher class, for building scripted sources."""
    return FakeFetcher


@pytest.fixture
def mock_client():
    """
    Factory for an httpx.AsyncClient served by a request handler.

    Usage:
        client = mock_client(lambda request: httpx.Response(200, json={...}))
    """

    def make(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return make


@pytest.fixture
def recording_handler():
    """
    Factory for a handler that records requests and replies from a host map.

    Usage:
        handler = recording_handler({"api.walkscore.com": {"status": 1, ...}})
        ... handler.requests  # list of httpx.Request
    """

    def make(responses: dict, status_code: int = 200):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            body = responses.get(request.url.host)
            if body is None:
                return httpx.Response(404, json={"error": "not found"})
            if isinstance(body, httpx.Response):
                return body
            return httpx.Response(status_code, json=body)

        handler.requests = requests
        return handler

    return make


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are lru_cached; isolate each test's environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
