"""Shared fixtures for MCP Bitbucket tests."""

import json
import os
from collections.abc import Callable
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from mcp_bitbucket.bitbucket import BitbucketConfig, BitbucketFetcher

BITBUCKET_ENV_VARS = (
    "BITBUCKET_EMAIL",
    "BITBUCKET_API_TOKEN",
    "BITBUCKET_WORKSPACE",
    "BITBUCKET_API_BASE_URL",
    "BITBUCKET_SSL_VERIFY",
    "BITBUCKET_CUSTOM_HEADERS",
    "BITBUCKET_BOT_PATTERNS",
    "BITBUCKET_TIMEOUT",
    "READ_ONLY_MODE",
    "ENABLED_TOOLS",
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clean_env():
    """Remove every Bitbucket related variable from the environment."""
    cleared = {k: v for k, v in os.environ.items() if k not in BITBUCKET_ENV_VARS}
    with patch.dict(os.environ, cleared, clear=True):
        yield


@pytest.fixture
def mock_env_vars(clean_env):
    """Environment with valid credentials and a default workspace."""
    with patch.dict(
        os.environ,
        {
            "BITBUCKET_EMAIL": "dev@example.com",
            "BITBUCKET_API_TOKEN": "ATBBtoken1234567890",
            "BITBUCKET_WORKSPACE": "acme",
        },
    ):
        yield


@pytest.fixture
def bitbucket_config():
    """Create a BitbucketConfig instance for tests."""
    return BitbucketConfig(
        email="dev@example.com",
        api_token="ATBBtoken1234567890",
        workspace="acme",
    )


@pytest.fixture
def config_without_workspace():
    return BitbucketConfig(email="dev@example.com", api_token="ATBBtoken1234567890")


class FakeBitbucket:
    """In-memory stand-in for the Bitbucket API behind an httpx.MockTransport.

    Routes map "METHOD /path" (path relative to /2.0) to either a payload, an
    `httpx.Response`, or a callable taking the request.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, response: Any) -> None:
        self.routes[f"{method} {path}"] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/2.0")
        route = self.routes.get(f"{request.method} {path}")
        if route is None:
            return httpx.Response(
                404, json={"type": "error", "error": {"message": f"No route {path}"}}
            )
        if callable(route):
            route = route(request)
        if isinstance(route, httpx.Response):
            return route
        if isinstance(route, str):
            return httpx.Response(200, text=route)
        return httpx.Response(200, content=json.dumps(route).encode())

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_bitbucket():
    return FakeBitbucket()


@pytest.fixture
def make_fetcher(bitbucket_config) -> Callable[..., BitbucketFetcher]:
    """Build a BitbucketFetcher whose HTTP traffic goes to a mock transport."""

    def _make(
        transport: httpx.AsyncBaseTransport, config: BitbucketConfig | None = None
    ) -> BitbucketFetcher:
        return BitbucketFetcher(config=config or bitbucket_config, transport=transport)

    return _make


@pytest.fixture
async def fetcher(fake_bitbucket, make_fetcher):
    client = make_fetcher(fake_bitbucket.transport)
    yield client
    await client.aclose()
