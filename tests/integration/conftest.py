"""Fixtures for integration tests.

The viewer runs in-process and talks to the mock Hospitable API through
httpx's ASGI transport, so no network or running services are needed.
"""

import pytest

from mock_hospitable.server import request_log
from support import build_config, build_viewer, login


@pytest.fixture(autouse=True)
def clear_mock_hospitable_log():
    """Clear the mock Hospitable request log before each test."""
    request_log.clear()
    yield


@pytest.fixture
def upstream_requests():
    return request_log


@pytest.fixture
async def viewer():
    """Viewer client that has not logged in."""
    async with build_viewer(build_config()) as client:
        yield client


@pytest.fixture
async def logged_in():
    """Viewer client holding a session cookie from a real login."""
    async with build_viewer(build_config()) as client:
        token = await login(client)
        client.headers["Cookie"] = f"session_token={token}"
        yield client
