"""Builders for an in-process viewer wired to the mock Hospitable API."""

import httpx

from hospitable_viewer.config import AuthSettings, Config, UpstreamSettings
from hospitable_viewer.hospitable_client import HospitableClient
from hospitable_viewer.main import create_app
from mock_hospitable.server import API_TOKEN, app as mock_app


VIEWER_URL = "https://viewer.test"
MOCK_HOSPITABLE_URL = "http://mock-hospitable/v2"
USERNAME = "operator"
PASSWORD = "correct horse battery staple"


def build_config(api_token: str | None = API_TOKEN) -> Config:
    return Config(
        auth=AuthSettings(username=USERNAME, password=PASSWORD),
        upstream=UpstreamSettings(api_token=api_token, base_url=MOCK_HOSPITABLE_URL),
    )


def mock_upstream(config: Config) -> HospitableClient:
    """Hospitable client whose requests go to the mock app."""
    return HospitableClient(config.upstream, transport=httpx.ASGITransport(app=mock_app))


def build_viewer(config: Config) -> httpx.AsyncClient:
    app = create_app(config, client=mock_upstream(config))
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=VIEWER_URL)


async def login(viewer: httpx.AsyncClient) -> str:
    """Log in with the configured credentials and return the session token."""
    response = await viewer.post("/login", data={"username": USERNAME, "password": PASSWORD})
    assert response.status_code == 302
    return response.cookies["session_token"]
