"""Hospitable API client."""

from urllib.parse import quote

import httpx

from hospitable_viewer.config import UpstreamSettings


class HospitableClient:
    """Async client for Hospitable property endpoints."""

    def __init__(
        self,
        settings: UpstreamSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._base_url = settings.base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {settings.api_token}",
            "Accept": "application/json",
        }
        self._transport = transport

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        """Make an authenticated request to the Hospitable API."""
        async with httpx.AsyncClient(
            transport=self._transport, follow_redirects=True
        ) as client:
            response = await client.request(
                method,
                f"{self._base_url}{path}",
                headers=self._headers,
                **kwargs,
            )
            response.raise_for_status()
            return response.json() if response.content else {}

    async def list_properties(self, page: str = "1", per_page: str | None = None) -> dict:
        """Fetch one page of properties."""
        params = {"page": page}
        if per_page:
            params["per_page"] = per_page
        params["include"] = self._settings.include

        return await self._request("GET", "/properties", params=params)

    async def get_property(self, property_id: str) -> dict:
        """Fetch a single property with its listings and details."""
        path = f"/properties/{quote(property_id, safe='')}"
        return await self._request("GET", path, params={"include": self._settings.include})
