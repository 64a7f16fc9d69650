"""Collect every property for export to external analysis tools."""

import asyncio

from hospitable_viewer import proxy
from hospitable_viewer.config import UpstreamSettings
from hospitable_viewer.hospitable_client import HospitableClient
from hospitable_viewer.logging import get_logger

logger = get_logger("export")

DEFAULT_PER_PAGE = 100
DETAILS_BATCH_SIZE = 5


async def collect_properties(
    settings: UpstreamSettings,
    per_page: int = DEFAULT_PER_PAGE,
    client: HospitableClient | None = None,
) -> list[dict]:
    """Walk every page of the property list and return the records.

    Raises:
        ProxyError: If any page cannot be fetched.
    """
    properties: list[dict] = []
    page = 1

    while True:
        payload = await proxy.list_properties(
            settings, page=str(page), per_page=str(per_page), client=client
        )
        properties.extend(payload.get("data") or [])

        meta = payload.get("meta") or {}
        logger.debug(f"Loaded page {page}: {len(properties)}/{meta.get('total', '?')} properties")
        if meta.get("current_page", page) >= meta.get("last_page", page):
            break
        page += 1

    return properties


async def attach_details(
    settings: UpstreamSettings,
    properties: list[dict],
    batch_size: int = DETAILS_BATCH_SIZE,
    client: HospitableClient | None = None,
) -> list[dict]:
    """Merge each property's detail record over its list record.

    Properties without an id, or whose details cannot be fetched, are
    returned unchanged.
    """
    async def load(prop: dict) -> dict:
        if prop.get("id") is None:
            return prop
        try:
            payload = await proxy.get_property_details(settings, str(prop["id"]), client=client)
        except proxy.ProxyError as e:
            if e.kind is proxy.ProxyErrorKind.TOKEN_MISSING:
                raise
            logger.warning(f"Details for property {prop['id']} not loaded: {e.code}")
            return prop
        return {**prop, **(payload.get("data") or {}), "_detailsLoaded": True}

    merged: list[dict] = []
    for start in range(0, len(properties), batch_size):
        batch = properties[start:start + batch_size]
        merged.extend(await asyncio.gather(*(load(p) for p in batch)))
    return merged


def _contains(value, query: str) -> bool:
    return isinstance(value, str) and query in value.lower()


def filter_properties(properties: list[dict], query: str | None) -> list[dict]:
    """Case-insensitive match on name, public name or address."""
    query = (query or "").strip().lower()
    if not query:
        return list(properties)

    return [
        p for p in properties
        if _contains(p.get("name"), query)
        or _contains(p.get("public_name"), query)
        or _contains((p.get("address") or {}).get("display"), query)
    ]
