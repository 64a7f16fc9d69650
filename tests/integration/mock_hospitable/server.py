"""Mock Hospitable API server for integration testing."""

import logging
import math
import os
from datetime import datetime, timezone

from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

logging.basicConfig(level=logging.INFO, format="%(asctime)s [MOCK-HOSPITABLE] %(message)s")
logger = logging.getLogger(__name__)

API_TOKEN = "mock-api-token"

# Mock data
MOCK_PROPERTIES = [
    {
        "id": f"prop-{n}",
        "name": name,
        "public_name": public_name,
        "listed": n % 2 == 1,
        "property_type": "house",
        "capacity": {"max": 4, "bedrooms": 2, "bathrooms": 1},
        "address": {"display": address},
    }
    for n, (name, public_name, address) in enumerate([
        ("Beach House", "Sunny Retreat", "1 Ocean Dr, Miami"),
        ("Cabin", "Mountain Hideaway", "Aspen, CO"),
        ("Loft", "Downtown Loft", "5th Ave, New York"),
        ("Cottage", "Lakeside Cottage", "Lake Tahoe, CA"),
        ("Villa", "Hilltop Villa", "Napa, CA"),
    ], start=1)
]

MOCK_DETAILS = {
    p["id"]: {"details": {"wifi_name": f"{p['id']}-wifi"}, "listings": [{"platform": "airbnb"}]}
    for p in MOCK_PROPERTIES
}

# Property ids that make the mock answer with an error status
ERROR_IDS = {
    "rate-limited": 429,
    "forbidden": 403,
    "broken": 500,
}

# Track requests for test assertions
request_log: list[dict] = []


def log_request(method: str, path: str, params: dict, headers: dict):
    """Log a request for later inspection."""
    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "method": method,
        "path": path,
        "params": params,
        "authorization": headers.get("authorization"),
        "accept": headers.get("accept"),
    }
    request_log.append(entry)
    logger.info(f"{method} {path} params={params}")


def unauthorized(request) -> JSONResponse | None:
    if request.headers.get("authorization") != f"Bearer {API_TOKEN}":
        return JSONResponse({"message": "Unauthenticated."}, status_code=401)
    return None


async def health(request):
    """Health check endpoint."""
    return JSONResponse({"status": "ok"})


async def get_request_log(request):
    """Return the request log for test assertions."""
    return JSONResponse(request_log)


async def clear_request_log(request):
    """Clear the request log."""
    request_log.clear()
    return JSONResponse({"status": "cleared"})


async def list_properties(request):
    """GET /v2/properties"""
    params = dict(request.query_params)
    log_request("GET", "/v2/properties", params, dict(request.headers))

    denied = unauthorized(request)
    if denied is not None:
        return denied

    page = int(params.get("page", "1"))
    per_page = int(params.get("per_page", "10"))
    last_page = max(1, math.ceil(len(MOCK_PROPERTIES) / per_page))
    start = (page - 1) * per_page

    return JSONResponse({
        "data": MOCK_PROPERTIES[start:start + per_page],
        "meta": {
            "current_page": page,
            "last_page": last_page,
            "per_page": per_page,
            "total": len(MOCK_PROPERTIES),
        },
    })


async def get_property(request):
    """GET /v2/properties/{property_id}"""
    property_id = request.path_params["property_id"]
    log_request("GET", f"/v2/properties/{property_id}", dict(request.query_params), dict(request.headers))

    denied = unauthorized(request)
    if denied is not None:
        return denied

    if property_id in ERROR_IDS:
        return JSONResponse({"message": "error"}, status_code=ERROR_IDS[property_id])

    prop = next((p for p in MOCK_PROPERTIES if p["id"] == property_id), None)
    if prop is None:
        return JSONResponse({"message": "Not found"}, status_code=404)

    return JSONResponse({"data": {**prop, **MOCK_DETAILS[property_id]}})


app = Starlette(
    routes=[
        # Test control endpoints
        Route("/health", endpoint=health),
        Route("/_test/requests", endpoint=get_request_log),
        Route("/_test/requests/clear", endpoint=clear_request_log, methods=["POST"]),

        # Hospitable API endpoints
        Route("/v2/properties", endpoint=list_properties),
        Route("/v2/properties/{property_id}", endpoint=get_property),
    ]
)


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", "8585"))
    logger.info(f"Starting mock Hospitable server on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
