"""Upstream API proxy with structured error translation."""

from enum import Enum
from typing import Any

import httpx

from hospitable_viewer.config import UpstreamSettings
from hospitable_viewer.hospitable_client import HospitableClient
from hospitable_viewer.logging import get_logger

logger = get_logger("proxy")


class ProxyErrorKind(Enum):
    """Why an upstream call did not succeed. Values are the wire codes."""
    TOKEN_MISSING = "API_TOKEN_MISSING"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    NOT_FOUND_ERROR = "NOT_FOUND_ERROR"
    API_ERROR = "API_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"


class ProxyError(Exception):
    """Error during an upstream proxy call."""

    def __init__(
        self,
        kind: ProxyErrorKind,
        message: str,
        status: int | None = None,
        details: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.status = status
        self.details = details
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def http_status(self) -> int:
        """Status to answer with: the upstream status when there is one."""
        return self.status if self.status is not None else 500

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.status is not None:
            body["status"] = self.status
        if self.details is not None:
            body["details"] = self.details
        return body


STATUS_ERRORS = {
    401: (ProxyErrorKind.AUTHENTICATION_ERROR, "Authentication failed. Please check your API token."),
    403: (ProxyErrorKind.AUTHORIZATION_ERROR, "Access forbidden. Please check your API permissions."),
    429: (ProxyErrorKind.RATE_LIMIT_ERROR, "Rate limit exceeded. Please try again later."),
}

NOT_FOUND = (ProxyErrorKind.NOT_FOUND_ERROR, "Property not found.")

LIST_TOKEN_MISSING = (
    "Hospitable API token not configured. "
    "Please set the HOSPITABLE_API_TOKEN secret."
)
DETAILS_TOKEN_MISSING = "Hospitable API token not configured."
LIST_API_ERROR = "API request failed"
DETAILS_API_ERROR = "Failed to fetch property details"
LIST_NETWORK_ERROR = (
    "Failed to connect to Hospitable API. "
    "Please check your internet connection."
)
DETAILS_NETWORK_ERROR = "Failed to fetch property details."


def status_error(
    status: int,
    generic_message: str,
    not_found: bool = False,
) -> ProxyError:
    """Map a non-2xx upstream status to a ProxyError."""
    if not_found and status == 404:
        kind, message = NOT_FOUND
    else:
        kind, message = STATUS_ERRORS.get(status, (ProxyErrorKind.API_ERROR, generic_message))
    return ProxyError(kind, message, status=status)


def _require_token(settings: UpstreamSettings, message: str) -> None:
    if not settings.api_token:
        raise ProxyError(ProxyErrorKind.TOKEN_MISSING, message)


async def list_properties(
    settings: UpstreamSettings,
    page: str = "1",
    per_page: str | None = None,
    client: HospitableClient | None = None,
) -> dict:
    """Fetch one page of properties, passing the upstream payload through."""
    _require_token(settings, LIST_TOKEN_MISSING)

    if client is None:
        client = HospitableClient(settings)

    try:
        return await client.list_properties(page=page, per_page=per_page)
    except httpx.HTTPStatusError as e:
        error = status_error(e.response.status_code, LIST_API_ERROR)
        logger.warning(f"Property list page {page} failed: {error.code} ({error.status})")
        raise error from e
    except (httpx.RequestError, ValueError) as e:
        logger.warning(f"Property list page {page} failed: {e!r}")
        raise ProxyError(
            ProxyErrorKind.NETWORK_ERROR, LIST_NETWORK_ERROR, details=str(e)
        ) from e


async def get_property_details(
    settings: UpstreamSettings,
    property_id: str,
    client: HospitableClient | None = None,
) -> dict:
    """Fetch one property's details, passing the upstream payload through."""
    _require_token(settings, DETAILS_TOKEN_MISSING)

    if client is None:
        client = HospitableClient(settings)

    try:
        return await client.get_property(property_id)
    except httpx.HTTPStatusError as e:
        error = status_error(e.response.status_code, DETAILS_API_ERROR, not_found=True)
        logger.warning(f"Property {property_id} failed: {error.code} ({error.status})")
        raise error from e
    except (httpx.RequestError, ValueError) as e:
        logger.warning(f"Property {property_id} failed: {e!r}")
        raise ProxyError(
            ProxyErrorKind.NETWORK_ERROR, DETAILS_NETWORK_ERROR, details=str(e)
        ) from e
