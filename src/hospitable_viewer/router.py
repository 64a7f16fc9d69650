"""Ordered request routing with an authentication gate."""

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response

from hospitable_viewer.auth import AuthError, Authenticator
from hospitable_viewer.logging import get_logger

logger = get_logger("router")

Handler = Callable[[Request], Awaitable[Response]]
Matcher = Callable[[str], bool]

LOGIN_PATH = "/login"


class RouteDecision(Enum):
    """How a (method, path) pair is treated."""
    PUBLIC = "public"
    REQUIRES_AUTH = "requires_auth"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Route:
    """A method and path matcher mapped to a handler."""
    method: str
    matcher: Matcher
    handler: Handler
    public: bool = False


def exact(path: str) -> Matcher:
    """Match one path exactly."""
    return lambda candidate: candidate == path


def segment_prefix(prefix: str) -> Matcher:
    """Match paths under prefix whose final segment is not empty."""
    def matcher(candidate: str) -> bool:
        return candidate.startswith(prefix) and not candidate.endswith("/")
    return matcher


def redirect(location: str) -> RedirectResponse:
    return RedirectResponse(location, status_code=302)


class Router:
    """Evaluates routes top to bottom; the first match wins."""

    def __init__(self, routes: list[Route], auth: Authenticator):
        self._routes = list(routes)
        self._auth = auth

    def resolve(self, method: str, path: str) -> tuple[RouteDecision, Route | None]:
        for route in self._routes:
            if route.method == method and route.matcher(path):
                decision = RouteDecision.PUBLIC if route.public else RouteDecision.REQUIRES_AUTH
                return decision, route
        return RouteDecision.NOT_FOUND, None

    async def dispatch(self, request: Request) -> Response:
        """Route a request, applying the gate to private routes."""
        decision, route = self.resolve(request.method, request.scope["path"])

        if decision is RouteDecision.NOT_FOUND:
            return PlainTextResponse("Not Found", status_code=404)

        if decision is RouteDecision.REQUIRES_AUTH:
            try:
                self._auth.authenticate(request.headers.get("cookie"))
            except AuthError:
                return redirect(LOGIN_PATH)

        try:
            return await route.handler(request)
        except Exception:
            logger.exception(f"Unhandled error for {request.method} {request.scope['path']}")
            return JSONResponse(
                {"error": "INTERNAL_ERROR", "message": "Internal server error"},
                status_code=500,
            )
