"""Request handlers and the route table."""

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from hospitable_viewer import assets, proxy
from hospitable_viewer.auth import AuthError, Authenticator
from hospitable_viewer.config import Config, ConfigError
from hospitable_viewer.hospitable_client import HospitableClient
from hospitable_viewer.logging import get_logger, truncate_token
from hospitable_viewer.router import LOGIN_PATH, Route, Router, exact, redirect, segment_prefix
from hospitable_viewer.session import SESSION_COOKIE, SESSION_MAX_AGE

logger = get_logger("handlers")

PROPERTY_PREFIX = "/api/property/"


def asset_response(name: str) -> Response:
    content, media_type = assets.resolve(name)
    return Response(content, media_type=media_type)


def serve_asset(name: str):
    async def handler(request: Request) -> Response:
        return asset_response(name)
    return handler


def login_handler(auth: Authenticator):
    async def login(request: Request) -> Response:
        try:
            form = await request.form()
            token = auth.login(form.get("username"), form.get("password"))
        except ConfigError:
            logger.error("Login attempted but operator credentials are not configured")
            return redirect(f"{LOGIN_PATH}?error=config")
        except AuthError:
            logger.info("Login rejected: invalid credentials")
            return redirect(f"{LOGIN_PATH}?error=invalid")
        except Exception:
            logger.exception("Login failed while reading the form")
            return redirect(f"{LOGIN_PATH}?error=error")

        logger.info(f"Login accepted, session {truncate_token(token)}")
        response = redirect("/")
        response.set_cookie(
            SESSION_COOKIE,
            token,
            max_age=SESSION_MAX_AGE,
            path="/",
            secure=True,
            httponly=True,
            samesite="strict",
        )
        return response
    return login


def proxy_error_response(error: proxy.ProxyError) -> JSONResponse:
    return JSONResponse(error.to_dict(), status_code=error.http_status)


def properties_handler(config: Config, client: HospitableClient | None = None):
    async def properties(request: Request) -> Response:
        page = request.query_params.get("page") or "1"
        per_page = request.query_params.get("per_page")
        try:
            data = await proxy.list_properties(
                config.upstream, page=page, per_page=per_page, client=client
            )
        except proxy.ProxyError as e:
            return proxy_error_response(e)
        return JSONResponse(data)
    return properties


def property_details_handler(config: Config, client: HospitableClient | None = None):
    async def property_details(request: Request) -> Response:
        property_id = request.scope["path"].rsplit("/", 1)[-1]
        try:
            data = await proxy.get_property_details(
                config.upstream, property_id, client=client
            )
        except proxy.ProxyError as e:
            return proxy_error_response(e)
        return JSONResponse(data)
    return property_details


def build_router(
    config: Config,
    client: HospitableClient | None = None,
    auth: Authenticator | None = None,
) -> Router:
    """Wire the route table. Order matters: the first match wins."""
    if auth is None:
        auth = Authenticator(config)

    routes = [
        Route("POST", exact(LOGIN_PATH), login_handler(auth), public=True),
        Route("GET", exact(LOGIN_PATH), serve_asset("login.html"), public=True),
        Route("GET", exact("/styles.css"), serve_asset("styles.css"), public=True),
        Route("GET", exact("/"), serve_asset("index.html")),
        Route("GET", exact("/index.html"), serve_asset("index.html")),
        Route("GET", exact("/app.js"), serve_asset("app.js")),
        Route("GET", exact("/api/properties"), properties_handler(config, client)),
        Route("GET", segment_prefix(PROPERTY_PREFIX), property_details_handler(config, client)),
    ]
    return Router(routes, auth)
