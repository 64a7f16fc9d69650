"""Main entry point: ASGI application and command line."""

import argparse
import asyncio
import json
import os
import sys
import time
from typing import Any

import uvicorn
from starlette.requests import Request

from hospitable_viewer.config import Config, load_config, load_config_from_env
from hospitable_viewer.export import attach_details, collect_properties, filter_properties
from hospitable_viewer.handlers import build_router
from hospitable_viewer.hospitable_client import HospitableClient
from hospitable_viewer.logging import format_request_log, get_logger, setup_logging, truncate_token
from hospitable_viewer.proxy import ProxyError


Scope = dict[str, Any]
Receive = Any
Send = Any

DEFAULT_PORT = 8787

logger = get_logger("main")


def read_config() -> Config:
    """Load config from CONFIG_PATH if set, else from the environment."""
    config_path = os.environ.get("CONFIG_PATH")
    if not config_path:
        return load_config_from_env()

    if not os.path.exists(config_path):
        print(f"Error: Config file not found at {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        return load_config(config_path)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


def create_app(config: Config | None = None, client: HospitableClient | None = None):
    """Create the ASGI application."""
    if config is None:
        config = read_config()

    missing = config.missing_secrets()
    if missing:
        logger.warning(f"Missing configuration: {', '.join(missing)}")
    logger.debug(f"Upstream {config.upstream.base_url} token {truncate_token(config.upstream.api_token)}")

    router = build_router(config, client=client)

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        start = time.monotonic()
        request = Request(scope, receive)
        response = await router.dispatch(request)
        await response(scope, receive, send)

        duration_ms = int((time.monotonic() - start) * 1000)
        status = response.status_code
        outcome = "redirect" if 300 <= status < 400 else ("success" if status < 400 else "error")
        logger.info(format_request_log(
            request.method, scope["path"], status, outcome, duration_ms,
        ))

    return app


async def run_export(config: Config, args: argparse.Namespace) -> list[dict]:
    properties = await collect_properties(config.upstream, per_page=args.per_page)
    properties = filter_properties(properties, args.search)
    if args.details:
        properties = await attach_details(config.upstream, properties)
    return properties


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hospitable-viewer",
        description="Hospitable properties viewer",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the web application")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=None)

    export = subparsers.add_parser("export", help="Export properties as JSON")
    export.add_argument("--per-page", type=int, default=100)
    export.add_argument("--details", action="store_true", help="Include full property details")
    export.add_argument("--search", default=None, help="Filter by name or address")
    export.add_argument("--output", "-o", default=None, help="Write to file instead of stdout")

    return parser


def main(argv: list[str] | None = None):
    """Run the web server or an export."""
    setup_logging()
    args = build_parser().parse_args(argv)

    if args.command == "export":
        config = read_config()
        try:
            properties = asyncio.run(run_export(config, args))
        except ProxyError as e:
            print(f"Export failed: {e.code}: {e.message}", file=sys.stderr)
            sys.exit(1)

        text = json.dumps(properties, indent=2)
        if args.output:
            with open(args.output, "w") as f:
                f.write(text)
            print(f"Exported {len(properties)} properties to {args.output}")
        else:
            print(text)
        return

    port = getattr(args, "port", None) or int(os.environ.get("PORT", str(DEFAULT_PORT)))
    host = getattr(args, "host", "0.0.0.0")
    app = create_app()
    print(f"Starting hospitable-viewer on port {port}")
    print(f"  Login: http://{host}:{port}/login")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
