"""Logging configuration and utilities."""

import logging
import os
from datetime import datetime

__all__ = [
    "setup_logging",
    "get_logger",
    "truncate_token",
    "format_request_log",
]


def setup_logging() -> None:
    """Configure logging based on LOG_LEVEL environment variable.

    Valid levels: DEBUG, INFO, WARNING, ERROR (default: INFO)
    """
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, None)

    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger("hospitable_viewer")
    logger.setLevel(level)
    logger.propagate = False  # Prevent duplicate logs to root logger

    # Only add handler if not already configured
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)


def truncate_token(token: str | None) -> str:
    """Truncate token to show first 3 and last 3 chars.

    Tokens 8 chars or shorter (or unset) show *** for security.
    """
    if not token or len(token) <= 8:
        return "***"
    return f"{token[:3]}...{token[-3:]}"


def format_request_log(
    method: str,
    path: str,
    status: int,
    outcome: str,
    duration_ms: int,
    error_message: str | None = None,
) -> str:
    """Format a request log line.

    Format: YYYY-MM-DD HH:MM:SS | METHOD path | status | outcome | duration
    """
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    line = f"{timestamp} | {method} {path} | {status} | {outcome} | {duration_ms}ms"

    if error_message:
        line += f"\n    {error_message}"

    return line


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the hospitable_viewer namespace."""
    return logging.getLogger(f"hospitable_viewer.{name}")
