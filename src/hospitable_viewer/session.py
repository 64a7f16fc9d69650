"""Session token derivation for the operator login cookie.

Tokens are never stored. Both the login handler and the authentication gate
recompute the token from the configured identity and the current calendar
day, so a token stops matching when the day changes.
"""

import base64
import re
from datetime import datetime, timezone

from hospitable_viewer.config import ConfigError

SESSION_COOKIE = "session_token"
SESSION_MAX_AGE = 86400  # 24 hours

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")


def calendar_day(now: datetime | None = None, day_boundary: str = "utc") -> str:
    """Return the day label used in tokens, e.g. 'Sat Oct 17 2026'."""
    if now is None:
        now = datetime.now(timezone.utc) if day_boundary == "utc" else datetime.now()
    elif day_boundary == "utc" and now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    elif day_boundary == "local" and now.tzinfo is not None:
        now = now.astimezone()
    return now.strftime("%a %b %d %Y")


def derive_token(username: str | None, shared_secret: str | None, day: str) -> str:
    """Derive the session token for an identity on a calendar day.

    Raises:
        ConfigError: If the username or shared secret is not configured.
    """
    if not username or not shared_secret:
        raise ConfigError("Operator credentials not configured")

    encoded = base64.b64encode(f"{username}:{day}".encode("utf-8")).decode("ascii")
    return _NON_ALPHANUMERIC.sub("", encoded)
