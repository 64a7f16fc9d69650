"""Authentication of the single operator."""

import hmac
from datetime import datetime
from typing import Callable

from hospitable_viewer.config import Config, ConfigError
from hospitable_viewer.cookies import parse_cookies
from hospitable_viewer.session import SESSION_COOKIE, calendar_day, derive_token


class AuthError(Exception):
    """Authentication error."""
    pass


def _equals(given: str | None, expected: str) -> bool:
    if given is None:
        return False
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


class Authenticator:
    """Handles credential checks and session cookie validation."""

    def __init__(self, config: Config, clock: Callable[[], datetime] | None = None):
        self._config = config
        self._clock = clock

    @property
    def configured(self) -> bool:
        return bool(self._config.auth.username and self._config.auth.password)

    def today(self) -> str:
        now = self._clock() if self._clock else None
        return calendar_day(now, self._config.auth.day_boundary)

    def expected_token(self) -> str:
        """Token a logged-in operator holds today.

        Raises:
            ConfigError: If the operator identity is not configured.
        """
        return derive_token(
            self._config.auth.username,
            self._config.auth.password,
            self.today(),
        )

    def authenticate(self, cookie_header: str | None) -> None:
        """Validate the session cookie. Raises AuthError if not valid."""
        token = parse_cookies(cookie_header).get(SESSION_COOKIE)
        try:
            expected = self.expected_token()
        except ConfigError:
            raise AuthError("Invalid session") from None

        if not _equals(token, expected):
            raise AuthError("Invalid session")

    def login(self, username: str | None, password: str | None) -> str:
        """Check submitted credentials and return the session token.

        Raises:
            ConfigError: If the operator identity is not configured.
            AuthError: If the credentials do not match.
        """
        if not self.configured:
            raise ConfigError("Operator credentials not configured")

        # Both comparisons always run
        username_ok = _equals(username, self._config.auth.username)
        password_ok = _equals(password, self._config.auth.password)
        if not (username_ok and password_ok):
            raise AuthError("Invalid credentials")

        return self.expected_token()
