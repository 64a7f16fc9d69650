"""Configuration loading and parsing."""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml


DEFAULT_API_URL = "https://public.api.hospitable.com/v2"
DEFAULT_INCLUDE = "listings,details"
DAY_BOUNDARIES = ("utc", "local")
SECRET_KEYS = ("username", "password", "api_token")


class ConfigError(ValueError):
    """Missing or invalid configuration."""
    pass


@dataclass
class AuthSettings:
    """Operator identity used for login and session tokens."""
    username: str | None = None
    password: str | None = None
    day_boundary: str = "utc"


@dataclass
class UpstreamSettings:
    """Hospitable API connection settings."""
    api_token: str | None = None
    base_url: str = DEFAULT_API_URL
    include: str = DEFAULT_INCLUDE


@dataclass
class Config:
    """Full application configuration."""
    auth: AuthSettings = field(default_factory=AuthSettings)
    upstream: UpstreamSettings = field(default_factory=UpstreamSettings)

    def missing_secrets(self) -> list[str]:
        """Names of required secrets that are not set."""
        missing = []
        if not self.auth.username:
            missing.append("username")
        if not self.auth.password:
            missing.append("password")
        if not self.upstream.api_token:
            missing.append("api_token")
        return missing


def _substitute_env_vars(value: str, required: bool = True) -> str:
    """Replace ${VAR} and ${VAR:-default} patterns with environment values.

    When required is False an unset variable without a default becomes an
    empty string instead of raising.
    """
    pattern = r'\$\{([^}:]+)(:-([^}]*))?\}'

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            if match.group(2) is not None:
                return match.group(3)
            if not required:
                return ""
            raise ValueError(f"Environment variable not set: {var_name}")
        return env_value

    return re.sub(pattern, replacer, value)


def _substitute_env_vars_recursive(obj, required: bool = True):
    """Recursively substitute env vars in a data structure.

    Secrets may reference unset variables; they are reported per request.
    """
    if isinstance(obj, str):
        return _substitute_env_vars(obj, required)
    elif isinstance(obj, dict):
        return {
            k: _substitute_env_vars_recursive(v, required and k not in SECRET_KEYS)
            for k, v in obj.items()
        }
    elif isinstance(obj, list):
        return [_substitute_env_vars_recursive(item, required) for item in obj]
    return obj


def _secret(value) -> str | None:
    """Normalize a configured secret: empty means unset."""
    if value is None:
        return None
    value = str(value)
    return value or None


def _day_boundary(value: str | None) -> str:
    boundary = (value or "utc").lower()
    if boundary not in DAY_BOUNDARIES:
        raise ConfigError(
            f"Invalid day_boundary '{value}', expected one of: {', '.join(DAY_BOUNDARIES)}"
        )
    return boundary


def load_config(config_path: str) -> Config:
    """Load and parse configuration from YAML file."""
    path = Path(config_path)
    raw = yaml.safe_load(path.read_text()) or {}

    # Substitute environment variables
    raw = _substitute_env_vars_recursive(raw)

    auth_data = raw.get("auth") or {}
    upstream_data = raw.get("upstream") or {}

    auth = AuthSettings(
        username=_secret(auth_data.get("username")),
        password=_secret(auth_data.get("password")),
        day_boundary=_day_boundary(auth_data.get("day_boundary")),
    )
    upstream = UpstreamSettings(
        api_token=_secret(upstream_data.get("api_token")),
        base_url=upstream_data.get("base_url") or DEFAULT_API_URL,
        include=upstream_data.get("include") or DEFAULT_INCLUDE,
    )

    return Config(auth=auth, upstream=upstream)


def load_config_from_env() -> Config:
    """Build configuration from environment variables alone."""
    return Config(
        auth=AuthSettings(
            username=_secret(os.environ.get("AUTH_USERNAME")),
            password=_secret(os.environ.get("AUTH_PASSWORD")),
            day_boundary=_day_boundary(os.environ.get("SESSION_DAY_BOUNDARY")),
        ),
        upstream=UpstreamSettings(
            api_token=_secret(os.environ.get("HOSPITABLE_API_TOKEN")),
            base_url=os.environ.get("HOSPITABLE_API_URL") or DEFAULT_API_URL,
        ),
    )
