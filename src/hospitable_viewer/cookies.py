"""Cookie header parsing."""

from urllib.parse import unquote


def parse_cookies(header: str | None) -> dict[str, str]:
    """Parse a Cookie header into a name/value mapping.

    Segments without '=' or with an empty name are skipped.
    """
    cookies: dict[str, str] = {}
    if not header:
        return cookies

    for segment in header.split(";"):
        name, sep, value = segment.strip().partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        cookies[name] = unquote(value.strip())

    return cookies
