"""Static assets for the browsing UI."""

from functools import lru_cache
from importlib.resources import files

ASSETS = ("index.html", "login.html", "styles.css", "app.js")

NOT_FOUND_BODY = b"File not found"

CONTENT_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
}


def content_type(name: str) -> str:
    """Content type from the file extension."""
    for ext, media_type in CONTENT_TYPES.items():
        if name.endswith(ext):
            return media_type
    return "text/plain"


@lru_cache(maxsize=None)
def _load(name: str) -> bytes:
    return (files("hospitable_viewer") / "static" / name).read_bytes()


def resolve(name: str) -> tuple[bytes, str]:
    """Return (content, content type) for a logical asset name.

    Unknown names give the "File not found" body as text/plain rather than
    raising.
    """
    if name not in ASSETS:
        return NOT_FOUND_BODY, "text/plain"
    return _load(name), content_type(name)
