"""Shareable paste links.

A locator is ``{base_url}/view/{id}#{key}``. Browsers and HTTP clients never
send the fragment to the server, so the key stays out of request logs.
"""

from __future__ import annotations

from urllib.parse import quote, unquote, urlsplit

from kopy.errors import ValidationError

VIEW_PATH_PREFIX = "/view/"


def build_locator(base_url: str, paste_id: str, key: str) -> str:
    """Return the shareable URL for a paste."""
    return f"{base_url.rstrip('/')}{VIEW_PATH_PREFIX}{paste_id}#{quote(key, safe='')}"


def parse_locator(url: str) -> tuple[str, str]:
    """Split a shareable URL into ``(paste_id, key)``.

    Raises:
        ValidationError: If the link has no paste id or no key fragment.
    """
    parts = urlsplit(url.strip())
    key = unquote(parts.fragment)
    if not key:
        raise ValidationError("Invalid link: Missing decryption key")

    path = parts.path.rstrip("/")
    paste_id = path.rsplit("/", 1)[-1] if "/" in path else path
    if not paste_id:
        raise ValidationError("Invalid link: Missing paste id")
    return paste_id, key
