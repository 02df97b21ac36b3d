"""Host URL parsing for connection prompts."""

from __future__ import annotations

from urllib.parse import urlsplit

from .models import DEFAULT_PORT, UrlValidation

INVALID_URL = UrlValidation(valid=False, protocol=None, host=None, port=None)


def validate_and_parse_url(new_url: str) -> UrlValidation:
    """Split ``new_url`` into protocol/host/port; never raises.

    A missing port is reported as ``0``. Inputs spelling out ``:443`` always
    report the HTTPS default port.
    """

    try:
        parts = urlsplit(new_url.strip())
        port = parts.port
    except (AttributeError, TypeError, ValueError):
        return INVALID_URL
    if not parts.scheme or not parts.hostname:
        return INVALID_URL
    if f":{DEFAULT_PORT}" in new_url:
        port = DEFAULT_PORT
    return UrlValidation(
        valid=True,
        protocol=parts.scheme,
        host=parts.hostname,
        port=port if port is not None else 0,
    )


__all__ = ["INVALID_URL", "validate_and_parse_url"]
