"""URL building utilities for URL shortener."""

from urllib.parse import urlparse


def build_short_url(
    short_code: str,
    base_url: str,
    path_prefix: str = "",
) -> str:
    """Build complete short URL.

    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Complete short URL
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{short_code}"
    return f"{base}/{short_code}"


def extract_short_code(short_code_or_url: str) -> str:
    """Return the code from a full short URL, or the input if it is a bare code."""
    value = short_code_or_url.strip()
    if "://" not in value:
        return value.strip("/")

    path = urlparse(value).path.rstrip("/")
    return path.rsplit("/", 1)[-1]
