"""URL helpers.

Callers name endpoints in whatever form they have at hand:

- cloud.example.com
- https://cloud.example.com
- https://cloud.example.com/api/

Sessions are keyed by the bare host, and published catalog URLs come back
from the platform as a path relative to that host. These helpers normalize
both directions.
"""

from __future__ import annotations

from urllib.parse import urlparse


def _ensure_scheme(url: str) -> str:
    url = (url or "").strip()
    if not url:
        return url
    # Allow "cloud.example.com" style inputs.
    if "://" not in url:
        return "https://" + url
    return url


def normalize_host(host: str) -> str:
    """Return the lowercase host[:port] part of a host name or URL."""
    u = urlparse(_ensure_scheme(host))
    netloc = u.netloc or u.path  # handle edge cases where netloc is empty
    return netloc.rstrip("/").lower()


def host_url(host: str) -> str:
    """Return https://host for a host name or URL."""
    return f"https://{normalize_host(host)}"


def published_url(host: str, relative_path: str) -> str:
    """Compose the absolute URL of a published catalog feed.

    The platform reports the feed as a path ("/vcsp/lib/..."); an already
    absolute value is returned unchanged.
    """
    relative_path = (relative_path or "").strip()
    if "://" in relative_path:
        return relative_path
    if relative_path and not relative_path.startswith("/"):
        relative_path = "/" + relative_path
    return host_url(host) + relative_path
