"""
URL and hostname helpers for tracker detection and settings scoping.
"""

from __future__ import annotations

from urllib import parse

# Reference schemes that never produce an outbound network request.
_NON_NETWORK_SCHEMES = frozenset(["data", "javascript", "blob", "about", "mailto", "tel"])


def extract_domain(url: str) -> str:
    """Extract the hostname from a URL string."""
    try:
        parsed = parse.urlparse(url)
        return parsed.hostname or "unknown"
    except Exception:
        return "unknown"


def normalize_hostname(hostname: str) -> str:
    """Lower-case *hostname* and drop a trailing root dot."""
    return hostname.strip().lower().rstrip(".")


def resolve_hostname(reference: str, page_url: str) -> str | None:
    """Resolve a resource reference against *page_url* and return its hostname.

    Relative references (``/js/app.js``, ``//cdn.example.com/x.js``) are
    resolved the way a browser would.  Returns ``None`` for empty,
    non-network (``data:``, ``javascript:``...) or malformed references.

    Args:
        reference: Raw ``src``/``href`` attribute value or request URL.
        page_url: Absolute URL of the page the reference appeared on.

    Returns:
        The lower-cased hostname, or ``None`` when there is none.
    """
    ref = (reference or "").strip()
    if not ref:
        return None
    try:
        absolute = parse.urljoin(page_url, ref)
        parsed = parse.urlparse(absolute)
        if parsed.scheme.lower() in _NON_NETWORK_SCHEMES:
            return None
        hostname = parsed.hostname
    except ValueError:
        return None
    if not hostname:
        return None
    return normalize_hostname(hostname)


def is_secure_url(url: str) -> bool:
    """Return True when *url* uses the ``https://`` scheme."""
    return url.startswith("https://")


def site_hostname(url: str) -> str:
    """Return the hostname settings are keyed on for a page URL.

    Accepts either a full URL or a bare hostname.
    """
    if "://" not in url:
        return normalize_hostname(url)
    host = extract_domain(url)
    return normalize_hostname(host)
