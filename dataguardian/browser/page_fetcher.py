"""
Static page fetch and resource extraction.

Downloads a page's HTML with a bounded timeout and lists the outbound
references a browser would load from it: ``script[src]``, ``img[src]``,
``iframe[src]`` and ``link[href]``.  Network and DNS failures yield
``None`` so that detection degrades to an empty result; a timeout after
part of the body arrived keeps the partial HTML.
"""

from __future__ import annotations

import aiohttp
import bs4

from dataguardian.models import tracking
from dataguardian.utils import logger

log = logger.create_logger("PageFetcher")

_CHUNK_SIZE = 16 * 1024

# Cap the body we keep in memory; trackers live near the top of the page.
MAX_HTML_BYTES = 5 * 1024 * 1024

_FETCH_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
        " (KHTML, like Gecko) Chrome/126.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

# (tag, attribute, tag kind) triples scanned in the HTML.
_RESOURCE_SELECTORS: tuple[tuple[str, str, tracking.TagKind], ...] = (
    ("script", "src", "script"),
    ("img", "src", "img"),
    ("iframe", "src", "iframe"),
    ("link", "href", "link"),
)


async def fetch_page_html(url: str, timeout_ms: int = 10000) -> str | None:
    """Fetch *url* and return its HTML text.

    Args:
        url: Absolute page URL.
        timeout_ms: Total time budget for connect and body read.

    Returns:
        The (possibly partial) HTML, or ``None`` when nothing could be
        fetched (network error, DNS failure, HTTP error status, timeout
        before any content).
    """
    chunks: list[bytes] = []
    received = 0
    charset = "utf-8"
    timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)

    log.start_timer("page-fetch")
    try:
        async with aiohttp.ClientSession(timeout=timeout, headers=_FETCH_HEADERS) as http_session:
            async with http_session.get(url) as response:
                if response.status >= 400:
                    log.warn("Page fetch failed", {"url": url, "status": response.status})
                    log.end_timer("page-fetch", "Page fetch aborted")
                    return None
                charset = response.charset or "utf-8"
                async for chunk in response.content.iter_chunked(_CHUNK_SIZE):
                    chunks.append(chunk)
                    received += len(chunk)
                    if received >= MAX_HTML_BYTES:
                        log.debug("HTML size cap reached", {"bytes": received})
                        break
    except TimeoutError:
        if not chunks:
            log.warn("Page fetch timed out before any content", {"url": url, "timeoutMs": timeout_ms})
            log.end_timer("page-fetch", "Page fetch aborted")
            return None
        log.info("Page fetch timed out, continuing with partial content", {"url": url, "bytes": received})
    except aiohttp.ClientError as exc:
        if not chunks:
            log.warn("Page fetch network error", {"url": url, "error": str(exc)})
            log.end_timer("page-fetch", "Page fetch aborted")
            return None
        log.info("Connection dropped, continuing with partial content", {"url": url, "bytes": received})

    log.end_timer("page-fetch", "Page fetched")
    try:
        return b"".join(chunks).decode(charset, errors="replace")
    except LookupError:
        return b"".join(chunks).decode("utf-8", errors="replace")


def extract_resources(html: str) -> list[tracking.PageResource]:
    """List the resource references in *html*, in document order per tag kind."""
    soup = bs4.BeautifulSoup(html, "html.parser")
    resources: list[tracking.PageResource] = []
    for tag, attribute, kind in _RESOURCE_SELECTORS:
        for element in soup.find_all(tag):
            value = element.get(attribute)
            if isinstance(value, list):
                value = " ".join(value)
            if value and value.strip():
                resources.append(tracking.PageResource(url=value.strip(), tag_kind=kind))
    return resources
