"""
Playwright browser session for live tracker monitoring.

Each ``BrowserSession`` owns its own browser, context and page and
records every outbound request the page makes, so several analyses can
run side by side without sharing state.
"""

from __future__ import annotations

from typing import Literal

from playwright import async_api

from dataguardian.models import tracking
from dataguardian.utils import logger

log = logger.create_logger("BrowserSession")

# ============================================================================
# Constants
# ============================================================================

MAX_TRACKED_REQUESTS = 5000

NavigationOutcome = Literal["loaded", "partial", "failed"]

# Collects the same attribute surface the static fetcher parses.
_DOM_RESOURCES_SCRIPT = """() => {
    const pick = (selector, attr, kind) =>
        Array.from(document.querySelectorAll(selector))
            .map((el) => ({ url: el.getAttribute(attr) || '', tagKind: kind }))
            .filter((item) => item.url.trim() !== '');
    return [
        ...pick('script[src]', 'src', 'script'),
        ...pick('img[src]', 'src', 'img'),
        ...pick('iframe[src]', 'src', 'iframe'),
        ...pick('link[href]', 'href', 'link'),
    ];
}"""


def _is_network_failure(error: async_api.Error) -> bool:
    """True when Chromium could not reach the site at all (DNS, refused, offline)."""
    return "net::ERR_" in str(error)


class BrowserSession:
    """
    Manages an isolated browser session for a single URL analysis.
    """

    def __init__(self, headless: bool = True) -> None:
        """Initialise a new browser session with empty state."""
        self._headless = headless
        self._playwright: async_api.Playwright | None = None
        self._browser: async_api.Browser | None = None
        self._context: async_api.BrowserContext | None = None
        self._page: async_api.Page | None = None

        self._requests: list[tracking.PageResource] = []
        self._seen_request_urls: set[str] = set()

    # ==========================================================================
    # State
    # ==========================================================================

    def get_page(self) -> async_api.Page | None:
        """Return the active Playwright page, if any."""
        return self._page

    def get_recorded_requests(self) -> list[tracking.PageResource]:
        """Return the distinct outbound requests captured so far."""
        return list(self._requests)

    # ==========================================================================
    # Browser Lifecycle
    # ==========================================================================

    async def launch(self) -> None:
        """Launch Chromium and open a fresh page with request recording."""
        await self.close()
        log.info("Launching browser", {"headless": self._headless})

        self._playwright = await async_api.async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self._headless,
            args=[
                "--no-first-run",
                "--no-default-browser-check",
                "--disable-blink-features=AutomationControlled",
            ],
        )
        self._context = await self._browser.new_context(
            viewport={"width": 1280, "height": 800},
            locale="en-GB",
            java_script_enabled=True,
        )
        self._page = await self._context.new_page()
        self._page.on("request", self._on_request)

    def _on_request(self, request: async_api.Request) -> None:
        """Record an outbound request URL (deduplicated, capped)."""
        request_url = request.url
        if request_url in self._seen_request_urls:
            return
        if len(self._requests) >= MAX_TRACKED_REQUESTS:
            if len(self._requests) == MAX_TRACKED_REQUESTS:
                log.debug("Request tracking limit reached", {"limit": MAX_TRACKED_REQUESTS})
            return
        self._seen_request_urls.add(request_url)
        self._requests.append(tracking.PageResource(url=request_url, tag_kind="request"))

    # ==========================================================================
    # Navigation
    # ==========================================================================

    async def navigate(self, url: str, timeout_ms: int = 30000) -> NavigationOutcome:
        """Navigate to *url* and wait for the load event.

        Returns ``"partial"`` when the timeout expires after navigation
        started, ``"failed"`` when the site could not be reached at all.
        Any other Playwright error propagates.
        """
        if not self._page:
            raise RuntimeError("No browser session active")

        log.debug("Navigating", {"url": url, "timeoutMs": timeout_ms})
        try:
            response = await self._page.goto(url, wait_until="load", timeout=timeout_ms)
        except async_api.TimeoutError:
            log.info("Navigation timed out, continuing with partial page", {"url": url})
            return "partial"
        except async_api.Error as error:
            if _is_network_failure(error):
                log.warn("Navigation failed", {"url": url, "error": str(error)})
                return "failed"
            raise

        if response is not None and response.status >= 400:
            log.info("Page returned error status", {"url": url, "status": response.status})
        return "loaded"

    # ==========================================================================
    # Data Capture
    # ==========================================================================

    async def collect_dom_resources(self) -> list[tracking.PageResource]:
        """Return the script/img/iframe/link references currently in the DOM."""
        if not self._page:
            return []
        try:
            items = await self._page.evaluate(_DOM_RESOURCES_SCRIPT)
        except async_api.Error as exc:
            log.warn("Failed to read DOM resources", {"error": str(exc)})
            return []
        return [tracking.PageResource.model_validate(item) for item in items]

    # ==========================================================================
    # Cleanup
    # ==========================================================================

    async def close(self) -> None:
        """Close the browser and clean up all resources."""
        if self._page:
            self._page.remove_listener("request", self._on_request)
            self._page = None

        if self._context:
            try:
                await self._context.close()
            except Exception as exc:
                log.debug("Context close error (non-fatal)", {"error": str(exc)})
            self._context = None

        if self._browser:
            try:
                await self._browser.close()
            except Exception as exc:
                log.debug("Browser close error (non-fatal)", {"error": str(exc)})
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as exc:
                log.debug("Playwright stop error (non-fatal)", {"error": str(exc)})
            self._playwright = None

    async def __aenter__(self) -> BrowserSession:
        await self.launch()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
