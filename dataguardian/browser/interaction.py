"""
User-interaction simulation for surfacing lazily-loaded trackers.

Many trackers only fire after the visitor scrolls, moves the pointer or
dismisses a consent dialog.  After the initial load we perform one
scroll by a viewport, one hover and a single click on the first element
matched by ``INTERACTIVE_SELECTORS``, pausing after each action so the
page can issue the requests it triggers.
"""

from __future__ import annotations

import asyncio

from playwright import async_api

from dataguardian.utils import logger

log = logger.create_logger("Interaction")

# Ordered: the first selector that matches at least one element is
# the only one clicked.
INTERACTIVE_SELECTORS: tuple[str, ...] = (
    "button",
    "a[href]",
    '[class*="close"]',
    '[class*="accept"]',
    '[class*="consent"]',
    '[role="button"]',
)

# Bound for each individual Playwright action.
_ACTION_TIMEOUT_MS = 3000


async def _settle(delay_ms: int) -> None:
    await asyncio.sleep(delay_ms / 1000)


async def scroll_viewport(page: async_api.Page) -> bool:
    """Scroll down by one viewport height."""
    try:
        await page.evaluate("() => window.scrollBy(0, window.innerHeight)")
        return True
    except async_api.Error as exc:
        log.debug("Scroll failed", {"error": str(exc)})
        return False


async def hover_page(page: async_api.Page) -> bool:
    """Move the pointer to the middle of the viewport."""
    viewport = page.viewport_size or {"width": 1280, "height": 800}
    try:
        await page.mouse.move(viewport["width"] / 2, viewport["height"] / 2)
        return True
    except async_api.Error as exc:
        log.debug("Hover failed", {"error": str(exc)})
        return False


async def click_first_interactive(page: async_api.Page) -> str | None:
    """Click the first element of the first selector with any match.

    Returns the selector that was clicked, or ``None``.  At most one
    click is attempted; a failed click is not retried on another
    selector.
    """
    for selector in INTERACTIVE_SELECTORS:
        locator = page.locator(selector)
        try:
            if await locator.count() == 0:
                continue
        except async_api.Error:
            continue
        try:
            await locator.first.click(timeout=_ACTION_TIMEOUT_MS, no_wait_after=True)
            log.debug("Clicked interactive element", {"selector": selector})
            return selector
        except async_api.Error as exc:
            log.debug("Click failed", {"selector": selector, "error": str(exc)})
            return None
    return None


async def simulate_interactions(page: async_api.Page, settle_delay_ms: int = 1500) -> list[str]:
    """Scroll, hover and click once, settling after each action.

    Returns the names of the actions that succeeded, for logging.
    """
    performed: list[str] = []

    if await scroll_viewport(page):
        performed.append("scroll")
    await _settle(settle_delay_ms)

    if await hover_page(page):
        performed.append("hover")
    await _settle(settle_delay_ms)

    clicked = await click_first_interactive(page)
    if clicked is not None:
        performed.append(f"click:{clicked}")
    await _settle(settle_delay_ms)

    log.info("Interaction simulation complete", {"actions": performed})
    return performed
