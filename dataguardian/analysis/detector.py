"""
Tracker detection over a page's outbound resource references.

``detect`` is the pure core: it reduces every reference to a hostname
and keeps the ones that contain a curated tracker keyword.
``detect_page`` (static HTML fetch) and ``monitor_page`` (live
Playwright session) gather the references and feed them to it.
"""

from __future__ import annotations

from collections.abc import Iterable

from dataguardian import config as config_mod
from dataguardian.analysis import tracker_patterns
from dataguardian.browser import interaction, page_fetcher, session
from dataguardian.models import tracking
from dataguardian.utils import logger
from dataguardian.utils import url as url_mod

log = logger.create_logger("Detector")


def _reference_url(resource: tracking.PageResource | str) -> str:
    if isinstance(resource, tracking.PageResource):
        return resource.url
    return resource


def detect(
    resources: Iterable[tracking.PageResource | str], page_url: str
) -> tracking.DetectionResult:
    """Reduce *resources* to hostnames and pick out the trackers.

    Args:
        resources: Raw ``src``/``href`` values or recorded request URLs,
            either as strings or ``PageResource`` objects.
        page_url: Absolute URL the references were found on; relative
            references are resolved against it.

    Returns:
        Hostname-unique, first-seen-ordered lists of every resource
        host and of the tracker hosts among them.
    """
    all_resources: list[str] = []
    trackers: list[str] = []
    seen: set[str] = set()

    for resource in resources:
        hostname = url_mod.resolve_hostname(_reference_url(resource), page_url)
        if hostname is None or hostname in seen:
            continue
        seen.add(hostname)
        all_resources.append(hostname)
        if tracker_patterns.is_tracker_hostname(hostname):
            trackers.append(hostname)

    return tracking.DetectionResult(all_resources=all_resources, detected_trackers=trackers)


async def detect_page(
    url: str, config: config_mod.DataGuardianConfig | None = None
) -> tracking.DetectionResult:
    """Fetch *url* once and detect trackers in its static HTML.

    Unreachable pages produce an empty result rather than an error.
    """
    cfg = config or config_mod.DataGuardianConfig()
    html = await page_fetcher.fetch_page_html(url, timeout_ms=cfg.fetch_timeout_ms)
    if html is None:
        return tracking.DetectionResult()

    resources = page_fetcher.extract_resources(html)
    result = detect(resources, url)
    log.info(
        "Static detection complete",
        {"url": url, "resources": len(result.all_resources), "trackers": len(result.detected_trackers)},
    )
    return result


async def monitor_page(
    url: str, config: config_mod.DataGuardianConfig | None = None
) -> tracking.DetectionResult:
    """Load *url* in a real browser, interact with it and detect trackers.

    Every outbound request made during load and interaction is
    considered together with the references left in the DOM.
    """
    cfg = config or config_mod.DataGuardianConfig()
    log.start_timer("live-detection")

    async with session.BrowserSession(headless=cfg.headless) as browser:
        outcome = await browser.navigate(url, timeout_ms=cfg.navigation_timeout_ms)
        if outcome == "failed":
            log.end_timer("live-detection", "Live detection aborted")
            return tracking.DetectionResult()

        page = browser.get_page()
        if page is not None:
            await interaction.simulate_interactions(page, settle_delay_ms=cfg.settle_delay_ms)

        dom_resources = await browser.collect_dom_resources()
        requests = browser.get_recorded_requests()

    result = detect([*requests, *dom_resources], url)
    log.end_timer("live-detection", "Live detection complete")
    log.info(
        "Live detection complete",
        {
            "url": url,
            "navigation": outcome,
            "requests": len(requests),
            "trackers": len(result.detected_trackers),
        },
    )
    return result


async def detect_site(
    url: str, config: config_mod.DataGuardianConfig | None = None
) -> tracking.DetectionResult:
    """Run the detection variant selected by ``config.live_detection``."""
    cfg = config or config_mod.DataGuardianConfig()
    if cfg.live_detection:
        return await monitor_page(url, cfg)
    return await detect_page(url, cfg)
