"""
Curated tracker-domain keywords for detection.

A hostname is a tracker when it *contains* one of these keywords,
so subdomains such as ``www.google-analytics.com`` or
``stats.g.doubleclick.net`` are caught without listing them.
The keywords are merged into a single alternation regex so each
hostname is checked in one pass.
"""

from __future__ import annotations

import re

TRACKER_DOMAINS: tuple[str, ...] = (
    # Analytics
    "google-analytics.com",
    "googletagmanager.com",
    "mixpanel.com",
    "segment.com",
    "amplitude.com",
    "hotjar.com",
    "matomo.org",
    "heap.io",
    "fullstory.com",
    "mouseflow.com",
    "chartbeat.com",
    "scorecardresearch.com",
    "analytics.yahoo.com",
    # Ads / Marketing
    "doubleclick.net",
    "googlesyndication.com",
    "googleadservices.com",
    "adservice.google.com",
    "amazon-adsystem.com",
    "ads-twitter.com",
    "facebook.net",
    "facebook.com",
    "fbcdn.net",
    "criteo.net",
    "criteo.com",
    "taboola.com",
    "outbrain.com",
    "adnxs.com",
    "adroll.com",
    "pubmatic.com",
    "rubiconproject.com",
    "smartadserver.com",
    "revcontent.com",
    "mgid.com",
    "adform.net",
    "adition.com",
    "quantserve.com",
    # Social / Widgets
    "twitter.com",
    "linkedin.com",
    "pinterest.com",
    "instagram.com",
    "youtube.com",
    "tiktok.com",
    "snapchat.com",
    # Experiment / Optimization / Testing
    "optimizely.com",
    "vwo.com",
    "crazyegg.com",
    # Tag management
    "tealiumiq.com",
    "ensighten.com",
    # Fonts / CDNs that may track
    "fonts.googleapis.com",
    "cdnjs.cloudflare.com",
    "jsdelivr.net",
    "maxcdn.bootstrapcdn.com",
    # Misc / Retargeting
    "yandex.ru",
    "bing.com",
)

TRACKER_DOMAINS_COMBINED: re.Pattern[str] = re.compile(
    "|".join(re.escape(domain) for domain in TRACKER_DOMAINS), re.IGNORECASE
)


def is_tracker_hostname(hostname: str) -> bool:
    """Return True when *hostname* contains a curated tracker domain."""
    return TRACKER_DOMAINS_COMBINED.search(hostname) is not None
