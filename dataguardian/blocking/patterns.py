"""
Static block patterns per tracker category.

Patterns are URL globs in the extension rule syntax: ``*`` in the
scheme matches any scheme, a leading ``*.`` on the host matches the
bare domain and any subdomain, and ``*`` elsewhere matches anything.
"""

from __future__ import annotations

from dataguardian.models import blocking, tracking

CATEGORY_PATTERNS: dict[tracking.TrackerCategory, tuple[str, ...]] = {
    "Advertising": (
        "*://*.doubleclick.net/*",
        "*://*.googlesyndication.com/*",
        "*://*.googleadservices.com/*",
        "*://*.amazon-adsystem.com/*",
        "*://*.criteo.com/*",
        "*://*.outbrain.com/*",
        "*://*.taboola.com/*",
        "*://*.adnxs.com/*",
        "*://*.adsystem.com/*",
    ),
    "Analytics": (
        "*://*.google-analytics.com/*",
        "*://*.googletagmanager.com/*",
        "*://*.mixpanel.com/*",
        "*://*.segment.com/*",
        "*://*.amplitude.com/*",
        "*://*.hotjar.com/*",
        "*://*.fullstory.com/*",
        "*://*.mouseflow.com/*",
    ),
    "Social": (
        "*://*.facebook.net/*",
        "*://*.connect.facebook.net/*",
        "*://*.ads-twitter.com/*",
        "*://*.linkedin.com/analytics/*",
        "*://*.snapchat.com/track/*",
        "*://*.pinterest.com/track/*",
        "*://*.tiktok.com/track/*",
    ),
    "Tag Manager": (
        "*://*.tagmanager.google.com/*",
        "*://*.tealiumiq.com/*",
        "*://*.tiqcdn.com/*",
        "*://*.ensighten.com/*",
    ),
    "CDN/Utility": (
        "*://*.fonts.googleapis.com/*",
        "*://*.cdnjs.cloudflare.com/*",
        "*://*.jsdelivr.net/*",
        "*://*.maxcdn.bootstrapcdn.com/*",
    ),
    "Unknown": (),
}

CATEGORY_RESOURCE_TYPES: dict[tracking.TrackerCategory, tuple[blocking.ResourceType, ...]] = {
    "Advertising": ("script", "xmlhttprequest", "image", "sub_frame"),
    "Analytics": ("script", "xmlhttprequest", "image"),
    "Social": ("script", "xmlhttprequest", "image", "sub_frame"),
    "Tag Manager": ("script", "xmlhttprequest"),
    "CDN/Utility": ("script", "stylesheet"),
    "Unknown": ("script", "xmlhttprequest", "image", "sub_frame"),
}

# Used by the catch-all rules.
ALL_RESOURCE_TYPES: tuple[blocking.ResourceType, ...] = (
    "script",
    "xmlhttprequest",
    "image",
    "sub_frame",
    "stylesheet",
)

SPECIFIC_RULE_PRIORITY = 2
CATCH_ALL_RULE_PRIORITY = 1


def patterns_for(category: tracking.TrackerCategory) -> tuple[str, ...]:
    return CATEGORY_PATTERNS.get(category, ())
