"""Tracker taxonomy lookup.

``classify`` maps any hostname to exactly one :class:`TrackerRecord`.
The matching order determines the company shown to users, so it is
fixed:

1. exact match against a taxonomy ``domain_key``;
2. the hostname contains an entry's primary label (first entry in
   table order wins);
3. keyword heuristics for Google, Meta and ad-serving hostnames;
4. an ``Unknown`` record named after the hostname.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable

from dataguardian.data import loader
from dataguardian.models import tracking
from dataguardian.utils import url as url_mod

DEFAULT_PURPOSE = "Data collection and tracking"
UNKNOWN_COMPANY = "Unknown"


def _record_from_entry(hostname: str, entry: tracking.TaxonomyEntry) -> tracking.TrackerRecord:
    return tracking.TrackerRecord(
        domain=hostname,
        name=entry.name,
        category=entry.category,
        company=entry.company,
        data_types=entry.data_types,
        purpose=entry.purpose,
    )


def _has_ad_marker(hostname: str) -> bool:
    """True for ``ads`` anywhere or a label that is ``ad`` / starts with ``ad-``."""
    if "ads" in hostname:
        return True
    return any(label == "ad" or label.startswith("ad-") for label in hostname.split("."))


def _infer_google_category(hostname: str) -> tracking.TrackerCategory:
    if "analytics" in hostname:
        return "Analytics"
    if "tag" in hostname:
        return "Tag Manager"
    if "doubleclick" in hostname or _has_ad_marker(hostname):
        return "Advertising"
    if any(marker in hostname for marker in ("fonts", "apis", "static")):
        return "CDN/Utility"
    return "Unknown"


def _infer(hostname: str) -> tracking.TrackerRecord | None:
    """Keyword heuristics for hostnames missing from the table."""
    if "google" in hostname:
        return tracking.TrackerRecord(
            domain=hostname,
            name="Google Services",
            category=_infer_google_category(hostname),
            company="Google",
            data_types=("Browsing behaviour", "Device information"),
            purpose="Google analytics, advertising and related services",
        )
    if "facebook" in hostname or "meta" in hostname:
        return tracking.TrackerRecord(
            domain=hostname,
            name="Meta/Facebook",
            category="Social",
            company="Meta",
            data_types=("Social interactions", "Browsing behaviour"),
            purpose="Social media tracking and advertising",
        )
    if _has_ad_marker(hostname):
        return tracking.TrackerRecord(
            domain=hostname,
            name=hostname,
            category="Advertising",
            company=UNKNOWN_COMPANY,
            data_types=("Ad interactions",),
            purpose="Advertising and ad measurement",
        )
    return None


@functools.lru_cache(maxsize=4096)
def _classify_normalized(hostname: str) -> tracking.TrackerRecord:
    entries = loader.get_taxonomy()

    for entry in entries:
        if hostname == entry.domain_key:
            return _record_from_entry(hostname, entry)

    for entry in entries:
        if entry.primary_label in hostname:
            return _record_from_entry(hostname, entry)

    inferred = _infer(hostname)
    if inferred is not None:
        return inferred

    return tracking.TrackerRecord(
        domain=hostname,
        name=hostname,
        category="Unknown",
        company=UNKNOWN_COMPANY,
        purpose=DEFAULT_PURPOSE,
    )


def classify(hostname: str) -> tracking.TrackerRecord:
    """Classify *hostname* against the taxonomy.  Never raises."""
    normalized = url_mod.normalize_hostname(hostname or "")
    if not normalized:
        normalized = "unknown"
    return _classify_normalized(normalized)


def classify_all(hostnames: Iterable[str]) -> list[tracking.TrackerRecord]:
    """Classify each distinct hostname once, keeping first-seen order."""
    seen: set[str] = set()
    records: list[tracking.TrackerRecord] = []
    for hostname in hostnames:
        record = classify(hostname)
        if record.domain in seen:
            continue
        seen.add(record.domain)
        records.append(record)
    return records
