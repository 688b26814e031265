"""
User-facing report helpers for a stored site analysis.

Builds the one-paragraph summary shown next to a score and the
site-to-tracker network graph used by the full report view.
"""

from __future__ import annotations

from dataguardian.models import analysis, tracking
from dataguardian.utils import url as url_mod

# Companies named before collapsing the rest into "and N others".
_MAX_NAMED_COMPANIES = 3


# (minimum score, sentence template), checked from the top.
_SCORE_BANDS: tuple[tuple[int, str], ...] = (
    (80, "This site has excellent privacy practices with minimal tracking ({count} trackers)."),
    (65, "This site has good privacy practices but uses some tracking ({count} trackers)."),
    (50, "This site has moderate privacy practices with noticeable tracking ({count} trackers)."),
    (35, "This site has poor privacy practices with significant tracking ({count} trackers)."),
)

_LOWEST_BAND = "This site has very poor privacy practices with extensive tracking ({count} trackers)."


def _band_sentence(score: int, tracker_count: int) -> str:
    for minimum, template in _SCORE_BANDS:
        if score >= minimum:
            return template.format(count=tracker_count)
    return _LOWEST_BAND.format(count=tracker_count)


def _sharing_sentence(companies: list[str]) -> str:
    named = ", ".join(companies[:_MAX_NAMED_COMPANIES])
    remaining = len(companies) - _MAX_NAMED_COMPANIES
    if remaining > 0:
        return f" Your data may be shared with {named} and {remaining} others."
    return f" Your data may be shared with {named}."


def generate_user_friendly_summary(site: analysis.SiteAnalysis) -> str:
    """Describe *site*'s score band and, when known, who receives its data."""
    text = _band_sentence(site.score, len(site.trackers))

    ai_summary = site.ai_summary
    if ai_summary is not None and ai_summary.success:
        companies = ai_summary.summary.who_they_share_with
        if companies:
            text += _sharing_sentence(companies)
    return text


def _tracker_lookup(site: analysis.SiteAnalysis) -> dict[str, tracking.TrackerRecord]:
    details: dict[str, tracking.TrackerRecord] = {}
    if site.ai_summary is not None:
        for record in site.ai_summary.tracker_details:
            details.setdefault(record.domain, record)
    # Records classified during analysis take precedence.
    for record in site.tracker_details:
        details[record.domain] = record
    return details


def build_network_graph(site: analysis.SiteAnalysis) -> analysis.NetworkGraph:
    """Build the site node plus one node and link per detected tracker."""
    nodes = [
        analysis.NetworkNode(
            id=site.url,
            type="site",
            label=url_mod.site_hostname(site.url),
            category=site.category,
            score=site.score,
        )
    ]
    links: list[analysis.NetworkLink] = []

    lookup = _tracker_lookup(site)
    for tracker in site.trackers:
        record = lookup.get(tracker)
        label = record.name if record else tracker
        category = record.category if record else "Unknown"
        company = record.company if record else "Unknown"

        nodes.append(
            analysis.NetworkNode(
                id=tracker, type="tracker", label=label, category=category, company=company
            )
        )
        links.append(analysis.NetworkLink(source=site.url, target=tracker, type=category))

    return analysis.NetworkGraph(nodes=nodes, links=links, summary=site.ai_summary)
