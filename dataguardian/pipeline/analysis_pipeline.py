"""
End-to-end site analysis.

Detect trackers, ask for an AI summary, classify and score, then
store the result.  A re-analysis of the same URL replaces the stored
record as a whole, so score, grade and trackers always change
together.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from dataguardian import config as config_mod
from dataguardian.agents import summary_agent
from dataguardian.analysis import detector, report, scoring, taxonomy
from dataguardian.models import analysis, tracking
from dataguardian.settings import storage as storage_mod
from dataguardian.utils import logger

log = logger.create_logger("Pipeline")

SITE_KEY_PREFIX = "siteAnalysis_"

DetectFn = Callable[[str, config_mod.DataGuardianConfig], Awaitable[tracking.DetectionResult]]
SummarizeFn = Callable[[list[str], str], Awaitable[analysis.AISummaryResult]]


# ── Repository ──────────────────────────────────────────────────


class SiteRepository:
    """Stored site analyses keyed by URL."""

    def __init__(self, storage: storage_mod.KeyValueStorage) -> None:
        self._storage = storage

    @staticmethod
    def _key(url: str) -> str:
        return f"{SITE_KEY_PREFIX}{url}"

    async def get(self, url: str) -> analysis.SiteAnalysis | None:
        data = await self._storage.get(self._key(url))
        if data is None:
            return None
        return analysis.SiteAnalysis.model_validate(data)

    async def save(self, site: analysis.SiteAnalysis) -> None:
        await self._storage.set(self._key(site.url), site.model_dump(mode="json", by_alias=True))

    async def list_all(self) -> list[analysis.SiteAnalysis]:
        """Every stored analysis, most recently analysed first."""
        sites: list[analysis.SiteAnalysis] = []
        for key in await self._storage.keys():
            if not key.startswith(SITE_KEY_PREFIX):
                continue
            data = await self._storage.get(key)
            if data is not None:
                sites.append(analysis.SiteAnalysis.model_validate(data))
        sites.sort(key=lambda site: site.last_analyzed, reverse=True)
        return sites


# ── Pipeline ────────────────────────────────────────────────────


async def analyze_site(
    url: str,
    simplified_policy: str | None,
    repository: SiteRepository,
    config: config_mod.DataGuardianConfig | None = None,
    detect_fn: DetectFn | None = None,
    summarize_fn: SummarizeFn | None = None,
) -> analysis.SiteAnalysis:
    """Analyse *url*, store the result and return it.

    Args:
        url: Absolute page URL to analyse.
        simplified_policy: Simplified privacy-policy text, if any.
        repository: Where the analysis is stored.
        config: Runtime configuration (defaults from the environment).
        detect_fn: Detection step; defaults to the configured detector.
        summarize_fn: AI summary step; defaults to the LLM agent.
    """
    cfg = config or config_mod.DataGuardianConfig()
    detect_step = detect_fn or detector.detect_site
    summarize_step = summarize_fn or summary_agent.generate_ai_summary

    log.section(f"Analysing {url}")
    log.start_timer("analysis")

    detection = await detect_step(url, cfg)
    trackers = detection.detected_trackers
    log.info("Trackers detected", {"count": len(trackers), "trackers": trackers})

    ai_summary = await summarize_step(trackers, url)
    log.info("AI summary generated", {"success": ai_summary.success})

    breakdown = scoring.calculate_privacy_score(url, simplified_policy, len(trackers), ai_summary)
    total = breakdown.total_score

    site = analysis.SiteAnalysis(
        url=url,
        trackers=trackers,
        tracker_details=taxonomy.classify_all(trackers),
        score=total,
        grade=scoring.get_grade(total),
        category=scoring.get_category(total),
        simplified_policy=simplified_policy or "",
        ai_summary=ai_summary,
        last_analyzed=datetime.now(timezone.utc),
    )
    await repository.save(site)

    log.end_timer("analysis", "Analysis complete")
    log.success("Privacy score", {"score": site.score, "grade": site.grade, "category": site.category})
    return site


def site_payload(site: analysis.SiteAnalysis) -> dict[str, Any]:
    """The camelCase response body for a stored analysis."""
    data = site.model_dump(mode="json", by_alias=True)
    data["trackerCount"] = len(site.trackers)
    data["summary"] = report.generate_user_friendly_summary(site)
    return data
