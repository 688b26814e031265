"""Privacy score calculator: orchestrator.

Calls each scoring step, sums the raw points without intermediate
clamping and clamps the total to 0-100 once.  Higher is better.
"""

from __future__ import annotations

from dataguardian.analysis.scoring import ai_risk, grading, policy, trackers, transport
from dataguardian.models import analysis, tracking
from dataguardian.settings import keys
from dataguardian.utils import logger

log = logger.create_logger("PrivacyScore")


def _clamp(raw_total: int) -> int:
    return max(0, min(100, raw_total))


# ── Public API ──────────────────────────────────────────────


def calculate_privacy_score(
    site_url: str,
    simplified_policy: str | None,
    tracker_count: int,
    ai_summary: analysis.AISummaryResult | None = None,
) -> analysis.ScoreBreakdown:
    """Calculate the complete privacy score breakdown.

    Args:
        site_url: The analysed URL (its scheme decides the transport points).
        simplified_policy: Simplified privacy-policy text; ``None`` is empty.
        tracker_count: Number of trackers counted against the site.
        ai_summary: AI summary result; only a successful one contributes.

    Returns:
        A :class:`ScoreBreakdown` with per-step points and the clamped total.
    """
    tracker_score = trackers.calculate(tracker_count)
    transport_score = transport.calculate(site_url)
    policy_score = policy.calculate(simplified_policy)
    ai_score = ai_risk.calculate(ai_summary)

    raw_total = tracker_score.points + transport_score.points + policy_score.points + ai_score.points
    total_score = _clamp(raw_total)

    factors: list[str] = [
        *tracker_score.issues,
        *transport_score.issues,
        *policy_score.issues[:3],
        *ai_score.issues,
    ]

    log.debug(
        "Privacy score calculated",
        {
            "rawTotal": raw_total,
            "score": total_score,
            "trackers": tracker_score.points,
            "transport": transport_score.points,
            "policy": policy_score.points,
            "aiRisk": ai_score.points,
        },
    )

    return analysis.ScoreBreakdown(
        tracker_points=tracker_score.points,
        transport_points=transport_score.points,
        policy_points=policy_score.points,
        ai_risk_points=ai_score.points,
        raw_total=raw_total,
        total_score=total_score,
        factors=factors,
    )


def score(
    site_url: str,
    simplified_policy: str | None,
    tracker_count: int,
    ai_summary: analysis.AISummaryResult | None = None,
) -> int:
    """Return just the clamped 0-100 privacy score."""
    return calculate_privacy_score(site_url, simplified_policy, tracker_count, ai_summary).total_score


# ── Rescoring ───────────────────────────────────────────────


def count_blocked(tracker_details: list[tracking.TrackerRecord], settings: dict[str, bool]) -> int:
    """Number of trackers whose category is blocked by *settings*."""
    return sum(1 for record in tracker_details if keys.is_category_blocked(settings, record.category))


def rescore(site: analysis.SiteAnalysis, settings: dict[str, bool]) -> analysis.RescoreResult:
    """Recompute a stored analysis's score with only the unblocked trackers counted.

    Transport, policy and AI steps reuse the stored inputs.  Without
    tracker details the stored score and grade come back unchanged.
    """
    total = len(site.tracker_details)
    if total == 0:
        return analysis.RescoreResult(
            score=site.score,
            grade=site.grade,
            unblocked_count=0,
            blocked_count=0,
            protection_level=0,
        )

    blocked = count_blocked(site.tracker_details, settings)
    unblocked = total - blocked
    new_score = score(site.url, site.simplified_policy, unblocked, site.ai_summary)

    return analysis.RescoreResult(
        score=new_score,
        grade=grading.get_grade(new_score),
        unblocked_count=unblocked,
        blocked_count=blocked,
        protection_level=round(blocked / total * 100),
    )
