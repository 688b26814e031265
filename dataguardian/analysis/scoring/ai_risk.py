"""AI-summary risk scoring.

Only a successful summary contributes.  Few key risks earn a bonus,
and each data recipient that names a watch-listed company costs
points, up to a fixed cap.
"""

from __future__ import annotations

from dataguardian.models import analysis

MAX_POINTS = 15

WATCHED_COMPANIES: tuple[str, ...] = ("Meta", "Google", "Amazon")

PENALTY_PER_RECIPIENT = 3
MAX_PENALTY = 15


def risk_bonus(key_risk_count: int) -> int:
    if key_risk_count <= 2:
        return 15
    if key_risk_count <= 4:
        return 10
    return 5


def sharing_penalty(who_they_share_with: list[str]) -> int:
    """Penalty for recipients that mention a watch-listed company."""
    flagged = sum(
        1
        for recipient in who_they_share_with
        if any(company in recipient for company in WATCHED_COMPANIES)
    )
    return min(MAX_PENALTY, PENALTY_PER_RECIPIENT * flagged)


def calculate(ai_summary: analysis.AISummaryResult | None) -> analysis.CategoryScore:
    """Score the AI summary, or contribute nothing when it is missing or failed."""
    if ai_summary is None or not ai_summary.success:
        return analysis.CategoryScore(points=0, max_points=MAX_POINTS)

    summary = ai_summary.summary
    bonus = risk_bonus(len(summary.key_risks))
    penalty = sharing_penalty(summary.who_they_share_with)

    issues: list[str] = []
    if len(summary.key_risks) > 4:
        issues.append(f"{len(summary.key_risks)} key privacy risks identified")
    if penalty:
        issues.append("Data shared with major advertising companies")
    return analysis.CategoryScore(points=bonus - penalty, max_points=MAX_POINTS, issues=issues)
