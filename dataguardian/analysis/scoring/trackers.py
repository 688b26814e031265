"""Tracker-count scoring.

Fewer third-party trackers earn more points; the tiers are fixed and
step down from 40 for a tracker-free page to 0 beyond fifteen.
"""

from __future__ import annotations

from dataguardian.models import analysis

MAX_POINTS = 40

# (upper bound inclusive, points), checked in order.
_TIERS: tuple[tuple[int, int], ...] = (
    (0, 40),
    (2, 35),
    (5, 25),
    (10, 15),
    (15, 5),
)


def tier_points(tracker_count: int) -> int:
    """Points for *tracker_count* trackers."""
    for upper, points in _TIERS:
        if tracker_count <= upper:
            return points
    return 0


def calculate(tracker_count: int) -> analysis.CategoryScore:
    """Score the number of trackers observed on the page."""
    count = max(0, tracker_count)
    points = tier_points(count)
    issues: list[str] = []
    if count > 15:
        issues.append(f"{count} trackers detected (more than 15)")
    elif count > 5:
        issues.append(f"{count} trackers detected")
    return analysis.CategoryScore(points=points, max_points=MAX_POINTS, issues=issues)
