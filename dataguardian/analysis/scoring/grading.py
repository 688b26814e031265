"""Letter grades and score categories for a 0-100 privacy score."""

from __future__ import annotations

from dataguardian.models import analysis

# (minimum score, grade), checked from the top.
_GRADE_THRESHOLDS: tuple[tuple[int, analysis.Grade], ...] = (
    (95, "A+"),
    (90, "A"),
    (85, "A-"),
    (80, "B+"),
    (75, "B"),
    (70, "B-"),
    (65, "C+"),
    (60, "C"),
    (55, "C-"),
    (50, "D+"),
    (45, "D"),
    (40, "D-"),
)

_CATEGORY_THRESHOLDS: tuple[tuple[int, analysis.ScoreCategory], ...] = (
    (80, "Excellent"),
    (65, "Good"),
    (50, "Moderate"),
    (35, "Poor"),
)


def get_grade(score: int) -> analysis.Grade:
    for minimum, grade in _GRADE_THRESHOLDS:
        if score >= minimum:
            return grade
    return "F"


def get_category(score: int) -> analysis.ScoreCategory:
    for minimum, category in _CATEGORY_THRESHOLDS:
        if score >= minimum:
            return category
    return "Very Poor"
