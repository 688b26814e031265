"""Privacy-policy keyword scoring.

The simplified policy text is scanned (case-insensitively) for
privacy-positive and privacy-negative phrases.  Only presence counts:
a phrase repeated ten times scores the same as once.
"""

from __future__ import annotations

from dataguardian.models import analysis

POSITIVE_KEYWORDS: tuple[str, ...] = (
    "encrypted",
    "no data sharing",
    "gdpr",
    "privacy focused",
    "user control",
    "opt-out",
    "delete data",
    "minimal collection",
)

NEGATIVE_KEYWORDS: tuple[str, ...] = (
    "sell data",
    "third party",
    "advertisers",
    "share data",
    "indefinitely",
    "partners",
    "affiliates",
    "marketing",
)

POSITIVE_POINTS = 4
NEGATIVE_POINTS = 3


def calculate(simplified_policy: str | None) -> analysis.CategoryScore:
    """Score *simplified_policy*; ``None`` is treated as an empty policy."""
    text = (simplified_policy or "").lower()
    positives = [keyword for keyword in POSITIVE_KEYWORDS if keyword in text]
    negatives = [keyword for keyword in NEGATIVE_KEYWORDS if keyword in text]

    points = POSITIVE_POINTS * len(positives) - NEGATIVE_POINTS * len(negatives)
    issues = [f"Policy mentions '{keyword}'" for keyword in negatives]
    return analysis.CategoryScore(
        points=points,
        max_points=POSITIVE_POINTS * len(POSITIVE_KEYWORDS),
        issues=issues,
    )
