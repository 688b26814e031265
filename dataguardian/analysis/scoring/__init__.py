"""Privacy scoring package.

Decomposes the privacy score into one module per scoring step.  The
public API is :func:`calculate_privacy_score`, :func:`score`,
:func:`rescore` and the grading helpers.
"""

from __future__ import annotations

from dataguardian.analysis.scoring.calculator import calculate_privacy_score, rescore, score
from dataguardian.analysis.scoring.grading import get_category, get_grade

__all__ = ["calculate_privacy_score", "get_category", "get_grade", "rescore", "score"]
