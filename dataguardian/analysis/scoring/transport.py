"""Transport security scoring."""

from __future__ import annotations

from dataguardian.models import analysis
from dataguardian.utils import url as url_mod

MAX_POINTS = 10


def calculate(site_url: str) -> analysis.CategoryScore:
    """Award points when the page is served over ``https://``."""
    if url_mod.is_secure_url(site_url):
        return analysis.CategoryScore(points=MAX_POINTS, max_points=MAX_POINTS)
    return analysis.CategoryScore(
        points=0, max_points=MAX_POINTS, issues=["Site is not served over HTTPS"]
    )
