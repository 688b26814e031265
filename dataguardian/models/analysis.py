"""Pydantic models for AI summaries, scoring results and stored site analyses."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

import pydantic

from dataguardian.models import tracking
from dataguardian.utils import serialization

Grade = Literal["A+", "A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D+", "D", "D-", "F"]

ScoreCategory = Literal["Excellent", "Good", "Moderate", "Poor", "Very Poor"]


class AISummary(pydantic.BaseModel):
    """Structured privacy summary for a site's trackers."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    what_they_collect: list[str] = pydantic.Field(default_factory=list)
    who_they_share_with: list[str] = pydantic.Field(default_factory=list)
    how_long_they_keep: str = "Information not available"
    key_risks: list[str] = pydantic.Field(default_factory=list)
    tracker_breakdown: list[str] = pydantic.Field(default_factory=list)


class AISummaryResult(pydantic.BaseModel):
    """Outcome of the AI summary step.

    ``success`` is ``False`` whenever ``summary`` is the deterministic
    fallback; ``note`` then says why.
    """

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    success: bool
    summary: AISummary
    note: str | None = None
    tracker_count: int = 0
    tracker_details: list[tracking.TrackerRecord] = pydantic.Field(default_factory=list)
    raw_response: str | None = pydantic.Field(default=None, exclude=True)


class CategoryScore(pydantic.BaseModel):
    """Points contributed by a single scoring step."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    points: int = 0
    max_points: int = 0
    issues: list[str] = pydantic.Field(default_factory=list)


class ScoreBreakdown(pydantic.BaseModel):
    """Per-step points of the privacy score before and after clamping."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    tracker_points: int = 0
    transport_points: int = 0
    policy_points: int = 0
    ai_risk_points: int = 0
    raw_total: int = 0
    total_score: int = 0
    factors: list[str] = pydantic.Field(default_factory=list)


class RescoreResult(pydantic.BaseModel):
    """Live score after applying a site's blocking settings."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    score: int
    grade: Grade
    unblocked_count: int
    blocked_count: int
    protection_level: int


class SiteAnalysis(pydantic.BaseModel):
    """The stored result of analysing one URL (the URL is the natural key)."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    url: str
    trackers: list[str] = pydantic.Field(default_factory=list)
    tracker_details: list[tracking.TrackerRecord] = pydantic.Field(default_factory=list)
    score: int = pydantic.Field(default=0, ge=0, le=100)
    grade: Grade = "F"
    category: ScoreCategory = "Very Poor"
    simplified_policy: str = ""
    ai_summary: AISummaryResult | None = None
    last_analyzed: datetime


class NetworkNode(pydantic.BaseModel):
    """A site or tracker node in the tracker network graph."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    id: str
    type: Literal["site", "tracker"]
    label: str
    category: str
    company: str | None = None
    score: int | None = None


class NetworkLink(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    source: str
    target: str
    type: str


class NetworkGraph(pydantic.BaseModel):
    """Star graph from a site to each of its trackers."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    nodes: list[NetworkNode] = pydantic.Field(default_factory=list)
    links: list[NetworkLink] = pydantic.Field(default_factory=list)
    summary: AISummaryResult | None = None
