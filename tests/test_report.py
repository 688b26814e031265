"""Tests for dataguardian.analysis.report."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from dataguardian.analysis import report, taxonomy
from dataguardian.models import analysis


def _site(score: int, trackers: list[str], ai_summary: analysis.AISummaryResult | None = None) -> analysis.SiteAnalysis:
    return analysis.SiteAnalysis(
        url="https://www.news.example/",
        trackers=trackers,
        tracker_details=taxonomy.classify_all(trackers),
        score=score,
        grade="B",
        category="Good",
        ai_summary=ai_summary,
        last_analyzed=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


class TestUserFriendlySummary:
    @pytest.mark.parametrize(
        ("score", "phrase"),
        [
            (92, "excellent privacy practices"),
            (70, "good privacy practices"),
            (55, "moderate privacy practices"),
            (40, "poor privacy practices"),
            (10, "very poor privacy practices"),
        ],
    )
    def test_score_bands(self, score: int, phrase: str) -> None:
        text = report.generate_user_friendly_summary(_site(score, ["a.tracker.example"]))
        assert phrase in text
        assert "(1 trackers)" in text

    def test_names_recipients(self, successful_summary: analysis.AISummaryResult) -> None:
        text = report.generate_user_friendly_summary(_site(70, [], successful_summary))
        assert text.endswith(" Your data may be shared with Google, Chartbeat.")

    def test_collapses_long_recipient_list(self, successful_summary: analysis.AISummaryResult) -> None:
        summary = successful_summary.model_copy(
            update={
                "summary": successful_summary.summary.model_copy(
                    update={"who_they_share_with": ["A", "B", "C", "D", "E"]}
                )
            }
        )
        text = report.generate_user_friendly_summary(_site(70, [], summary))
        assert text.endswith(" Your data may be shared with A, B, C and 2 others.")

    def test_fallback_summary_names_nobody(self, successful_summary: analysis.AISummaryResult) -> None:
        failed = successful_summary.model_copy(update={"success": False})
        text = report.generate_user_friendly_summary(_site(70, [], failed))
        assert "shared with" not in text


class TestNetworkGraph:
    def test_star_shape(self) -> None:
        trackers = ["www.google-analytics.com", "unknown-thing.example"]
        graph = report.build_network_graph(_site(60, trackers))

        site_node, *tracker_nodes = graph.nodes
        assert site_node.type == "site"
        assert site_node.label == "www.news.example"
        assert site_node.score == 60
        assert [n.id for n in tracker_nodes] == trackers
        assert tracker_nodes[0].company == "Google"
        assert tracker_nodes[1].category == "Unknown"
        assert [(link.source, link.target) for link in graph.links] == [
            ("https://www.news.example/", tracker) for tracker in trackers
        ]

    def test_carries_ai_summary(self, successful_summary: analysis.AISummaryResult) -> None:
        graph = report.build_network_graph(_site(60, [], successful_summary))
        assert graph.summary == successful_summary
        assert graph.links == []
