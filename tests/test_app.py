"""Tests for the HTTP API in dataguardian.app."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from dataguardian import app as app_mod
from dataguardian import config as config_mod
from dataguardian.analysis import scoring
from dataguardian.models import analysis, tracking
from dataguardian.pipeline import analysis_pipeline
from dataguardian.settings import storage

_TRACKERS = ["www.google-analytics.com", "securepubads.g.doubleclick.net", "static.hotjar.com"]


async def _fake_detect(url: str, config: config_mod.DataGuardianConfig) -> tracking.DetectionResult:
    return tracking.DetectionResult(all_resources=["www.news.example", *_TRACKERS], detected_trackers=list(_TRACKERS))


async def _failing_detect(url: str, config: config_mod.DataGuardianConfig) -> tracking.DetectionResult:
    raise RuntimeError("browser crashed")


@pytest.fixture()
def summarize(successful_summary: analysis.AISummaryResult):
    async def fake(trackers: list[str], site_url: str) -> analysis.AISummaryResult:
        return successful_summary.model_copy(update={"tracker_count": len(trackers)})

    return fake


@pytest.fixture()
def client(summarize) -> TestClient:
    application = app_mod.create_app(
        config=config_mod.DataGuardianConfig(),
        storage=storage.MemoryStorage(),
        detect_fn=_fake_detect,
        summarize_fn=summarize,
    )
    return TestClient(application)


def _analyze(client: TestClient, url: str = "https://www.news.example/", policy: str | None = None):
    return client.post("/api/sites/analyze", json={"url": url, "simplifiedPolicy": policy})


class TestAnalyze:
    def test_creates_site(self, client: TestClient, successful_summary: analysis.AISummaryResult) -> None:
        response = _analyze(client, policy="We never sell your data. You can opt-out at any time.")
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Site analyzed successfully"

        site = body["site"]
        expected = scoring.score(
            "https://www.news.example/",
            "We never sell your data. You can opt-out at any time.",
            len(_TRACKERS),
            successful_summary,
        )
        assert site["trackers"] == _TRACKERS
        assert site["trackerCount"] == 3
        assert site["score"] == expected
        assert site["grade"] == scoring.get_grade(expected)
        assert site["category"] == scoring.get_category(expected)
        assert site["aiSummary"]["success"] is True
        assert "trackers)." in site["summary"]

    def test_rejects_relative_url(self, client: TestClient) -> None:
        response = _analyze(client, url="www.news.example")
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_missing_url(self, client: TestClient) -> None:
        response = client.post("/api/sites/analyze", json={})
        assert response.status_code == 400
        assert "url" in response.json()["error"]

    def test_reanalysis_replaces_record(self, client: TestClient) -> None:
        _analyze(client)
        _analyze(client, policy="We sell your data to third parties.")
        sites = client.get("/api/sites").json()
        assert len(sites) == 1
        assert sites[0]["simplifiedPolicy"] == "We sell your data to third parties."

    def test_pipeline_failure(self, summarize) -> None:
        application = app_mod.create_app(
            storage=storage.MemoryStorage(), detect_fn=_failing_detect, summarize_fn=summarize
        )
        response = TestClient(application).post("/api/sites/analyze", json={"url": "https://a.example/"})
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "browser crashed"}


class TestSiteViews:
    def test_get_site(self, client: TestClient) -> None:
        _analyze(client)
        response = client.get("/api/sites/site", params={"url": "https://www.news.example/"})
        assert response.status_code == 200
        assert response.json()["url"] == "https://www.news.example/"

    def test_unknown_site(self, client: TestClient) -> None:
        for path in ("/api/sites/site", "/api/sites/network-graph", "/api/sites/ai-summary"):
            response = client.get(path, params={"url": "https://missing.example/"})
            assert response.status_code == 404
            assert response.json() == {"success": False, "error": "Site not found"}

    def test_network_graph(self, client: TestClient) -> None:
        _analyze(client)
        graph = client.get("/api/sites/network-graph", params={"url": "https://www.news.example/"}).json()
        assert len(graph["nodes"]) == 4
        assert len(graph["links"]) == 3
        assert graph["nodes"][0]["type"] == "site"

    def test_ai_summary(self, client: TestClient) -> None:
        _analyze(client)
        body = client.get("/api/sites/ai-summary", params={"url": "https://www.news.example/"}).json()
        assert body["trackerCount"] == 3
        assert body["aiSummary"]["summary"]["whoTheyShareWith"] == ["Google", "Chartbeat"]


class TestRepository:
    @pytest.mark.asyncio
    async def test_list_all_newest_first(self, summarize) -> None:
        repository = analysis_pipeline.SiteRepository(storage.MemoryStorage())
        cfg = config_mod.DataGuardianConfig()
        await analysis_pipeline.analyze_site(
            "https://a.example/", None, repository, cfg, detect_fn=_fake_detect, summarize_fn=summarize
        )
        await analysis_pipeline.analyze_site(
            "https://b.example/", None, repository, cfg, detect_fn=_fake_detect, summarize_fn=summarize
        )
        sites = await repository.list_all()
        assert {s.url for s in sites} == {"https://a.example/", "https://b.example/"}
        assert sites[0].last_analyzed >= sites[1].last_analyzed
        assert await repository.get("https://c.example/") is None
