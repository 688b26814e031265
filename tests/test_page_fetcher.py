"""Tests for dataguardian.browser.page_fetcher."""

from __future__ import annotations

from unittest import mock

import aiohttp
import pytest

from dataguardian.browser import page_fetcher


class TestExtractResources:
    def test_collects_each_tag_kind(self) -> None:
        html = """
        <html><head>
          <script src="https://www.googletagmanager.com/gtm.js"></script>
          <script>inline()</script>
          <link rel="preconnect" href="https://fonts.googleapis.com">
        </head><body>
          <img src="/logo.png" alt="">
          <img alt="no source">
          <iframe src="https://www.youtube.com/embed/x"></iframe>
        </body></html>
        """
        resources = page_fetcher.extract_resources(html)
        assert [(r.tag_kind, r.url) for r in resources] == [
            ("script", "https://www.googletagmanager.com/gtm.js"),
            ("img", "/logo.png"),
            ("iframe", "https://www.youtube.com/embed/x"),
            ("link", "https://fonts.googleapis.com"),
        ]

    def test_blank_attributes_are_skipped(self) -> None:
        resources = page_fetcher.extract_resources('<script src="   "></script><img src="">')
        assert resources == []

    def test_malformed_html_does_not_raise(self) -> None:
        resources = page_fetcher.extract_resources('<div><script src="https://cdn.example.com/a.js"><p>')
        assert [r.url for r in resources] == ["https://cdn.example.com/a.js"]


class _FailingSession:
    """Mimics aiohttp.ClientSession where every request fails to connect."""

    def __init__(self, *args: object, **kwargs: object) -> None:
        pass

    async def __aenter__(self) -> _FailingSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    def get(self, url: str) -> object:
        raise aiohttp.ClientConnectionError("Cannot connect to host")


class TestFetchPageHtml:
    @pytest.mark.asyncio
    async def test_network_error_returns_none(self) -> None:
        with mock.patch.object(page_fetcher.aiohttp, "ClientSession", _FailingSession):
            assert await page_fetcher.fetch_page_html("https://unreachable.invalid") is None
