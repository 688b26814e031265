"""Tests for dataguardian.blocking.interceptor."""

from __future__ import annotations

import pytest

from dataguardian.blocking import installer, interceptor
from dataguardian.settings import keys


def _settings(**flags: bool) -> dict[str, bool]:
    return {**keys.default_settings(), **flags}


class TestShouldBlock:
    @pytest.mark.asyncio
    async def test_blocks_enabled_category(
        self, rule_manager: installer.RuleManager, request_interceptor: interceptor.RequestInterceptor
    ) -> None:
        await rule_manager.sync(_settings(blockAdvertisingTrackers=True))
        assert request_interceptor.should_block("https://securepubads.g.doubleclick.net/tag/js/gpt.js", tab_id=3)
        assert not request_interceptor.should_block("https://www.google-analytics.com/analytics.js", tab_id=3)
        assert not request_interceptor.should_block("https://example.com/app.js", tab_id=3)

    @pytest.mark.asyncio
    async def test_resource_type_is_respected(
        self, rule_manager: installer.RuleManager, request_interceptor: interceptor.RequestInterceptor
    ) -> None:
        await rule_manager.sync(_settings(blockAnalyticsTrackers=True))
        url = "https://static.hotjar.com/c/hotjar.js"
        assert request_interceptor.should_block(url, resource_type="script")
        assert not request_interceptor.should_block(url, resource_type="sub_frame")

    @pytest.mark.asyncio
    async def test_specific_rule_wins_over_catch_all(
        self, rule_manager: installer.RuleManager, request_interceptor: interceptor.RequestInterceptor
    ) -> None:
        await rule_manager.sync(_settings(blockTrackers=True, blockSocialTrackers=True))
        rule = request_interceptor.matching_rule("https://connect.facebook.net/en_US/fbevents.js")
        assert rule is not None
        assert rule.priority == 2

    def test_nothing_blocked_without_rules(self, request_interceptor: interceptor.RequestInterceptor) -> None:
        assert not request_interceptor.should_block("https://doubleclick.net/")


class TestBlockedCount:
    @pytest.mark.asyncio
    async def test_counts_per_tab(
        self, rule_manager: installer.RuleManager, request_interceptor: interceptor.RequestInterceptor
    ) -> None:
        await rule_manager.sync(_settings(blockTrackers=True))
        request_interceptor.should_block("https://ib.adnxs.com/ut/v3", tab_id=1)
        request_interceptor.should_block("https://cdn.taboola.com/libtrc/loader.js", tab_id=1)
        request_interceptor.should_block("https://api.mixpanel.com/track", tab_id=2)
        request_interceptor.should_block("https://example.com/", tab_id=2)

        assert request_interceptor.blocked_count(1) == 2
        assert request_interceptor.blocked_count(2) == 1
        assert request_interceptor.blocked_count(99) == 0
        assert request_interceptor.blocked_urls(2) == ["https://api.mixpanel.com/track"]

        request_interceptor.reset_tab(1)
        assert request_interceptor.blocked_count(1) == 0
