"""Tests for dataguardian.blocking.compiler — rule compilation and matching."""

from __future__ import annotations

import pytest

from dataguardian.blocking import compiler, patterns
from dataguardian.models import blocking
from dataguardian.settings import keys


def _settings(**flags: bool) -> dict[str, bool]:
    return {**keys.default_settings(), **flags}


_TOTAL_PATTERNS = sum(len(p) for p in patterns.CATEGORY_PATTERNS.values())


class TestCompileRules:
    def test_nothing_enabled(self) -> None:
        assert compiler.compile_rules(keys.default_settings()) == []

    def test_single_category(self) -> None:
        rules = compiler.compile_rules(_settings(blockAdvertisingTrackers=True))
        assert [r.domain_pattern for r in rules] == list(patterns.CATEGORY_PATTERNS["Advertising"])
        assert [r.id for r in rules] == list(range(1, len(rules) + 1))
        assert {r.priority for r in rules} == {patterns.SPECIFIC_RULE_PRIORITY}
        assert all(r.resource_types == ("script", "xmlhttprequest", "image", "sub_frame") for r in rules)

    def test_analytics_resource_types(self) -> None:
        rules = compiler.compile_rules(_settings(blockAnalyticsTrackers=True))
        assert all(r.resource_types == ("script", "xmlhttprequest", "image") for r in rules)

    def test_categories_follow_canonical_order(self) -> None:
        rules = compiler.compile_rules(_settings(blockSocialTrackers=True, blockAdvertisingTrackers=True))
        ad_count = len(patterns.CATEGORY_PATTERNS["Advertising"])
        assert rules[0].domain_pattern == "*://*.doubleclick.net/*"
        assert rules[ad_count].domain_pattern == "*://*.facebook.net/*"

    def test_catch_all_only(self) -> None:
        rules = compiler.compile_rules(_settings(blockTrackers=True))
        assert len(rules) == _TOTAL_PATTERNS
        assert {r.priority for r in rules} == {patterns.CATCH_ALL_RULE_PRIORITY}
        assert all(r.resource_types == patterns.ALL_RESOURCE_TYPES for r in rules)

    def test_catch_all_skips_patterns_already_emitted(self) -> None:
        rules = compiler.compile_rules(_settings(blockTrackers=True, blockAdvertisingTrackers=True))
        ad_count = len(patterns.CATEGORY_PATTERNS["Advertising"])
        assert len(rules) == _TOTAL_PATTERNS
        assert len({r.domain_pattern for r in rules}) == len(rules)
        assert all(r.priority == patterns.SPECIFIC_RULE_PRIORITY for r in rules[:ad_count])
        assert all(r.priority == patterns.CATCH_ALL_RULE_PRIORITY for r in rules[ad_count:])

    def test_catch_all_has_lower_priority(self) -> None:
        assert patterns.CATCH_ALL_RULE_PRIORITY < patterns.SPECIFIC_RULE_PRIORITY

    def test_ids_are_unique_and_sequential(self) -> None:
        rules = compiler.compile_rules({key: True for key in keys.ALL_SETTING_KEYS})
        assert [r.id for r in rules] == list(range(1, len(rules) + 1))

    def test_idempotent(self) -> None:
        settings = _settings(blockAnalyticsTrackers=True, blockTrackers=True)
        assert compiler.compile_rules(settings) == compiler.compile_rules(dict(settings))

    def test_legacy_non_tracker_flags_emit_nothing(self) -> None:
        assert compiler.compile_rules(_settings(blockCookies=True, blockNotifications=True)) == []


class TestDiffRules:
    def test_counts_ignore_ids(self) -> None:
        before = compiler.compile_rules(_settings(blockAdvertisingTrackers=True))
        after = compiler.compile_rules(_settings(blockAdvertisingTrackers=True, blockSocialTrackers=True))
        added, removed = compiler.diff_rules(before, after)
        assert added == len(patterns.CATEGORY_PATTERNS["Social"])
        assert removed == 0


class TestPatternMatching:
    @pytest.mark.parametrize(
        ("pattern", "url"),
        [
            ("*://*.doubleclick.net/*", "https://securepubads.g.doubleclick.net/tag/js/gpt.js"),
            ("*://*.doubleclick.net/*", "http://doubleclick.net/"),
            ("*://*.doubleclick.net/*", "https://doubleclick.net"),
            ("*://*.doubleclick.net/*", "https://ad.doubleclick.net:8443/ddm/activity?x=1"),
            ("*://*.linkedin.com/analytics/*", "https://px.linkedin.com/analytics/collect"),
            ("*://*.tiktok.com/track/*", "https://analytics.tiktok.com/track/pixel"),
            ("*://*.Hotjar.com/*", "https://static.hotjar.com/c/hotjar-1.js"),
        ],
    )
    def test_matches(self, pattern: str, url: str) -> None:
        assert compiler.pattern_to_regex(pattern).match(compiler._normalize_url(url))

    @pytest.mark.parametrize(
        ("pattern", "url"),
        [
            ("*://*.doubleclick.net/*", "https://notdoubleclick.net/x"),
            ("*://*.doubleclick.net/*", "https://doubleclick.net.evil.example/x"),
            ("*://*.linkedin.com/analytics/*", "https://www.linkedin.com/in/someone"),
            ("*://*.tiktok.com/track/*", "https://www.tiktok.com/@user"),
        ],
    )
    def test_does_not_match(self, pattern: str, url: str) -> None:
        assert not compiler.pattern_to_regex(pattern).match(compiler._normalize_url(url))

    def test_rule_matches_checks_resource_type(self) -> None:
        rule = blocking.BlockRule(
            id=1, priority=2, domain_pattern="*://*.hotjar.com/*", resource_types=("script",)
        )
        assert compiler.rule_matches(rule, "https://static.hotjar.com/c.js", "script")
        assert not compiler.rule_matches(rule, "https://static.hotjar.com/c.js", "image")
        assert compiler.rule_matches(rule, "https://static.hotjar.com/c.js")
