"""Shared fixtures for the test suite."""

from __future__ import annotations

import pytest

from dataguardian.blocking import installer, interceptor
from dataguardian.messaging import channel
from dataguardian.models import analysis, tracking
from dataguardian.settings import storage, store

# ── Tracker Factories ───────────────────────────────────────────


def _record(
    domain: str,
    category: tracking.TrackerCategory = "Advertising",
    company: str = "Unknown",
) -> tracking.TrackerRecord:
    return tracking.TrackerRecord(
        domain=domain,
        name=domain,
        category=category,
        company=company,
        purpose="Data collection and tracking",
    )


@pytest.fixture()
def news_site_records() -> list[tracking.TrackerRecord]:
    """Ten trackers: six advertising, four analytics."""
    ads = [
        _record("securepubads.g.doubleclick.net", "Advertising", "Google"),
        _record("pagead2.googlesyndication.com", "Advertising", "Google"),
        _record("c.amazon-adsystem.com", "Advertising", "Amazon"),
        _record("static.criteo.net", "Advertising", "Criteo"),
        _record("cdn.taboola.com", "Advertising", "Taboola"),
        _record("ib.adnxs.com", "Advertising", "Microsoft"),
    ]
    analytics_records = [
        _record("www.google-analytics.com", "Analytics", "Google"),
        _record("cdn.mxpnl.mixpanel.com", "Analytics", "Mixpanel"),
        _record("static.hotjar.com", "Analytics", "Hotjar"),
        _record("sb.scorecardresearch.com", "Analytics", "Comscore"),
    ]
    return ads + analytics_records


@pytest.fixture()
def successful_summary() -> analysis.AISummaryResult:
    """A successful AI summary with two risks and one watch-listed recipient."""
    return analysis.AISummaryResult(
        success=True,
        summary=analysis.AISummary(
            what_they_collect=["Page views"],
            who_they_share_with=["Google", "Chartbeat"],
            how_long_they_keep="13 months",
            key_risks=["Cross-site tracking", "Profiling"],
            tracker_breakdown=["google-analytics.com: analytics"],
        ),
    )


# ── Settings and Blocking ───────────────────────────────────────


@pytest.fixture()
def memory_storage() -> storage.MemoryStorage:
    return storage.MemoryStorage()


@pytest.fixture()
def settings_store(memory_storage: storage.MemoryStorage) -> store.SiteSettingsStore:
    return store.SiteSettingsStore(memory_storage)


@pytest.fixture()
def rule_installer() -> installer.MemoryRuleInstaller:
    return installer.MemoryRuleInstaller()


@pytest.fixture()
def rule_manager(rule_installer: installer.MemoryRuleInstaller) -> installer.RuleManager:
    return installer.RuleManager(rule_installer)


@pytest.fixture()
def request_interceptor(rule_manager: installer.RuleManager) -> interceptor.RequestInterceptor:
    return interceptor.RequestInterceptor(rule_manager)


@pytest.fixture()
def message_channel(
    settings_store: store.SiteSettingsStore,
    rule_manager: installer.RuleManager,
    request_interceptor: interceptor.RequestInterceptor,
) -> channel.MessageChannel:
    return channel.MessageChannel(settings_store, rule_manager, request_interceptor)
