"""Tests for dataguardian.settings.store and the storage backends."""

from __future__ import annotations

import asyncio
import json
import pathlib
from typing import Any

import pytest

from dataguardian.settings import keys, storage, store
from dataguardian.utils import errors


class _BrokenStorage(storage.MemoryStorage):
    """Storage whose reads and writes always fail."""

    async def get(self, key: str) -> Any | None:
        raise OSError("storage unavailable")

    async def set(self, key: str, value: Any) -> None:
        raise OSError("storage unavailable")


class _ForgetfulStorage(storage.MemoryStorage):
    """Storage that accepts writes but never keeps them."""

    async def set(self, key: str, value: Any) -> None:
        return None


class TestLoadSettings:
    @pytest.mark.asyncio
    async def test_first_access_creates_defaults(
        self, settings_store: store.SiteSettingsStore, memory_storage: storage.MemoryStorage
    ) -> None:
        settings = await settings_store.load_settings("news.example.com")
        assert settings == keys.default_settings()
        assert await memory_storage.get("privacySettings_news.example.com") == keys.default_settings()

    @pytest.mark.asyncio
    async def test_storage_fault_returns_defaults(self) -> None:
        broken = store.SiteSettingsStore(_BrokenStorage())
        assert await broken.load_settings("news.example.com") == keys.default_settings()

    @pytest.mark.asyncio
    async def test_stored_map_is_merged_over_defaults(self, memory_storage: storage.MemoryStorage) -> None:
        await memory_storage.set("privacySettings_a.example", {"blockCookies": True, "bogus": True})
        settings = await store.SiteSettingsStore(memory_storage).load_settings("a.example")
        assert settings["blockCookies"] is True
        assert "bogus" not in settings
        assert settings["blockTrackers"] is False

    @pytest.mark.asyncio
    async def test_hostname_is_normalised(self, settings_store: store.SiteSettingsStore) -> None:
        await settings_store.update_setting("https://News.Example.com/world", "blockCookies", True)
        assert await settings_store.get_setting("news.example.com", "blockCookies") is True


class TestUpdateSetting:
    @pytest.mark.asyncio
    async def test_round_trip(self, settings_store: store.SiteSettingsStore) -> None:
        await settings_store.update_setting("news.example.com", "blockAdvertisingTrackers", True)
        settings = await settings_store.load_settings("news.example.com")
        assert settings["blockAdvertisingTrackers"] is True

    @pytest.mark.asyncio
    async def test_other_hosts_are_unaffected(self, settings_store: store.SiteSettingsStore) -> None:
        await settings_store.load_settings("other.example.com")
        await settings_store.update_setting("news.example.com", "blockTrackers", True)
        assert await settings_store.get_setting("other.example.com", "blockTrackers") is False

    @pytest.mark.asyncio
    async def test_unknown_key_is_rejected(self, settings_store: store.SiteSettingsStore) -> None:
        with pytest.raises(errors.UnknownSettingError):
            await settings_store.update_setting("news.example.com", "blockEverything", True)

    @pytest.mark.asyncio
    async def test_write_failure_raises(self) -> None:
        broken = store.SiteSettingsStore(_BrokenStorage())
        with pytest.raises(errors.SettingsPersistenceError):
            await broken.update_setting("news.example.com", "blockCookies", True)

    @pytest.mark.asyncio
    async def test_unverified_write_raises(self) -> None:
        forgetful = store.SiteSettingsStore(_ForgetfulStorage())
        with pytest.raises(errors.SettingsPersistenceError):
            await forgetful.update_setting("news.example.com", "blockCookies", True)

    @pytest.mark.asyncio
    async def test_concurrent_updates_are_not_lost(self, settings_store: store.SiteSettingsStore) -> None:
        await asyncio.gather(
            *(settings_store.update_setting("news.example.com", key, True) for key in keys.ALL_SETTING_KEYS)
        )
        settings = await settings_store.load_settings("news.example.com")
        assert all(settings.values())

    @pytest.mark.asyncio
    async def test_missing_key_reads_false(self, settings_store: store.SiteSettingsStore) -> None:
        assert await settings_store.get_setting("news.example.com", "notAKey") is False


class TestResetAndClear:
    @pytest.mark.asyncio
    async def test_reset_to_defaults(self, settings_store: store.SiteSettingsStore) -> None:
        await settings_store.update_setting("news.example.com", "blockTrackers", True)
        await settings_store.reset_to_defaults("news.example.com")
        assert await settings_store.load_settings("news.example.com") == keys.default_settings()

    @pytest.mark.asyncio
    async def test_clear_all_removes_only_settings_entries(
        self, settings_store: store.SiteSettingsStore, memory_storage: storage.MemoryStorage
    ) -> None:
        await memory_storage.set("siteAnalysis_https://a.example", {"url": "https://a.example"})
        await settings_store.update_setting("a.example", "blockCookies", True)
        await settings_store.update_setting("b.example", "blockCookies", True)

        removed = await settings_store.clear_all()

        assert removed == 2
        assert await memory_storage.keys() == ["siteAnalysis_https://a.example"]
        assert await settings_store.list_hostnames() == []


class TestJsonFileStorage:
    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "state" / "settings.json"
        first = store.SiteSettingsStore(storage.JsonFileStorage(path))
        await first.update_setting("news.example.com", "blockSocialTrackers", True)

        second = store.SiteSettingsStore(storage.JsonFileStorage(path))
        assert await second.get_setting("news.example.com", "blockSocialTrackers") is True
        assert "privacySettings_news.example.com" in json.loads(path.read_text(encoding="utf-8"))

    @pytest.mark.asyncio
    async def test_corrupt_file_falls_back_to_defaults(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        corrupt = store.SiteSettingsStore(storage.JsonFileStorage(path))
        assert await corrupt.load_settings("news.example.com") == keys.default_settings()

    @pytest.mark.asyncio
    async def test_remove(self, tmp_path: pathlib.Path) -> None:
        backend = storage.JsonFileStorage(tmp_path / "kv.json")
        await backend.set("a", 1)
        await backend.remove("a")
        assert await backend.get("a") is None
        assert await backend.keys() == []
