"""
Per-site privacy settings store.

Settings are scoped by hostname and persisted as one storage entry
per site (``privacySettings_<hostname>``) holding the full settings
map.  Reads never fail: a storage fault yields the all-false defaults.
Writes are read-modify-write under a per-hostname lock and are
re-read afterwards so callers only see success once the value stuck.
"""

from __future__ import annotations

import asyncio

from dataguardian.settings import keys
from dataguardian.settings import storage as storage_mod
from dataguardian.utils import errors, logger
from dataguardian.utils import url as url_mod

log = logger.create_logger("SettingsStore")

SettingsMap = dict[str, bool]


def _merge_over_defaults(stored: object) -> SettingsMap:
    """Overlay the known boolean keys of *stored* on the defaults."""
    merged = keys.default_settings()
    if isinstance(stored, dict):
        for key, value in stored.items():
            if key in merged and isinstance(value, bool):
                merged[key] = value
    return merged


class SiteSettingsStore:
    """Hostname-scoped settings over a :class:`KeyValueStorage`."""

    def __init__(self, storage: storage_mod.KeyValueStorage) -> None:
        self._storage = storage
        self._host_locks: dict[str, asyncio.Lock] = {}
        self._global_lock = asyncio.Lock()

    def _lock_for(self, hostname: str) -> asyncio.Lock:
        lock = self._host_locks.get(hostname)
        if lock is None:
            lock = asyncio.Lock()
            self._host_locks[hostname] = lock
        return lock

    async def _read(self, hostname: str) -> object:
        return await self._storage.get(keys.storage_key(hostname))

    # ── Reads ───────────────────────────────────────────────

    async def load_settings(self, hostname: str) -> SettingsMap:
        """Return *hostname*'s settings, creating defaults on first access.

        Storage faults are logged and answered with defaults.
        """
        host = url_mod.site_hostname(hostname)
        try:
            stored = await self._read(host)
        except Exception as exc:
            log.error("Failed to load settings", {"hostname": host, "error": errors.get_error_message(exc)})
            return keys.default_settings()

        if stored is None:
            defaults = keys.default_settings()
            try:
                await self._storage.set(keys.storage_key(host), defaults)
                log.debug("Initialised default settings", {"hostname": host})
            except Exception as exc:
                log.warn("Failed to persist default settings", {"hostname": host, "error": errors.get_error_message(exc)})
            return defaults

        return _merge_over_defaults(stored)

    async def get_setting(self, hostname: str, key: str) -> bool:
        """Return one flag; ``False`` when it was never set."""
        settings = await self.load_settings(hostname)
        return settings.get(key, False)

    # ── Writes ──────────────────────────────────────────────

    async def update_setting(self, hostname: str, key: str, value: bool) -> SettingsMap:
        """Persist ``key = value`` for *hostname* and return the verified map.

        Raises:
            UnknownSettingError: If *key* is not a known setting key.
            SettingsPersistenceError: If the write fails or does not read back.
        """
        if not keys.is_known_key(key):
            raise errors.UnknownSettingError(f"Unknown setting: {key}")

        host = url_mod.site_hostname(hostname)
        async with self._lock_for(host):
            try:
                current = _merge_over_defaults(await self._read(host))
                current[key] = bool(value)
                await self._storage.set(keys.storage_key(host), current)
                verified = _merge_over_defaults(await self._read(host))
            except Exception as exc:
                log.error("Failed to save setting", {"hostname": host, "setting": key, "error": errors.get_error_message(exc)})
                raise errors.SettingsPersistenceError(f"Failed to save {key} for {host}") from exc

            if verified.get(key) != bool(value):
                log.error("Setting did not persist", {"hostname": host, "setting": key})
                raise errors.SettingsPersistenceError(f"Setting {key} for {host} did not persist")

        log.info("Setting updated", {"hostname": host, "setting": key, "value": bool(value)})
        return verified

    async def reset_to_defaults(self, hostname: str) -> SettingsMap:
        """Overwrite *hostname*'s settings with all-false defaults."""
        host = url_mod.site_hostname(hostname)
        defaults = keys.default_settings()
        async with self._lock_for(host):
            try:
                await self._storage.set(keys.storage_key(host), defaults)
            except Exception as exc:
                raise errors.SettingsPersistenceError(f"Failed to reset settings for {host}") from exc
        log.info("Settings reset to defaults", {"hostname": host})
        return defaults

    async def clear_all(self) -> int:
        """Remove every stored site's settings; returns how many were removed."""
        async with self._global_lock:
            try:
                stored_keys = await self._storage.keys()
                settings_keys = [k for k in stored_keys if k.startswith(keys.SETTINGS_KEY_PREFIX)]
                for key in settings_keys:
                    await self._storage.remove(key)
            except Exception as exc:
                raise errors.SettingsPersistenceError("Failed to clear settings") from exc
        log.info("All site settings cleared", {"sites": len(settings_keys)})
        return len(settings_keys)

    async def list_hostnames(self) -> list[str]:
        """Hostnames that currently have stored settings."""
        stored_keys = await self._storage.keys()
        prefix = keys.SETTINGS_KEY_PREFIX
        return [key[len(prefix):] for key in stored_keys if key.startswith(prefix)]
