"""
Setting keys for site-scoped privacy settings.

Each tracker category gets a ``block<Category>Trackers`` flag whose
middle part is the category's display name with everything but
letters and digits removed (``CDN/Utility`` -> ``blockCDNUtilityTrackers``).
Three legacy flags from earlier releases are kept alongside:
``blockTrackers`` acts as a catch-all over every category.
"""

from __future__ import annotations

import re

from dataguardian.models import tracking
from dataguardian.utils import errors

SETTINGS_KEY_PREFIX = "privacySettings_"

BLOCK_NOTIFICATIONS = "blockNotifications"
BLOCK_COOKIES = "blockCookies"
BLOCK_TRACKERS = "blockTrackers"

LEGACY_SETTING_KEYS: tuple[str, ...] = (BLOCK_NOTIFICATIONS, BLOCK_COOKIES, BLOCK_TRACKERS)

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def setting_key(category: str) -> str:
    """Return the setting key controlling *category*."""
    return f"block{_NON_ALNUM.sub('', category)}Trackers"


def _build_category_keys(
    categories: tuple[str, ...],
) -> dict[str, str]:
    """Map each category to its key, failing when two categories collide.

    Raises:
        SettingKeyCollisionError: If two categories (or a category and
            a legacy flag) derive the same key.
    """
    keys: dict[str, str] = {}
    owners: dict[str, str] = {key: "legacy" for key in LEGACY_SETTING_KEYS}
    for category in categories:
        key = setting_key(category)
        if key in owners:
            raise errors.SettingKeyCollisionError(
                f"Categories '{owners[key]}' and '{category}' both map to '{key}'"
            )
        owners[key] = category
        keys[category] = key
    return keys


CATEGORY_SETTING_KEYS: dict[str, str] = _build_category_keys(tracking.TRACKER_CATEGORIES)

_KEY_TO_CATEGORY: dict[str, str] = {key: category for category, key in CATEGORY_SETTING_KEYS.items()}

ALL_SETTING_KEYS: tuple[str, ...] = (*CATEGORY_SETTING_KEYS.values(), *LEGACY_SETTING_KEYS)


def default_settings() -> dict[str, bool]:
    """A fresh all-false settings map."""
    return {key: False for key in ALL_SETTING_KEYS}


def is_known_key(key: str) -> bool:
    return key in ALL_SETTING_KEYS


def category_for_key(key: str) -> str | None:
    """The category a per-category key controls, or ``None`` for legacy/unknown keys."""
    return _KEY_TO_CATEGORY.get(key)


def storage_key(hostname: str) -> str:
    """Storage entry name for *hostname*'s settings."""
    return f"{SETTINGS_KEY_PREFIX}{hostname}"


def is_category_blocked(settings: dict[str, bool], category: str) -> bool:
    """True when *category* is blocked directly or by the catch-all flag."""
    if settings.get(BLOCK_TRACKERS, False):
        return True
    return bool(settings.get(setting_key(category), False))
