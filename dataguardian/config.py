"""
Runtime configuration for detection, settings storage and the HTTP surface.

Uses ``pydantic_settings.BaseSettings`` so every field can be overridden
from the environment (``DATAGUARDIAN_<FIELD>``) or a ``.env`` file.
"""

from __future__ import annotations

import pydantic
import pydantic_settings


class DataGuardianConfig(pydantic_settings.BaseSettings):
    """Configuration for the analysis pipeline and extension backend.

    Attributes:
        fetch_timeout_ms: Upper bound for the static HTML fetch.
        navigation_timeout_ms: Upper bound for live-browser navigation.
        settle_delay_ms: Pause after each simulated interaction.
        live_detection: Use the Playwright session instead of a static fetch.
        headless: Launch the live browser headless.
        settings_path: JSON file backing the settings store; in-memory when unset.
        host: Bind address for the HTTP server.
        port: Port for the HTTP server.
    """

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix="DATAGUARDIAN_", env_file=".env", extra="ignore"
    )

    fetch_timeout_ms: int = pydantic.Field(default=10000, gt=0)
    navigation_timeout_ms: int = pydantic.Field(default=30000, gt=0)
    settle_delay_ms: int = pydantic.Field(default=1500, ge=0)
    live_detection: bool = False
    headless: bool = True
    settings_path: str | None = None
    host: str = "0.0.0.0"
    port: int = 5000
    environment: str = pydantic.Field(default="development", validation_alias="ENVIRONMENT")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
