"""Pydantic models for the settings messaging protocol."""

from __future__ import annotations

from typing import Any, Literal

import pydantic

from dataguardian.utils import serialization

MessageType = Literal[
    "GET_SETTINGS",
    "UPDATE_SETTING",
    "RESET_TO_DEFAULTS",
    "CLEAR_ALL_SETTINGS",
    "PRIVACY_SETTING_CHANGED",
    "GET_BLOCKED_COUNT",
]


class Message(pydantic.BaseModel):
    """A request sent across extension contexts.

    ``hostname`` and ``tab_id`` carry the site/tab context
    explicitly; site-scoped message types require ``hostname``.
    """

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    type: str
    hostname: str | None = None
    tab_id: int | None = None
    setting: str | None = None
    value: bool | None = None


class MessageResponse(pydantic.BaseModel):
    """Reply to a :class:`Message`; ``payload`` is flattened on the wire."""

    success: bool
    error: str | None = None
    payload: dict[str, Any] = pydantic.Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        """Return the ``{success, ...payload | error}`` dict sent to the caller."""
        if not self.success:
            return {"success": False, "error": self.error or "Unknown error"}
        return {"success": True, **self.payload}


class SettingChange(pydantic.BaseModel):
    """Notification broadcast when a privacy setting changes."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    type: Literal["PRIVACY_SETTING_CHANGED"] = "PRIVACY_SETTING_CHANGED"
    hostname: str | None = None
    setting: str | None = None
    value: bool | None = None
