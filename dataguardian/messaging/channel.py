"""
Request/response message channel between extension contexts.

A popup or content script sends a :class:`Message`; the channel
dispatches it to the settings store, rule manager or interceptor and
answers with ``{success, ...payload}`` or ``{success: False, error}``.
Setting changes are broadcast to subscribers after they are persisted
and the block rules have been recompiled from the stored settings.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

import pydantic

from dataguardian.blocking import installer, interceptor
from dataguardian.models import messages
from dataguardian.settings import store as store_mod
from dataguardian.utils import errors, logger

log = logger.create_logger("MessageChannel")

Subscriber = Callable[[messages.SettingChange], Awaitable[None] | None]

_SITE_SCOPED: frozenset[str] = frozenset(["GET_SETTINGS", "UPDATE_SETTING", "RESET_TO_DEFAULTS"])


class MessageChannel:
    """Dispatches settings messages and broadcasts setting changes."""

    def __init__(
        self,
        settings_store: store_mod.SiteSettingsStore,
        rule_manager: installer.RuleManager,
        request_interceptor: interceptor.RequestInterceptor,
    ) -> None:
        self._store = settings_store
        self._rules = rule_manager
        self._interceptor = request_interceptor
        self._subscribers: list[Subscriber] = []

    # ── Subscriptions ───────────────────────────────────────

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register *subscriber* for setting changes; returns an unsubscribe callable."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    async def broadcast(self, change: messages.SettingChange) -> int:
        """Deliver *change* to every subscriber; returns how many accepted it."""
        delivered = 0
        for subscriber in list(self._subscribers):
            try:
                result = subscriber(change)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as exc:
                log.warn("Subscriber failed", {"error": errors.get_error_message(exc)})
        return delivered

    # ── Dispatch ────────────────────────────────────────────

    async def handle(self, raw: messages.Message | dict[str, Any]) -> dict[str, Any]:
        """Handle one message and return the wire response."""
        try:
            message = raw if isinstance(raw, messages.Message) else messages.Message.model_validate(raw)
        except pydantic.ValidationError as exc:
            return messages.MessageResponse(success=False, error=f"Invalid message: {exc.error_count()} errors").to_wire()

        try:
            response = await self._dispatch(message)
        except errors.DataGuardianError as exc:
            log.warn("Message failed", {"type": message.type, "error": str(exc)})
            response = messages.MessageResponse(success=False, error=str(exc))
        except Exception as exc:
            log.error("Error handling message", {"type": message.type, "error": errors.get_error_message(exc)})
            response = messages.MessageResponse(success=False, error=errors.get_error_message(exc))
        return response.to_wire()

    async def _dispatch(self, message: messages.Message) -> messages.MessageResponse:
        if message.type in _SITE_SCOPED and not message.hostname:
            return messages.MessageResponse(success=False, error="Missing hostname")

        if message.type == "GET_SETTINGS":
            settings = await self._store.load_settings(message.hostname)
            return messages.MessageResponse(success=True, payload={"settings": settings})

        if message.type == "UPDATE_SETTING":
            if message.setting is None or message.value is None:
                return messages.MessageResponse(success=False, error="Missing setting or value")
            await self._store.update_setting(message.hostname, message.setting, message.value)
            return await self._after_change(message.hostname, message.setting, message.value)

        if message.type == "RESET_TO_DEFAULTS":
            await self._store.reset_to_defaults(message.hostname)
            return await self._after_change(message.hostname, None, None)

        if message.type == "CLEAR_ALL_SETTINGS":
            removed = await self._store.clear_all()
            result = await self._rules.install([])
            await self.broadcast(messages.SettingChange())
            return messages.MessageResponse(
                success=True, payload={"cleared": removed, "rulesUpdated": result.success}
            )

        if message.type == "PRIVACY_SETTING_CHANGED":
            delivered = await self.broadcast(
                messages.SettingChange(
                    hostname=message.hostname, setting=message.setting, value=message.value
                )
            )
            return messages.MessageResponse(success=True, payload={"delivered": delivered})

        if message.type == "GET_BLOCKED_COUNT":
            count = self._interceptor.blocked_count(message.tab_id)
            return messages.MessageResponse(success=True, payload={"count": count})

        return messages.MessageResponse(success=False, error="Unknown message type")

    async def _after_change(
        self, hostname: str, setting: str | None, value: bool | None
    ) -> messages.MessageResponse:
        """Recompile rules from the stored settings, then notify subscribers."""
        settings = await self._store.load_settings(hostname)
        result = await self._rules.sync(settings)
        await self.broadcast(messages.SettingChange(hostname=hostname, setting=setting, value=value))
        payload: dict[str, Any] = {"settings": settings, "rulesUpdated": result.success}
        if not result.success:
            payload["rulesError"] = result.error
        return messages.MessageResponse(success=True, payload=payload)
