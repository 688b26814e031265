"""
Rule installation.

``RuleInstaller`` is the seam to whatever enforces the rules (a
browser extension's dynamic rule API, a proxy, a test double).
``RuleManager`` compiles settings and replaces the installed set in
full: every existing rule is removed before the new set is added, so
old and new rules never coexist.  Syncs are serialized by a lock.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Protocol

from dataguardian.blocking import compiler
from dataguardian.models import blocking
from dataguardian.utils import errors, logger

log = logger.create_logger("RuleManager")


class RuleInstaller(Protocol):
    """Dynamic rule store with atomic remove/add updates."""

    async def get_rules(self) -> list[blocking.BlockRule]: ...

    async def update_rules(
        self,
        remove_rule_ids: Iterable[int] = (),
        add_rules: Iterable[blocking.BlockRule] = (),
    ) -> None: ...


class MemoryRuleInstaller:
    """In-memory rule store that enforces unique IDs like a real rule API."""

    def __init__(self) -> None:
        self._rules: dict[int, blocking.BlockRule] = {}

    async def get_rules(self) -> list[blocking.BlockRule]:
        return list(self._rules.values())

    async def update_rules(
        self,
        remove_rule_ids: Iterable[int] = (),
        add_rules: Iterable[blocking.BlockRule] = (),
    ) -> None:
        staged = dict(self._rules)
        for rule_id in remove_rule_ids:
            staged.pop(rule_id, None)
        for rule in add_rules:
            if rule.id in staged:
                raise errors.RuleInstallError(f"Duplicate rule id {rule.id}")
            staged[rule.id] = rule
        self._rules = staged


class RuleManager:
    """Keeps the installed rule set in step with a settings map."""

    def __init__(self, installer: RuleInstaller) -> None:
        self._installer = installer
        self._lock = asyncio.Lock()
        self._active: list[blocking.BlockRule] = []

    @property
    def active_rules(self) -> list[blocking.BlockRule]:
        """Rules the manager last saw installed."""
        return list(self._active)

    async def sync(self, settings: dict[str, bool]) -> blocking.InstallResult:
        """Compile *settings* and install the result."""
        rules = compiler.compile_rules(settings)
        return await self.install(rules)

    async def install(self, rules: list[blocking.BlockRule]) -> blocking.InstallResult:
        """Replace the installed rules with *rules*.

        On failure the previously installed rules are put back where
        possible and an unsuccessful result is returned; nothing is
        raised to the caller.
        """
        async with self._lock:
            try:
                previous = await self._installer.get_rules()
            except Exception as exc:
                log.error("Failed to read installed rules", {"error": errors.get_error_message(exc)})
                return blocking.InstallResult(success=False, error=errors.get_error_message(exc))

            previous_ids = [rule.id for rule in previous]
            try:
                if previous_ids:
                    await self._installer.update_rules(remove_rule_ids=previous_ids)
                if rules:
                    await self._installer.update_rules(add_rules=rules)
            except Exception as exc:
                log.error("Failed to install blocking rules", {"error": errors.get_error_message(exc)})
                await self._restore(previous)
                return blocking.InstallResult(success=False, error=errors.get_error_message(exc))

            added, removed = compiler.diff_rules(previous, rules)
            self._active = list(rules)
            log.info(
                "Blocking rules updated",
                {"active": len(rules), "added": added, "removed": removed},
            )
            return blocking.InstallResult(success=True, installed=len(rules), removed=len(previous_ids))

    async def _restore(self, previous: list[blocking.BlockRule]) -> None:
        try:
            current = await self._installer.get_rules()
            await self._installer.update_rules(
                remove_rule_ids=[rule.id for rule in current],
                add_rules=previous,
            )
            self._active = list(previous)
            log.warn("Restored previous blocking rules", {"rules": len(previous)})
        except Exception as exc:
            log.error("Failed to restore previous blocking rules", {"error": errors.get_error_message(exc)})
