"""
Request interception against the active block rules.

``RequestInterceptor.should_block`` is the hook a network layer calls
for every outbound request.  Blocked URLs are recorded per tab so the
extension UI can show a blocked-request count.
"""

from __future__ import annotations

from dataguardian.blocking import compiler, installer
from dataguardian.models import blocking
from dataguardian.utils import logger

log = logger.create_logger("Interceptor")


class RequestInterceptor:
    """Evaluates request URLs against a :class:`RuleManager`'s rules."""

    def __init__(self, manager: installer.RuleManager) -> None:
        self._manager = manager
        self._blocked: dict[int | None, list[str]] = {}

    def matching_rule(
        self, url: str, resource_type: blocking.ResourceType | None = None
    ) -> blocking.BlockRule | None:
        """Highest-priority active rule matching *url*, if any."""
        best: blocking.BlockRule | None = None
        for rule in self._manager.active_rules:
            if not compiler.rule_matches(rule, url, resource_type):
                continue
            if best is None or rule.priority > best.priority:
                best = rule
        return best

    def should_block(
        self,
        url: str,
        tab_id: int | None = None,
        resource_type: blocking.ResourceType | None = None,
    ) -> bool:
        """Return True when *url* must be blocked, recording it for *tab_id*."""
        rule = self.matching_rule(url, resource_type)
        if rule is None or rule.action != "block":
            return False
        self._blocked.setdefault(tab_id, []).append(url)
        log.debug("Blocked request", {"url": url, "ruleId": rule.id, "tabId": tab_id})
        return True

    def blocked_count(self, tab_id: int | None = None) -> int:
        return len(self._blocked.get(tab_id, ()))

    def blocked_urls(self, tab_id: int | None = None) -> list[str]:
        return list(self._blocked.get(tab_id, ()))

    def reset_tab(self, tab_id: int | None) -> None:
        """Forget blocked requests for a tab (navigation or close)."""
        self._blocked.pop(tab_id, None)
