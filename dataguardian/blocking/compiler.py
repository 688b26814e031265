"""
Settings to block-rule compilation and URL matching.

``compile_rules`` is pure: the same settings always produce the same
rules, with IDs numbered from 1 in emission order.  Category rules are
emitted in canonical category order; the ``blockTrackers`` catch-all
then adds every remaining pattern at a lower priority.
"""

from __future__ import annotations

import functools
import re

from dataguardian.blocking import patterns
from dataguardian.models import blocking, tracking
from dataguardian.settings import keys

# ── Compilation ─────────────────────────────────────────────


def compile_rules(settings: dict[str, bool]) -> list[blocking.BlockRule]:
    """Translate a settings map into the full ordered rule set.

    Args:
        settings: Setting key to flag; missing keys count as ``False``.

    Returns:
        The rules to install, replacing any previously installed set.
    """
    rules: list[blocking.BlockRule] = []
    emitted: set[str] = set()

    def emit(pattern: str, priority: int, resource_types: tuple[blocking.ResourceType, ...]) -> None:
        rules.append(
            blocking.BlockRule(
                id=len(rules) + 1,
                priority=priority,
                domain_pattern=pattern,
                resource_types=resource_types,
            )
        )
        emitted.add(pattern)

    for category in tracking.TRACKER_CATEGORIES:
        if not settings.get(keys.setting_key(category), False):
            continue
        for pattern in patterns.patterns_for(category):
            emit(pattern, patterns.SPECIFIC_RULE_PRIORITY, patterns.CATEGORY_RESOURCE_TYPES[category])

    if settings.get(keys.BLOCK_TRACKERS, False):
        for category in tracking.TRACKER_CATEGORIES:
            for pattern in patterns.patterns_for(category):
                if pattern in emitted:
                    continue
                emit(pattern, patterns.CATCH_ALL_RULE_PRIORITY, patterns.ALL_RESOURCE_TYPES)

    return rules


def diff_rules(
    previous: list[blocking.BlockRule], current: list[blocking.BlockRule]
) -> tuple[int, int]:
    """Count rules added and removed between two sets, ignoring IDs."""
    before = {rule.signature() for rule in previous}
    after = {rule.signature() for rule in current}
    return len(after - before), len(before - after)


# ── Matching ────────────────────────────────────────────────

_ANY_SCHEME = "[a-z][a-z0-9+.-]*"


def _host_to_regex(host: str) -> str:
    prefix = ""
    if host.startswith("*."):
        prefix = r"(?:[^/]*\.)?"
        host = host[2:]
    body = "[^/]*".join(re.escape(part) for part in host.split("*"))
    return prefix + body + r"(?::\d+)?"


def _path_to_regex(path: str) -> str:
    return ".*".join(re.escape(part) for part in path.split("*"))


@functools.lru_cache(maxsize=1024)
def pattern_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a ``scheme://host/path`` glob into an anchored regex."""
    scheme, sep, rest = pattern.partition("://")
    if not sep:
        # Bare host/path globs match over any scheme.
        scheme, rest = "*", pattern

    scheme_re = _ANY_SCHEME if scheme == "*" else re.escape(scheme)
    host, slash, path = rest.partition("/")
    path_re = _path_to_regex(slash + path) if slash else "/.*"

    return re.compile(f"^{scheme_re}://{_host_to_regex(host)}{path_re}$", re.IGNORECASE)


def _normalize_url(url: str) -> str:
    """Give a bare ``scheme://host`` URL an explicit root path."""
    scheme, sep, rest = url.partition("://")
    if sep and "/" not in rest:
        host, query_sep, query = rest.partition("?")
        return f"{scheme}://{host}/{query_sep}{query}"
    return url


def rule_matches(
    rule: blocking.BlockRule,
    url: str,
    resource_type: blocking.ResourceType | None = None,
) -> bool:
    """True when *rule* applies to *url* (and to *resource_type*, when given)."""
    if resource_type is not None and resource_type not in rule.resource_types:
        return False
    return pattern_to_regex(rule.domain_pattern).match(_normalize_url(url.strip())) is not None
