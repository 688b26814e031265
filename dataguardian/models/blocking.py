"""Pydantic models for declarative block rules and their installation."""

from __future__ import annotations

from typing import Literal

import pydantic

from dataguardian.utils import serialization

ResourceType = Literal["script", "xmlhttprequest", "image", "sub_frame", "stylesheet"]

RuleAction = Literal["block"]


class BlockRule(pydantic.BaseModel):
    """A single network block rule.

    ``domain_pattern`` is a glob over the whole URL with ``*``
    wildcards for scheme, host prefix and path
    (``*://*.doubleclick.net/*``).  Higher ``priority`` wins.
    """

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    id: int = pydantic.Field(gt=0)
    priority: int
    domain_pattern: str
    resource_types: tuple[ResourceType, ...]
    action: RuleAction = "block"

    def signature(self) -> tuple[str, tuple[ResourceType, ...], str]:
        """The rule's identity ignoring its ID and priority."""
        return (self.domain_pattern, tuple(sorted(self.resource_types)), self.action)


class InstallResult(pydantic.BaseModel):
    """Outcome of replacing the installed rule set."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    success: bool
    installed: int = 0
    removed: int = 0
    error: str | None = None
