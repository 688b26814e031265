"""Pydantic models for page resources, tracker classification and detection."""

from __future__ import annotations

from typing import Literal, get_args

import pydantic

from dataguardian.utils import serialization

TrackerCategory = Literal[
    "Advertising",
    "Analytics",
    "Social",
    "Tag Manager",
    "CDN/Utility",
    "Unknown",
]

# Canonical category order used by the rule compiler and the UI.
TRACKER_CATEGORIES: tuple[TrackerCategory, ...] = get_args(TrackerCategory)

TagKind = Literal["script", "img", "iframe", "link", "request"]


class PageResource(pydantic.BaseModel):
    """An outbound resource reference observed on a loaded page."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    url: str
    tag_kind: TagKind = "script"


class TaxonomyEntry(pydantic.BaseModel):
    """A static tracker taxonomy row as stored in JSON."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    domain_key: str
    name: str
    category: TrackerCategory
    company: str
    data_types: tuple[str, ...] = ()
    purpose: str

    @property
    def primary_label(self) -> str:
        """The key without its top-level label (``googletagmanager`` for ``googletagmanager.com``)."""
        head, _, _ = self.domain_key.rpartition(".")
        return head or self.domain_key


class TrackerRecord(pydantic.BaseModel):
    """Classification of a single tracker hostname."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    domain: str
    name: str
    category: TrackerCategory
    company: str
    data_types: tuple[str, ...] = ()
    purpose: str


class DetectionResult(pydantic.BaseModel):
    """Hostnames observed on a page and the subset recognised as trackers.

    Both lists are hostname-unique and keep first-seen order.
    """

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    all_resources: list[str] = pydantic.Field(default_factory=list)
    detected_trackers: list[str] = pydantic.Field(default_factory=list)
