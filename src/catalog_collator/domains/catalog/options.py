"""Collator options and their merge with configuration-sourced values."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from catalog_collator.domains.catalog.filters import FilterSpec


@dataclass(frozen=True)
class CollatorOptions:
    """Options controlling which entities are collated and how they are located."""

    filter: FilterSpec | None = None
    location_template: str | None = None


def merge_options(explicit: CollatorOptions, configured: CollatorOptions) -> CollatorOptions:
    """Merge two option sets, preferring explicit values field by field.

    A field is taken from ``configured`` when ``explicit`` leaves it as None
    or as a blank string. Neither input is modified.
    """
    merged = {}
    for option in fields(CollatorOptions):
        value = getattr(explicit, option.name)
        if value is None or (isinstance(value, str) and not value.strip()):
            value = getattr(configured, option.name)
        merged[option.name] = value
    return CollatorOptions(**merged)
