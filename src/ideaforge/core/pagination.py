"""Uniform paginated view over envelope and bare-collection responses."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from ideaforge.core.fields import parse_number
from ideaforge.core.normalizer import IdeaNormalizer
from ideaforge.models.idea import Idea
from ideaforge.models.page import PaginatedResult

logger = logging.getLogger(__name__)

# Tried in order before falling back to any list-valued field.
ARRAY_FIELDS = ("data", "items", "results", "history", "ideas")


def is_paginated_envelope(raw: Any) -> bool:
    """A mapping with a list ``content`` plus both total fields."""
    return (
        isinstance(raw, Mapping)
        and isinstance(raw.get("content"), list)
        and "totalElements" in raw
        and "totalPages" in raw
    )


def extract_items(raw: Any) -> list[Any]:
    """Find the item list in a non-envelope response; ``[]`` if there is none."""
    if isinstance(raw, list):
        return raw
    if isinstance(raw, Mapping):
        for name in ARRAY_FIELDS:
            if isinstance(raw.get(name), list):
                return raw[name]
        for value in raw.values():
            if isinstance(value, list):
                return value
    logger.warning("Unexpected collection payload, no item list found: %.200r", raw)
    return []


def _count(value: Any) -> int | None:
    """Non-negative integer, or None when missing or malformed."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = parse_number(value)
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and math.isfinite(value) and value >= 0 and value.is_integer():
        return int(value)
    return None


class PaginationAdapter:
    """Produces ``PaginatedResult[Idea]`` from any collection response."""

    def __init__(self, normalizer: IdeaNormalizer | None = None) -> None:
        self._normalizer = normalizer or IdeaNormalizer()

    def to_page(self, raw: Any) -> PaginatedResult[Idea]:
        if is_paginated_envelope(raw):
            return self._from_envelope(raw)
        ideas = self._normalize_items(extract_items(raw))
        return PaginatedResult[Idea](
            content=ideas,
            total_elements=len(ideas),
            total_pages=1,
            size=len(ideas),
            number=0,
        )

    def _from_envelope(self, raw: Mapping[str, Any]) -> PaginatedResult[Idea]:
        ideas = self._normalize_items(raw["content"])

        total_elements = _count(raw.get("totalElements")) or 0
        size = _count(raw.get("size")) or len(ideas)
        size = max(size, len(ideas))
        number = _count(raw.get("number")) or 0

        total_pages = _count(raw.get("totalPages"))
        if total_pages is None:
            total_pages = -(-total_elements // size) if size else 1
            logger.warning(
                "Envelope totalPages malformed (%r); recomputed as %d",
                raw.get("totalPages"),
                max(1, total_pages),
            )

        return PaginatedResult[Idea](
            content=ideas,
            total_elements=total_elements,
            total_pages=max(1, total_pages),
            size=size,
            number=number,
        )

    def _normalize_items(self, items: list[Any]) -> list[Idea]:
        ideas = []
        for item in items:
            if not isinstance(item, Mapping):
                logger.warning("Skipping non-object collection item: %.200r", item)
                continue
            ideas.append(self._normalizer.normalize(item))
        return ideas
