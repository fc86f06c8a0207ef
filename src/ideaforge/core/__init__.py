"""Payload parsing and normalization."""

from ideaforge.core.normalizer import IdeaNormalizer, IdGenerationError, normalize_idea
from ideaforge.core.pagination import PaginationAdapter, extract_items, is_paginated_envelope
from ideaforge.core.timestamps import parse_timestamp

__all__ = [
    "IdGenerationError",
    "IdeaNormalizer",
    "PaginationAdapter",
    "extract_items",
    "is_paginated_envelope",
    "normalize_idea",
    "parse_timestamp",
]
