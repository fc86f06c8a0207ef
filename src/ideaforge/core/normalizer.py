"""Idea normalization.

Turns one raw server payload into a canonical :class:`Idea`. Malformed input
never raises: each field falls back to a safe default and a diagnostic is
logged instead.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from ideaforge.core.fields import (
    candidates,
    first_number,
    first_present,
    first_string,
    first_text,
    stringify,
)
from ideaforge.core.timestamps import parse_timestamp
from ideaforge.exceptions import IdeaForgeError
from ideaforge.models.idea import Idea

logger = logging.getLogger(__name__)

ID_FIELDS = candidates("id", "ideaId", "idea_id", "uuid", "_id")
TIMESTAMP_FIELDS = candidates("timestamp", "createdAt", "created_at")
RESPONSE_TIME_FIELDS = candidates(
    "executionTimeMs",
    "execution_time_ms",
    "responseTime",
    "durationMs",
    "metrics.executionTime",
    "stats.executionTime",
)
TOKEN_FIELDS = candidates(
    "tokens",
    "tokenCount",
    "tokensUsed",
    "token_usage",
    "usage.totalTokens",
    "tokenStats.total",
    "stats.tokens",
    "metadata.tokens",
)
AUTHOR_FIELDS = candidates(
    "userName",
    "username",
    "user_name",
    "author",
    "owner",
    "createdBy",
    "user.name",
    "user.username",
    "user.fullName",
    "metadata.author",
    "metadata.userName",
)
MODEL_FIELDS = candidates("modelUsed", "model_used", "model")

# Opening/closing pairs stripped when they wrap the whole text.
QUOTE_PAIRS = (('"', '"'), ("“", "”"), ("'", "'"))


class IdGenerationError(IdeaForgeError):
    """Raised when no secure randomness source exists to synthesize an id."""


def generate_idea_id() -> str:
    """32 hex chars from 16 bytes of OS randomness."""
    try:
        return uuid.uuid4().hex
    except NotImplementedError as e:
        raise IdGenerationError("Unable to generate secure idea ID") from e


def sanitize_quoted_text(text: Any) -> str:
    """Trim, then drop one quote pair that wraps the whole string."""
    if not isinstance(text, str):
        return stringify(text)
    stripped = text.strip()
    for start, end in QUOTE_PAIRS:
        if len(stripped) >= 2 and stripped.startswith(start) and stripped.endswith(end):
            return stripped[1:-1]
    return stripped


def normalize_theme_label(value: Any) -> str:
    """``"  MARKETING "`` -> ``"Marketing"``."""
    if not isinstance(value, str):
        return stringify(value)
    lowered = value.strip().lower()
    return lowered[:1].upper() + lowered[1:]


class IdeaNormalizer:
    """Maps heterogeneous idea payloads onto :class:`Idea`."""

    def normalize(self, raw: Any) -> Idea:
        if not isinstance(raw, Mapping):
            logger.warning("Idea payload is not an object: %r", type(raw).__name__)
            raw = {}

        return Idea(
            id=self.resolve_id(raw),
            theme=normalize_theme_label(raw.get("theme")),
            content=sanitize_quoted_text(raw.get("content")),
            context=sanitize_quoted_text(raw.get("context")),
            timestamp=parse_timestamp(first_present(raw, TIMESTAMP_FIELDS)),
            is_favorite=bool(raw.get("isFavorite")),
            response_time=first_number(raw, RESPONSE_TIME_FIELDS),
            tokens=first_number(raw, TOKEN_FIELDS),
            author=first_text(raw, AUTHOR_FIELDS),
            model_used=first_string(raw, MODEL_FIELDS),
        )

    @staticmethod
    def resolve_id(raw: Mapping[str, Any]) -> str:
        for extract in ID_FIELDS:
            value = extract(raw)
            if value is None:
                continue
            text = stringify(value).strip()
            if text:
                return text
        return generate_idea_id()


def normalize_idea(raw: Any) -> Idea:
    """Module-level shortcut over a shared :class:`IdeaNormalizer`."""
    return _default.normalize(raw)


_default = IdeaNormalizer()
