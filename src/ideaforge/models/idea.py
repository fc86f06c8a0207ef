"""Canonical idea record."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class Idea(BaseModel):
    """An idea as consumed by the UI, independent of server payload quirks."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    theme: str = ""
    content: str = ""
    context: str = ""
    timestamp: datetime = EPOCH
    is_favorite: bool = False
    response_time: int | float | None = None
    tokens: int | float | None = None
    author: str | None = None
    model_used: str | None = None

    def to_response(self) -> dict[str, Any]:
        """Dump the camelCase wire shape."""
        return self.model_dump(mode="json", by_alias=True)
