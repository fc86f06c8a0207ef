"""Paginated collection model."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class PaginatedResult(BaseModel, Generic[T]):
    """One page of a server collection, 0-based ``number``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: list[T] = Field(default_factory=list)
    total_elements: int = Field(default=0, ge=0)
    total_pages: int = Field(default=1, ge=1)
    size: int = Field(default=0, ge=0)
    number: int = Field(default=0, ge=0)

    @classmethod
    def empty(cls) -> PaginatedResult[T]:
        return cls(content=[], total_elements=0, total_pages=1, size=0, number=0)

    def to_response(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True, exclude={"content"})
        data["content"] = [
            item.to_response() if hasattr(item, "to_response") else item for item in self.content
        ]
        return data
