"""Credential pair model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TokenPair(BaseModel):
    """Access and refresh credentials, always stored and cleared together."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    access_token: str = Field(min_length=1)
    refresh_token: str = Field(min_length=1)
