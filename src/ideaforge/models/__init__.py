"""Ideaforge data models."""

from ideaforge.models.idea import Idea
from ideaforge.models.page import PaginatedResult
from ideaforge.models.tokens import TokenPair

__all__ = ["Idea", "PaginatedResult", "TokenPair"]
