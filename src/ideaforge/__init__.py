"""Ideaforge: async client for the idea-generation service."""

from ideaforge.client import AuthenticatedClient
from ideaforge.config import Config, configure_logging
from ideaforge.core import IdeaNormalizer, PaginationAdapter, parse_timestamp
from ideaforge.exceptions import IdeaForgeError, IdeaServiceError
from ideaforge.models import Idea, PaginatedResult, TokenPair
from ideaforge.services import HistoryFeed, IdeaFilters, IdeaService, prefetch_ideas

__version__ = "0.1.0"

__all__ = [
    "AuthenticatedClient",
    "Config",
    "HistoryFeed",
    "Idea",
    "IdeaFilters",
    "IdeaForgeError",
    "IdeaNormalizer",
    "IdeaService",
    "IdeaServiceError",
    "PaginatedResult",
    "PaginationAdapter",
    "TokenPair",
    "configure_logging",
    "parse_timestamp",
    "prefetch_ideas",
]
