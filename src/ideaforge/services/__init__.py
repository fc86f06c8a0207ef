"""Idea service endpoints and the history feed."""

from ideaforge.services.history import HistoryFeed, prefetch_ideas
from ideaforge.services.ideas import IdeaFilters, IdeaService

__all__ = ["HistoryFeed", "IdeaFilters", "IdeaService", "prefetch_ideas"]
