"""Idea service: request builders over the authenticated client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ideaforge.client import AuthenticatedClient
from ideaforge.core.normalizer import IdeaNormalizer
from ideaforge.core.pagination import PaginationAdapter
from ideaforge.events.bus import EventBus
from ideaforge.events.types import EventType
from ideaforge.exceptions import IdeaServiceError
from ideaforge.models.idea import Idea
from ideaforge.models.page import PaginatedResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdeaFilters:
    """History/my-ideas filters. Dates are calendar dates (``YYYY-MM-DD``)."""

    category: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    page: int | None = None
    size: int | None = None

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.category:
            params["theme"] = self.category
        if self.start_date:
            params["startDate"] = f"{self.start_date}T00:00:00"
        if self.end_date:
            params["endDate"] = f"{self.end_date}T23:59:59"
        if self.page is not None:
            params["page"] = str(self.page)
        if self.size is not None:
            params["size"] = str(self.size)
        return params


def _raise_for_failure(response: httpx.Response, default: str) -> None:
    if response.is_success:
        return
    text = response.text.strip()
    raise IdeaServiceError(text or default, status_code=response.status_code)


def _json(response: httpx.Response, what: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise IdeaServiceError(f"Invalid JSON in {what} response") from e


class IdeaService:
    """Generation, favorites and collection endpoints of the idea API."""

    def __init__(
        self,
        client: AuthenticatedClient,
        event_bus: EventBus | None = None,
        *,
        normalizer: IdeaNormalizer | None = None,
    ) -> None:
        self._client = client
        self._event_bus = event_bus if event_bus is not None else client.event_bus
        self._normalizer = normalizer or IdeaNormalizer()
        self._pages = PaginationAdapter(self._normalizer)

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    async def generate_idea(self, theme_id: int, context: str, skip_cache: bool = False) -> Idea:
        """Generate an idea for a theme.

        Args:
            theme_id: Numeric theme identifier
            context: Free-text context for the generator
            skip_cache: Ask the server to bypass its cache

        Returns:
            The normalized generated idea

        Raises:
            IdeaServiceError: If the server rejects the request
        """
        params = {"skipCache": "true"} if skip_cache else None
        response = await self._client.request(
            "/api/ideas/generate",
            method="POST",
            json={"theme": theme_id, "context": context},
            params=params,
        )
        _raise_for_failure(response, "Failed to generate idea")

        idea = self._normalizer.normalize(_json(response, "generate"))
        await self._announce_new_idea(idea)
        return idea

    async def generate_surprise_idea(self) -> Idea:
        """Generate an idea on a server-chosen theme."""
        response = await self._client.request("/api/ideas/surprise-me", method="POST")
        _raise_for_failure(response, "Failed to generate surprise idea")

        idea = self._normalizer.normalize(_json(response, "surprise-me"))
        await self._announce_new_idea(idea)
        return idea

    async def toggle_favorite(self, idea_id: str, is_favorite: bool) -> None:
        """Mark (POST) or unmark (DELETE) an idea as favorite."""
        method = "POST" if is_favorite else "DELETE"
        response = await self._client.request(f"/api/ideas/{idea_id}/favorite", method=method)
        _raise_for_failure(response, "Failed to update favorite")

        await self._event_bus.emit(
            EventType.FAVORITE_TOGGLED, {"idea_id": idea_id, "is_favorite": is_favorite}
        )
        await self._event_bus.emit(EventType.HISTORY_REFRESH_REQUESTED)

    async def get_favorites(self) -> list[Idea]:
        response = await self._client.request("/api/ideas/favorites")
        _raise_for_failure(response, "Failed to load favorites")
        return self._pages.to_page(_json(response, "favorites")).content

    async def get_my_ideas(
        self, page: int, size: int, filters: IdeaFilters | None = None
    ) -> PaginatedResult[Idea]:
        """One page of the current user's ideas."""
        base = filters or IdeaFilters()
        query = IdeaFilters(base.category, base.start_date, base.end_date, page, size)
        response = await self._client.request("/api/ideas/my-ideas", params=query.to_params())
        if not response.is_success:
            raise IdeaServiceError(
                f"Failed to load my ideas: {response.text.strip()}",
                status_code=response.status_code,
            )
        return self._pages.to_page(_json(response, "my-ideas"))

    async def fetch_history(self, filters: IdeaFilters | None = None) -> PaginatedResult[Idea]:
        """Idea history; a 404 means there is nothing yet and yields an empty page."""
        params = (filters or IdeaFilters()).to_params()
        response = await self._client.request("/api/ideas/history", params=params or None)

        if response.status_code == 404:
            logger.debug("History endpoint returned 404, treating as empty")
            return PaginatedResult[Idea].empty()
        if not response.is_success:
            raise IdeaServiceError(f"Error {response.status_code}", status_code=response.status_code)

        return self._pages.to_page(_json(response, "history"))

    async def _announce_new_idea(self, idea: Idea) -> None:
        await self._event_bus.emit(EventType.IDEA_GENERATED, {"idea": idea})
        await self._event_bus.emit(EventType.HISTORY_REFRESH_REQUESTED, {"idea": idea})
