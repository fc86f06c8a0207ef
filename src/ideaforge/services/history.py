"""History feed: the idea-collection subscription the UI renders from.

A feed owns at most one in-flight fetch. Starting a new fetch cancels the
previous one, so the most recent request wins even when an older response
would arrive later. A cancelled fetch is aborted: it leaves ``data`` and
``error`` untouched.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ideaforge.config import Config
from ideaforge.events.bus import Unsubscribe
from ideaforge.events.types import EventType
from ideaforge.exceptions import IdeaForgeError
from ideaforge.models.idea import Idea
from ideaforge.models.page import PaginatedResult
from ideaforge.services.ideas import IdeaFilters, IdeaService

logger = logging.getLogger(__name__)


class HistoryFeed:
    """Keeps the latest page of idea history for one set of filters."""

    def __init__(
        self,
        service: IdeaService,
        filters: IdeaFilters | None = None,
        *,
        config: Config | None = None,
    ) -> None:
        config = config or Config()
        self.filters = filters or IdeaFilters()
        self.enabled = config.ideas_api_enabled
        self.poll_interval = config.poll_interval

        self.data: PaginatedResult[Idea] | None = None
        self.loading = False
        self.error: Exception | None = None

        self._service = service
        self._event_bus = service.event_bus
        self._task: asyncio.Task[None] | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self._unsubscribe: Unsubscribe | None = None

    def refetch(
        self, filters: IdeaFilters | None = None, *, silent: bool = False
    ) -> asyncio.Task[None] | None:
        """Start a fetch, cancelling the one in flight. ``silent`` leaves ``loading`` alone."""
        if filters is not None:
            self.filters = filters

        if not self.enabled:
            self.data = None
            self.loading = False
            return None

        if self._task is not None and not self._task.done():
            self._task.cancel()

        if not silent:
            self.loading = True
        self._task = asyncio.create_task(self._load(self.filters, silent))
        return self._task

    async def wait(self) -> PaginatedResult[Idea] | None:
        """Wait until the newest fetch settles and return the resulting data."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self.data

    async def _load(self, filters: IdeaFilters, silent: bool) -> None:
        self.error = None
        try:
            page = await self._service.fetch_history(filters)
        except asyncio.CancelledError:
            logger.debug("History fetch aborted")
            raise
        except (IdeaForgeError, httpx.HTTPError) as e:
            logger.warning("History fetch failed: %s", e)
            self.error = e
            return
        finally:
            if not silent and self._task is asyncio.current_task():
                self.loading = False

        self.data = page
        await self._event_bus.emit(
            EventType.HISTORY_LOADED,
            {"total_elements": page.total_elements, "page": page.number},
        )

    async def _on_refresh_requested(self, event_type: EventType, data: dict[str, Any]) -> None:
        self.refetch(silent=True)

    async def _poll(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.refetch(silent=True)

    def start(self) -> asyncio.Task[None] | None:
        """Subscribe to refresh requests, start polling if configured, and fetch."""
        if self._unsubscribe is None:
            self._unsubscribe = self._event_bus.on(
                EventType.HISTORY_REFRESH_REQUESTED, self._on_refresh_requested
            )
        if self.enabled and self.poll_interval and self._poll_task is None:
            self._poll_task = asyncio.create_task(self._poll(self.poll_interval))
        return self.refetch()

    async def stop(self) -> None:
        """Unsubscribe and cancel polling and any in-flight fetch."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        tasks = [t for t in (self._poll_task, self._task) if t is not None and not t.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._poll_task = None
        self.loading = False


async def prefetch_ideas(
    service: IdeaService, filters: IdeaFilters | None = None
) -> PaginatedResult[Idea] | None:
    """Warm the history; failures are logged, never raised."""
    try:
        return await service.fetch_history(filters)
    except (IdeaForgeError, httpx.HTTPError) as e:
        logger.warning("Could not prefetch idea history: %s", e)
        return None
