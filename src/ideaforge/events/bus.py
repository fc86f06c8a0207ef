"""Async event bus for Ideaforge."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Coroutine
from typing import Any

from ideaforge.events.types import EventType

logger = logging.getLogger(__name__)

Listener = Callable[[EventType, dict[str, Any]], Coroutine[Any, Any, None]]
Unsubscribe = Callable[[], None]


class EventBus:
    """Simple async pub/sub event bus.

    Listener failures are logged and never reach the emitter, so a broken
    subscriber cannot fail an API call that announced something.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventType, list[Listener]] = defaultdict(list)

    def on(self, event_type: EventType, listener: Listener) -> Unsubscribe:
        """Register a listener; returns a callable that removes it again."""
        self._listeners[event_type].append(listener)
        return lambda: self.off(event_type, listener)

    def off(self, event_type: EventType, listener: Listener) -> None:
        """Remove a listener."""
        if listener in self._listeners[event_type]:
            self._listeners[event_type].remove(listener)

    def listener_count(self, event_type: EventType) -> int:
        return len(self._listeners.get(event_type, []))

    async def emit(self, event_type: EventType, data: dict[str, Any] | None = None) -> int:
        """Emit an event; returns how many listeners ran without error."""
        data = data or {}
        delivered = 0

        for listener in list(self._listeners.get(event_type, [])):
            try:
                await listener(event_type, data)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Error in event listener for %s", event_type)
            else:
                delivered += 1
        return delivered

    def clear(self) -> None:
        """Remove all listeners."""
        self._listeners.clear()
