"""Ideaforge event system."""

from ideaforge.events.bus import EventBus
from ideaforge.events.types import EventType

__all__ = ["EventBus", "EventType"]
