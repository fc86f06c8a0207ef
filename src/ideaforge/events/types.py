"""Event type constants for Ideaforge."""

from enum import StrEnum


class EventType(StrEnum):
    IDEA_GENERATED = "idea.generated"
    FAVORITE_TOGGLED = "idea.favorite_toggled"

    HISTORY_REFRESH_REQUESTED = "history.refresh_requested"
    HISTORY_LOADED = "history.loaded"

    CREDENTIALS_REFRESHED = "auth.refreshed"
    CREDENTIALS_CLEARED = "auth.cleared"
    LOGIN_REQUIRED = "auth.login_required"
