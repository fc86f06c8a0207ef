"""Login surface redirection."""

from __future__ import annotations

import logging

from ideaforge.events.bus import EventBus
from ideaforge.events.types import EventType

logger = logging.getLogger(__name__)

UNAUTHENTICATED_PATHS = frozenset({"/login", "/register"})


class LoginNavigator:
    """Tracks the surface the user is on and sends them to login when the session ends."""

    def __init__(
        self,
        event_bus: EventBus | None = None,
        *,
        current_path: str = "/",
        login_path: str = "/login",
    ) -> None:
        self.current_path = current_path
        self.login_path = login_path
        self._event_bus = event_bus

    @property
    def on_unauthenticated_page(self) -> bool:
        return self.current_path in UNAUTHENTICATED_PATHS

    async def redirect_to_login(self) -> bool:
        """Returns False when already on a login/registration page."""
        if self.on_unauthenticated_page:
            return False

        previous = self.current_path
        self.current_path = self.login_path
        logger.info("Session ended, redirecting from %s to %s", previous, self.login_path)

        if self._event_bus is not None:
            await self._event_bus.emit(
                EventType.LOGIN_REQUIRED,
                {"from": previous, "to": self.login_path},
            )
        return True
