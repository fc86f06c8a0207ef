"""Abstract credential storage port.

Every public operation degrades silently: a failing medium reads as an
absent credential and writes become no-ops. Backends implement the
underscored primitives and may raise freely.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import StrEnum

from ideaforge.models.tokens import TokenPair

logger = logging.getLogger(__name__)


class CredentialKind(StrEnum):
    ACCESS = "auth_token"
    REFRESH = "refresh_token"


class CredentialStore(ABC):
    """Abstract interface for credential storage backends."""

    @abstractmethod
    async def _read(self, kind: CredentialKind) -> str | None:
        """Return the stored value or None."""

    @abstractmethod
    async def _write(self, kind: CredentialKind, value: str) -> None:
        """Persist a value, replacing any previous one."""

    @abstractmethod
    async def _write_pair(self, tokens: TokenPair) -> None:
        """Persist both credentials as one unit: either both land or neither does."""

    @abstractmethod
    async def _delete_all(self) -> None:
        """Remove every stored credential."""

    async def close(self) -> None:
        """Release the underlying medium, if any."""

    async def get(self, kind: CredentialKind) -> str | None:
        try:
            value = await self._read(kind)
        except Exception as e:
            logger.warning("Credential read failed for %s: %s", kind, e)
            return None
        return value or None

    async def set(self, kind: CredentialKind, value: str) -> None:
        try:
            await self._write(kind, value)
        except Exception as e:
            logger.warning("Credential write failed for %s: %s", kind, e)

    async def clear(self) -> None:
        try:
            await self._delete_all()
        except Exception as e:
            logger.warning("Credential clear failed: %s", e)

    async def _read_pair(self) -> tuple[str | None, str | None]:
        return await self._read(CredentialKind.ACCESS), await self._read(CredentialKind.REFRESH)

    async def get_pair(self) -> TokenPair | None:
        try:
            access, refresh = await self._read_pair()
        except Exception as e:
            logger.warning("Credential read failed for pair: %s", e)
            return None
        if not access or not refresh:
            return None
        return TokenPair(access_token=access, refresh_token=refresh)

    async def set_pair(self, tokens: TokenPair) -> None:
        """Replace both credentials. A failed write clears the session instead of mixing pairs."""
        try:
            await self._write_pair(tokens)
        except Exception as e:
            logger.warning("Credential pair write failed, clearing credentials: %s", e)
            await self.clear()
