"""In-process credential stores."""

from __future__ import annotations

from ideaforge.models.tokens import TokenPair
from ideaforge.storage.base import CredentialKind, CredentialStore


class MemoryCredentialStore(CredentialStore):
    """Dict-backed store; credentials live as long as the process."""

    def __init__(self, initial: dict[CredentialKind, str] | None = None) -> None:
        self._values: dict[CredentialKind, str] = dict(initial or {})

    async def _read(self, kind: CredentialKind) -> str | None:
        return self._values.get(kind)

    async def _write(self, kind: CredentialKind, value: str) -> None:
        self._values[kind] = value

    async def _write_pair(self, tokens: TokenPair) -> None:
        self._values.update(
            {CredentialKind.ACCESS: tokens.access_token, CredentialKind.REFRESH: tokens.refresh_token}
        )

    async def _delete_all(self) -> None:
        self._values.clear()


class NullCredentialStore(CredentialStore):
    """Fallback when no storage medium is available. Remembers nothing."""

    async def _read(self, kind: CredentialKind) -> str | None:
        return None

    async def _write(self, kind: CredentialKind, value: str) -> None:
        return None

    async def _write_pair(self, tokens: TokenPair) -> None:
        return None

    async def _delete_all(self) -> None:
        return None
