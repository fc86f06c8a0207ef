"""SQLite-backed credential store."""

from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite

from ideaforge.models.tokens import TokenPair
from ideaforge.storage.base import CredentialKind, CredentialStore
from ideaforge.storage.memory import NullCredentialStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS credentials (
    kind TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
)
"""

_UPSERT = """INSERT INTO credentials (kind, value) VALUES (?, ?)
   ON CONFLICT(kind) DO UPDATE SET
   value = excluded.value,
   updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')"""


class SQLiteCredentialStore(CredentialStore):
    """Durable key/value credential table, one row per credential kind."""

    def __init__(self, db_path: Path, *, wal_mode: bool = True) -> None:
        self.db_path = db_path
        self.wal_mode = wal_mode
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Create the database file and schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(str(self.db_path))

        if self.wal_mode:
            await self._db.execute("PRAGMA journal_mode=WAL")
        await self._db.execute(_SCHEMA)
        await self._db.commit()
        logger.info("Initialized credential store at %s", self.db_path)

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("Store not initialized. Call initialize() first.")
        return self._db

    async def _read(self, kind: CredentialKind) -> str | None:
        cursor = await self.db.execute(
            "SELECT value FROM credentials WHERE kind = ?", (kind.value,)
        )
        row = await cursor.fetchone()
        return row[0] if row else None

    async def _read_pair(self) -> tuple[str | None, str | None]:
        cursor = await self.db.execute("SELECT kind, value FROM credentials")
        rows = dict(await cursor.fetchall())
        return rows.get(CredentialKind.ACCESS.value), rows.get(CredentialKind.REFRESH.value)

    async def _write(self, kind: CredentialKind, value: str) -> None:
        await self.db.execute(_UPSERT, (kind.value, value))
        await self.db.commit()

    async def _write_pair(self, tokens: TokenPair) -> None:
        db = self.db
        try:
            await db.executemany(
                _UPSERT,
                [
                    (CredentialKind.ACCESS.value, tokens.access_token),
                    (CredentialKind.REFRESH.value, tokens.refresh_token),
                ],
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def _delete_all(self) -> None:
        await self.db.execute("DELETE FROM credentials")
        await self.db.commit()


async def open_credential_store(db_path: Path | None) -> CredentialStore:
    """Open the durable store, or fall back to the null store if the medium is unusable."""
    if db_path is None:
        return NullCredentialStore()

    store = SQLiteCredentialStore(db_path)
    try:
        await store.initialize()
    except (OSError, aiosqlite.Error) as e:
        logger.warning("Credential storage unavailable at %s, using no-op store: %s", db_path, e)
        await store.close()
        return NullCredentialStore()
    return store
