"""Ideaforge credential storage."""

from ideaforge.storage.base import CredentialKind, CredentialStore
from ideaforge.storage.memory import MemoryCredentialStore, NullCredentialStore
from ideaforge.storage.sqlite_store import SQLiteCredentialStore, open_credential_store

__all__ = [
    "CredentialKind",
    "CredentialStore",
    "MemoryCredentialStore",
    "NullCredentialStore",
    "SQLiteCredentialStore",
    "open_credential_store",
]
