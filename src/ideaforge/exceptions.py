"""Ideaforge exception hierarchy.

Authorization failures are not exceptions: the client hands the failed
response back to its caller. These cover everything that does raise.
"""

from __future__ import annotations


class IdeaForgeError(Exception):
    """Base for all Ideaforge exceptions."""


class IdeaServiceError(IdeaForgeError):
    """The idea service answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
