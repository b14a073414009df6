"""Error taxonomy for the content repository."""

from __future__ import annotations


class CMSError(Exception):
    """Base error for content repository operations."""


class ValidationError(CMSError):
    """A candidate record failed hard validation.

    The message joins every error; ``errors`` and ``warnings`` keep the
    individual entries for callers that render them separately.
    """

    def __init__(self, errors: list[str], warnings: list[str] | None = None) -> None:
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        super().__init__(f"Validation failed: {', '.join(self.errors)}")


class PersistenceError(CMSError):
    """Durable storage could not be read or written."""


class TransferError(CMSError):
    """An import artifact was malformed or an export format is unsupported."""
