"""
Repository-layer exceptions for import batch and tenant record persistence.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Base exception for repository failures."""


class RecordStoreError(RepositoryError):
    """Raised when an insert, lookup or delete against a tenant collection fails."""


class UnknownCollectionError(RecordStoreError):
    """Raised when a collection name has no backing model."""


class BatchPersistenceError(RepositoryError):
    """Raised when an import batch row cannot be written."""


class InvalidBatchTransitionError(RepositoryError):
    """Raised when a status change breaks the batch lifecycle."""

    def __init__(self, *, current: str, requested: str) -> None:
        super().__init__(f"Cannot move import batch from '{current}' to '{requested}'.")
        self.current = current
        self.requested = requested


class SalonNotFoundError(RepositoryError):
    """Raised when a referenced salon (tenant) does not exist."""


class SalonInactiveError(RepositoryError):
    """Raised when a referenced salon (tenant) is disabled."""
