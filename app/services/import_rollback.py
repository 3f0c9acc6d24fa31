"""
app/services/import_rollback.py

Time-bounded rollback of a finished import batch.

Rollback deletes every row tagged with the batch id from the batch's target
collection and only then flips the batch to rolled_back. Any failure before
that flip leaves the batch exactly as it was.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from app.services.import_registry import UnknownImportTypeError, get_import_type_spec
from db.models.import_batch import ImportBatch, ImportBatchStatus
from db.repositories.errors import RecordStoreError
from db.repositories.import_batch_repository import ImportBatchStore
from db.repositories.record_store import RecordStore

logger = logging.getLogger(__name__)

ROLLBACK_WINDOW_DAYS = 7

_IN_PROGRESS_STATUSES = frozenset({ImportBatchStatus.PENDING, ImportBatchStatus.PROCESSING})
_ROLLBACK_SOURCE_STATUSES = (ImportBatchStatus.COMPLETED, ImportBatchStatus.FAILED)


class RollbackError(RuntimeError):
    """
    Base error for a rollback call; the batch is never modified when raised.
    """


class RollbackEligibilityError(RollbackError):
    """
    Raised when a batch cannot be rolled back in its current state.
    """

    NOT_FOUND = "not_found"
    ALREADY_ROLLED_BACK = "already_rolled_back"
    IN_PROGRESS = "in_progress"
    WINDOW_EXPIRED = "window_expired"
    UNKNOWN_IMPORT_TYPE = "unknown_import_type"

    def __init__(self, message: str, *, code: str) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class RollbackDeletionError(RollbackError):
    """
    Raised when the storage layer fails to delete the batch's rows.
    """


@dataclass(frozen=True)
class RollbackResult:
    batch_id: uuid.UUID
    collection: str
    deleted_rows: int


class ImportRollbackManager:
    def __init__(
        self,
        *,
        batches: ImportBatchStore,
        records: RecordStore,
        window_days: int = ROLLBACK_WINDOW_DAYS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._batches = batches
        self._records = records
        self._window = timedelta(days=window_days)
        self._window_days = window_days
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def rollback(self, *, tenant_id: uuid.UUID, batch_id: uuid.UUID) -> RollbackResult:
        batch = self._batches.get_batch(batch_id, tenant_id)
        if batch is None:
            raise RollbackEligibilityError("Import batch not found", code=RollbackEligibilityError.NOT_FOUND)

        self._check_eligibility(batch)

        try:
            collection = get_import_type_spec(batch.import_type).collection
        except UnknownImportTypeError as exc:
            raise RollbackEligibilityError(
                "Unknown import type",
                code=RollbackEligibilityError.UNKNOWN_IMPORT_TYPE,
            ) from exc

        try:
            deleted = self._records.delete_by_import_batch(collection, tenant_id, batch_id)
        except RecordStoreError as exc:
            logger.warning("Rollback deletion failed batch_id=%s collection=%s: %s", batch_id, collection, exc)
            raise RollbackDeletionError(str(exc)) from exc

        moved = self._batches.transition_status(
            batch_id,
            tenant_id,
            from_statuses=_ROLLBACK_SOURCE_STATUSES,
            to_status=ImportBatchStatus.ROLLED_BACK,
        )
        if not moved:
            raise RollbackEligibilityError(
                "Already rolled back",
                code=RollbackEligibilityError.ALREADY_ROLLED_BACK,
            )

        logger.info(
            "Import rolled back batch_id=%s tenant_id=%s collection=%s deleted=%d",
            batch_id,
            tenant_id,
            collection,
            deleted,
        )
        return RollbackResult(batch_id=batch_id, collection=collection, deleted_rows=deleted)

    def _check_eligibility(self, batch: ImportBatch) -> None:
        if batch.status == ImportBatchStatus.ROLLED_BACK:
            raise RollbackEligibilityError(
                "Already rolled back",
                code=RollbackEligibilityError.ALREADY_ROLLED_BACK,
            )
        if batch.status in _IN_PROGRESS_STATUSES:
            raise RollbackEligibilityError(
                "Import is still in progress",
                code=RollbackEligibilityError.IN_PROGRESS,
            )

        created_at = batch.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        if self._clock() - created_at > self._window:
            raise RollbackEligibilityError(
                f"Rollback window expired ({self._window_days} days)",
                code=RollbackEligibilityError.WINDOW_EXPIRED,
            )
