"""
Repository for import batch lifecycle persistence and history lookup.

Every write commits on its own: the import pipeline treats each batch update
as an independent store call, so progress survives a later chunk failing.
"""

from __future__ import annotations

import uuid
from collections.abc import Collection, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Protocol

from sqlalchemy import Select, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.import_batch import BATCH_STATUS_TRANSITIONS, ImportBatch, ImportBatchStatus
from db.repositories.errors import BatchPersistenceError, InvalidBatchTransitionError

_MUTABLE_FIELDS = frozenset(
    {
        "status",
        "success_count",
        "failed_count",
        "error_log",
        "completed_at",
        "file_name",
    }
)


class ImportBatchStore(Protocol):
    """
    Persistence contract used by the import orchestrator and rollback manager.
    """

    def create_batch(
        self,
        *,
        tenant_id: uuid.UUID,
        import_type: str,
        total_rows: int,
        column_mapping: Mapping[str, str],
        file_name: str | None = None,
    ) -> ImportBatch:
        ...

    def update_batch(self, batch_id: uuid.UUID, tenant_id: uuid.UUID, **fields: Any) -> None:
        ...

    def get_batch(self, batch_id: uuid.UUID, tenant_id: uuid.UUID) -> ImportBatch | None:
        ...

    def list_history(self, tenant_id: uuid.UUID, *, limit: int = 50) -> list[ImportBatch]:
        ...

    def transition_status(
        self,
        batch_id: uuid.UUID,
        tenant_id: uuid.UUID,
        *,
        from_statuses: Collection[str],
        to_status: str,
    ) -> bool:
        ...


def ensure_transition_allowed(current: str, requested: str) -> None:
    """
    Raise InvalidBatchTransitionError unless current -> requested is a lifecycle edge.
    """

    if requested == current:
        return
    if requested not in BATCH_STATUS_TRANSITIONS.get(current, frozenset()):
        raise InvalidBatchTransitionError(current=current, requested=requested)


class ImportBatchRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_batch(
        self,
        *,
        tenant_id: uuid.UUID,
        import_type: str,
        total_rows: int,
        column_mapping: Mapping[str, str],
        file_name: str | None = None,
    ) -> ImportBatch:
        batch = ImportBatch(
            tenant_id=tenant_id,
            import_type=import_type,
            file_name=file_name,
            total_rows=total_rows,
            column_mapping=dict(column_mapping),
            success_count=0,
            failed_count=0,
            error_log=[],
            status=ImportBatchStatus.PENDING,
        )
        with self._write("create import batch"):
            self._session.add(batch)
            self._session.flush()
        self._session.refresh(batch)
        return batch

    def update_batch(self, batch_id: uuid.UUID, tenant_id: uuid.UUID, **fields: Any) -> None:
        unknown = set(fields) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Import batch fields are not updatable: {sorted(unknown)}")

        batch = self.get_batch(batch_id, tenant_id)
        if batch is None:
            raise BatchPersistenceError(f"Import batch not found: {batch_id}")

        if "status" in fields:
            ensure_transition_allowed(batch.status, fields["status"])

        with self._write("update import batch"):
            for name, value in fields.items():
                setattr(batch, name, value)

    def get_batch(self, batch_id: uuid.UUID, tenant_id: uuid.UUID) -> ImportBatch | None:
        stmt = select(ImportBatch).where(
            ImportBatch.id == batch_id,
            ImportBatch.tenant_id == tenant_id,
        )
        return self._session.scalars(stmt).first()

    def list_history(self, tenant_id: uuid.UUID, *, limit: int = 50) -> list[ImportBatch]:
        stmt: Select[tuple[ImportBatch]] = (
            select(ImportBatch)
            .where(ImportBatch.tenant_id == tenant_id)
            .order_by(ImportBatch.created_at.desc())
            .limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())

    def transition_status(
        self,
        batch_id: uuid.UUID,
        tenant_id: uuid.UUID,
        *,
        from_statuses: Collection[str],
        to_status: str,
    ) -> bool:
        """
        Compare-and-set the batch status.

        Returns False when the stored status is no longer one of from_statuses,
        meaning another caller moved the batch first.
        """

        for current in from_statuses:
            ensure_transition_allowed(current, to_status)

        stmt = (
            update(ImportBatch)
            .where(
                ImportBatch.id == batch_id,
                ImportBatch.tenant_id == tenant_id,
                ImportBatch.status.in_(list(from_statuses)),
            )
            .values(status=to_status)
            .execution_options(synchronize_session="fetch")
        )
        with self._write("transition import batch status"):
            result = self._session.execute(stmt)
        return result.rowcount == 1

    @contextmanager
    def _write(self, action: str) -> Iterator[None]:
        try:
            yield
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise BatchPersistenceError(f"Failed to {action}.") from exc
