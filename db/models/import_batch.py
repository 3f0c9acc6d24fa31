"""
db/models/import_batch.py

Import batch model: one row per bulk import attempt.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class ImportBatchStatus:
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    ROLLED_BACK = "rolled_back"


# Allowed status moves; anything else is rejected by the repository.
BATCH_STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    ImportBatchStatus.PENDING: frozenset({ImportBatchStatus.PROCESSING}),
    ImportBatchStatus.PROCESSING: frozenset({ImportBatchStatus.COMPLETED, ImportBatchStatus.FAILED}),
    ImportBatchStatus.COMPLETED: frozenset({ImportBatchStatus.ROLLED_BACK}),
    ImportBatchStatus.FAILED: frozenset({ImportBatchStatus.ROLLED_BACK}),
    ImportBatchStatus.ROLLED_BACK: frozenset(),
}


class ImportBatch(Base, TimestampMixin):
    __tablename__ = "import_batches"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("salons.id", ondelete="CASCADE"),
        nullable=False,
    )
    import_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="customers, services, employees, bookings",
    )
    file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    column_mapping: Mapped[dict[str, str]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        comment="Source column -> target field key",
    )
    total_rows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    success_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_log: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        comment="Ordered list of {row, field, error}",
    )
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=ImportBatchStatus.PENDING,
        comment="pending → processing → completed | failed → rolled_back",
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_import_batches_tenant_created_at", "tenant_id", "created_at"),
        Index("ix_import_batches_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<ImportBatch id={self.id} import_type={self.import_type!r} "
            f"status={self.status!r}>"
        )
