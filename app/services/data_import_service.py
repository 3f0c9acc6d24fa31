"""
app/services/data_import_service.py

Service layer for the bulk data-import workflow.

Wires the row validator, the chunked orchestrator and the rollback manager
to SQLAlchemy-backed stores for one request-scoped session. Routers talk to
this facade only.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from sqlalchemy.orm import Session

from app.config import get_data_import_settings
from app.domain.data_import import ImportType, ValidationResult
from app.services.import_orchestrator import (
    CHUNK_SIZE,
    ImportOrchestrator,
    ImportPipelineError,
    ProgressCallback,
)
from app.services.import_registry import parse_import_type
from app.services.import_rollback import ROLLBACK_WINDOW_DAYS, ImportRollbackManager, RollbackResult
from app.validators.import_row_validator import ImportRowValidator
from db.models.import_batch import ImportBatch
from db.repositories.import_batch_repository import ImportBatchRepository, ImportBatchStore
from db.repositories.record_store import RecordStore, SQLAlchemyRecordStore

logger = logging.getLogger(__name__)

BatchStoreFactory = Callable[[Session], ImportBatchStore]
RecordStoreFactory = Callable[[Session], RecordStore]


class ImportRequestError(ValueError):
    """
    Raised when an import request is rejected before validation starts.
    """


@dataclass(frozen=True)
class ImportRunResult:
    batch: ImportBatch
    validation: ValidationResult


class DataImportService:
    """
    Coordinates validation, chunked import, history lookup and rollback.
    """

    def __init__(
        self,
        *,
        max_rows: int,
        history_limit: int,
        validator: ImportRowValidator | None = None,
        batch_store_factory: BatchStoreFactory = ImportBatchRepository,
        record_store_factory: RecordStoreFactory = SQLAlchemyRecordStore,
        chunk_size: int = CHUNK_SIZE,
        rollback_window_days: int = ROLLBACK_WINDOW_DAYS,
    ) -> None:
        self._max_rows = max(1, max_rows)
        self._history_limit = max(1, history_limit)
        self._validator = validator or ImportRowValidator()
        self._batch_store_factory = batch_store_factory
        self._record_store_factory = record_store_factory
        self._chunk_size = chunk_size
        self._rollback_window_days = rollback_window_days

    def validate(
        self,
        *,
        import_type: ImportType | str,
        rows: Sequence[Mapping[str, Any]],
        mapping: Mapping[str, str],
    ) -> ValidationResult:
        resolved = parse_import_type(import_type)
        if len(rows) > self._max_rows:
            raise ImportRequestError(f"Too many rows: {len(rows)} (limit {self._max_rows})")
        return self._validator.validate_rows(resolved, rows, mapping)

    def run_import(
        self,
        *,
        db: Session,
        tenant_id: uuid.UUID,
        import_type: ImportType | str,
        rows: Sequence[Mapping[str, Any]],
        mapping: Mapping[str, str],
        file_name: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ImportRunResult:
        """
        Validate raw rows, import the valid ones and return the finalized batch.

        Raises NoValidRowsError when no row survives validation.
        """

        validation = self.validate(import_type=import_type, rows=rows, mapping=mapping)
        orchestrator = ImportOrchestrator(
            batches=self._batch_store_factory(db),
            records=self._record_store_factory(db),
            chunk_size=self._chunk_size,
        )
        batch = orchestrator.execute_import(
            tenant_id=tenant_id,
            import_type=import_type,
            valid_rows=validation.valid_rows,
            mapping=mapping,
            file_name=file_name,
            on_progress=on_progress,
        )
        return ImportRunResult(batch=batch, validation=validation)

    def rollback(
        self,
        *,
        db: Session,
        tenant_id: uuid.UUID,
        batch_id: uuid.UUID,
    ) -> tuple[RollbackResult, ImportBatch]:
        batches = self._batch_store_factory(db)
        manager = ImportRollbackManager(
            batches=batches,
            records=self._record_store_factory(db),
            window_days=self._rollback_window_days,
        )
        result = manager.rollback(tenant_id=tenant_id, batch_id=batch_id)
        batch = batches.get_batch(batch_id, tenant_id)
        if batch is None:
            raise ImportPipelineError("Import batch not found")
        return result, batch

    def get_batch(self, *, db: Session, tenant_id: uuid.UUID, batch_id: uuid.UUID) -> ImportBatch | None:
        return self._batch_store_factory(db).get_batch(batch_id, tenant_id)

    def get_history(self, *, db: Session, tenant_id: uuid.UUID, limit: int | None = None) -> list[ImportBatch]:
        effective_limit = self._history_limit if limit is None else max(1, min(limit, self._history_limit))
        return self._batch_store_factory(db).list_history(tenant_id, limit=effective_limit)


@lru_cache(maxsize=1)
def get_data_import_service() -> DataImportService:
    """
    Build and cache the data-import service with env-driven settings.
    """
    settings = get_data_import_settings()
    return DataImportService(
        max_rows=settings.max_rows,
        history_limit=settings.history_limit,
    )
