"""
app/services/import_orchestrator.py

Chunked import orchestration.

Validated rows are written in fixed-size chunks, strictly one chunk after
another. Every insert failure is captured per row or per chunk and recorded
on the batch; the import always runs across all chunks before the batch is
finalized as completed (some rows landed) or failed (none did).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from app.domain.data_import import ChunkResult, ImportType, RowImportError, ValidatedRow
from app.services.entity_inserters import WHOLE_ROW_FIELD, EntityInserter
from app.services.import_registry import get_import_type_spec
from db.models.import_batch import ImportBatch, ImportBatchStatus
from db.repositories.errors import BatchPersistenceError
from db.repositories.import_batch_repository import ImportBatchStore
from db.repositories.record_store import RecordStore

logger = logging.getLogger(__name__)

CHUNK_SIZE = 200

ProgressCallback = Callable[[int, int], None]


class ImportPipelineError(RuntimeError):
    """
    Raised when an import cannot be started or its batch cannot be recorded.
    """


class NoValidRowsError(ImportPipelineError):
    """
    Raised when validation left nothing to import; no batch is created.
    """


class ImportOrchestrator:
    def __init__(
        self,
        *,
        batches: ImportBatchStore,
        records: RecordStore,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1.")
        self._batches = batches
        self._records = records
        self._chunk_size = chunk_size

    def execute_import(
        self,
        *,
        tenant_id: uuid.UUID,
        import_type: ImportType | str,
        valid_rows: Sequence[ValidatedRow],
        mapping: Mapping[str, str],
        file_name: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ImportBatch:
        """
        Insert validated rows chunk by chunk and return the finalized batch.
        """

        if not valid_rows:
            raise NoValidRowsError("No valid rows to import")

        spec = get_import_type_spec(import_type)
        total_rows = len(valid_rows)

        try:
            batch = self._batches.create_batch(
                tenant_id=tenant_id,
                import_type=spec.import_type.value,
                total_rows=total_rows,
                column_mapping=mapping,
                file_name=file_name,
            )
        except BatchPersistenceError as exc:
            logger.exception(
                "Import batch creation failed tenant_id=%s import_type=%s",
                tenant_id,
                spec.import_type.value,
            )
            raise ImportPipelineError("Failed to create batch") from exc

        batch_id = batch.id
        self._update(batch_id, tenant_id, status=ImportBatchStatus.PROCESSING)
        logger.info(
            "Import started batch_id=%s tenant_id=%s import_type=%s rows=%d",
            batch_id,
            tenant_id,
            spec.import_type.value,
            total_rows,
        )

        success_count = 0
        failures: list[RowImportError] = []
        processed = 0

        for chunk in _chunked(valid_rows, self._chunk_size):
            result = self._insert_chunk(spec.inserter, tenant_id=tenant_id, batch_id=batch_id, chunk=chunk)
            success_count += result.successes
            failures.extend(result.failures)
            processed += len(chunk)
            if on_progress is not None:
                on_progress(processed, total_rows)

        failed_count = len(failures)
        final_status = ImportBatchStatus.FAILED if failed_count == total_rows else ImportBatchStatus.COMPLETED
        self._finalize(
            batch_id,
            tenant_id,
            status=final_status,
            success_count=success_count,
            failed_count=failed_count,
            error_log=[failure.to_dict() for failure in failures],
            completed_at=datetime.now(timezone.utc),
        )

        logger.info(
            "Import finished batch_id=%s status=%s success=%d failed=%d",
            batch_id,
            final_status,
            success_count,
            failed_count,
        )

        finalized = self._batches.get_batch(batch_id, tenant_id)
        if finalized is None:
            raise ImportPipelineError("Import batch not found")
        return finalized

    def _insert_chunk(
        self,
        inserter: EntityInserter,
        *,
        tenant_id: uuid.UUID,
        batch_id: uuid.UUID,
        chunk: Sequence[ValidatedRow],
    ) -> ChunkResult:
        try:
            return inserter.insert_chunk(
                store=self._records,
                tenant_id=tenant_id,
                batch_id=batch_id,
                rows=chunk,
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Import chunk failed batch_id=%s rows=%d first_row=%d: %s",
                batch_id,
                len(chunk),
                chunk[0].display_row,
                exc,
            )
            message = str(exc) or "Chunk insert failed"
            return ChunkResult(
                successes=0,
                failures=[
                    RowImportError(row=row.display_row, field=WHOLE_ROW_FIELD, error=message)
                    for row in chunk
                ],
            )

    def _finalize(self, batch_id: uuid.UUID, tenant_id: uuid.UUID, **fields: Any) -> None:
        """
        Write the final status, counts and error log.

        When that write fails it is retried once without the error log, so the
        batch still leaves processing and stays eligible for rollback. If the
        retry fails too the batch is left in processing; it is logged so an
        operator can set its status by hand (completed when success_count > 0,
        otherwise failed) before rolling it back.
        """

        try:
            self._batches.update_batch(batch_id, tenant_id, **fields)
            return
        except BatchPersistenceError:
            logger.exception("Import batch finalize failed batch_id=%s, retrying without error log", batch_id)

        fallback = {name: value for name, value in fields.items() if name != "error_log"}
        try:
            self._batches.update_batch(batch_id, tenant_id, **fallback)
        except BatchPersistenceError as exc:
            logger.error(
                "Import batch stuck in processing batch_id=%s tenant_id=%s intended_status=%s "
                "success=%s failed=%s: %s",
                batch_id,
                tenant_id,
                fields.get("status"),
                fields.get("success_count"),
                fields.get("failed_count"),
                exc,
            )
            raise ImportPipelineError(f"Failed to finalize batch {batch_id}: {exc}") from exc

    def _update(self, batch_id: uuid.UUID, tenant_id: uuid.UUID, **fields: Any) -> None:
        try:
            self._batches.update_batch(batch_id, tenant_id, **fields)
        except BatchPersistenceError as exc:
            logger.exception("Import batch update failed batch_id=%s fields=%s", batch_id, sorted(fields))
            raise ImportPipelineError(f"Failed to update batch: {exc}") from exc


def _chunked(rows: Sequence[ValidatedRow], size: int) -> list[Sequence[ValidatedRow]]:
    return [rows[start : start + size] for start in range(0, len(rows), size)]
