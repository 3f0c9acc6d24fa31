"""
tests/fakes.py

In-memory stand-ins for the import batch repository and the record store.

They follow the same contracts as ImportBatchRepository and
SQLAlchemyRecordStore (including lifecycle checks on status changes) so the
pipeline can be exercised without a database.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from collections.abc import Callable, Collection, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from db.models.import_batch import ImportBatch, ImportBatchStatus
from db.repositories.errors import BatchPersistenceError, RecordStoreError
from db.repositories.import_batch_repository import ensure_transition_allowed

NAME_COLUMNS = {
    "customers": "full_name",
    "services": "name",
    "employees": "full_name",
}


class InMemoryBatchStore:
    def __init__(self) -> None:
        self.batches: dict[uuid.UUID, ImportBatch] = {}
        self.updates: list[tuple[uuid.UUID, dict[str, Any]]] = []
        self.fail_create = False
        # Return True for the update fields that should fail to persist.
        self.fail_update: Callable[[dict[str, Any]], bool] | None = None

    def create_batch(
        self,
        *,
        tenant_id: uuid.UUID,
        import_type: str,
        total_rows: int,
        column_mapping: Mapping[str, str],
        file_name: str | None = None,
    ) -> ImportBatch:
        if self.fail_create:
            raise BatchPersistenceError("Failed to create import batch.")
        batch = ImportBatch(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            import_type=import_type,
            file_name=file_name,
            column_mapping=dict(column_mapping),
            total_rows=total_rows,
            success_count=0,
            failed_count=0,
            error_log=[],
            status=ImportBatchStatus.PENDING,
            created_at=datetime.now(timezone.utc),
        )
        self.batches[batch.id] = batch
        return batch

    def update_batch(self, batch_id: uuid.UUID, tenant_id: uuid.UUID, **fields: Any) -> None:
        batch = self.get_batch(batch_id, tenant_id)
        if batch is None:
            raise BatchPersistenceError(f"Import batch not found: {batch_id}")
        if self.fail_update is not None and self.fail_update(fields):
            raise BatchPersistenceError("Failed to update import batch.")
        if "status" in fields:
            ensure_transition_allowed(batch.status, fields["status"])
        for name, value in fields.items():
            setattr(batch, name, value)
        self.updates.append((batch_id, dict(fields)))

    def get_batch(self, batch_id: uuid.UUID, tenant_id: uuid.UUID) -> ImportBatch | None:
        batch = self.batches.get(batch_id)
        if batch is None or batch.tenant_id != tenant_id:
            return None
        return batch

    def list_history(self, tenant_id: uuid.UUID, *, limit: int = 50) -> list[ImportBatch]:
        owned = [batch for batch in self.batches.values() if batch.tenant_id == tenant_id]
        owned.sort(key=lambda batch: batch.created_at, reverse=True)
        return owned[:limit]

    def transition_status(
        self,
        batch_id: uuid.UUID,
        tenant_id: uuid.UUID,
        *,
        from_statuses: Collection[str],
        to_status: str,
    ) -> bool:
        batch = self.get_batch(batch_id, tenant_id)
        if batch is None or batch.status not in from_statuses:
            return False
        ensure_transition_allowed(batch.status, to_status)
        batch.status = to_status
        self.updates.append((batch_id, {"status": to_status}))
        return True

    def add(self, **fields: Any) -> ImportBatch:
        """Insert a batch in an arbitrary state, bypassing the lifecycle."""
        values: dict[str, Any] = {
            "id": uuid.uuid4(),
            "import_type": "customers",
            "file_name": None,
            "column_mapping": {},
            "total_rows": 1,
            "success_count": 1,
            "failed_count": 0,
            "error_log": [],
            "status": ImportBatchStatus.COMPLETED,
            "created_at": datetime.now(timezone.utc),
        }
        values.update(fields)
        batch = ImportBatch(**values)
        self.batches[batch.id] = batch
        return batch


class InMemoryRecordStore:
    def __init__(self) -> None:
        self.records: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.bulk_calls: list[tuple[str, int]] = []
        self.lookups: list[tuple[str, str]] = []
        # Return an exception to raise for (collection, rows), or None to accept.
        self.reject: Callable[[str, Sequence[Mapping[str, Any]]], Exception | None] | None = None
        self.delete_error: Exception | None = None

    def bulk_insert(
        self,
        collection: str,
        tenant_id: uuid.UUID,
        rows: Sequence[Mapping[str, Any]],
    ) -> int:
        self.bulk_calls.append((collection, len(rows)))
        if self.reject is not None:
            error = self.reject(collection, rows)
            if error is not None:
                raise error
        for row in rows:
            self.records[collection].append({"id": uuid.uuid4(), **row, "tenant_id": tenant_id})
        return len(rows)

    def find_id_by_name(self, collection: str, tenant_id: uuid.UUID, name: str) -> uuid.UUID | None:
        self.lookups.append((collection, name))
        column = NAME_COLUMNS[collection]
        needle = name.strip().lower()
        for record in self.records[collection]:
            if record["tenant_id"] == tenant_id and str(record.get(column, "")).lower() == needle:
                return record["id"]
        return None

    def delete_by_import_batch(self, collection: str, tenant_id: uuid.UUID, batch_id: uuid.UUID) -> int:
        if self.delete_error is not None:
            raise self.delete_error
        kept = [
            record
            for record in self.records[collection]
            if not (record["tenant_id"] == tenant_id and record.get("import_batch_id") == batch_id)
        ]
        deleted = len(self.records[collection]) - len(kept)
        self.records[collection] = kept
        return deleted

    def seed(self, collection: str, tenant_id: uuid.UUID, **values: Any) -> uuid.UUID:
        record_id = uuid.uuid4()
        self.records[collection].append({"id": record_id, "tenant_id": tenant_id, **values})
        return record_id


def reject_collection(target: str, message: str = "insert failed") -> Callable[..., Exception | None]:
    def _reject(collection: str, rows: Sequence[Mapping[str, Any]]) -> Exception | None:
        return RecordStoreError(message) if collection == target else None

    return _reject
