"""
app/services/entity_inserters.py

Insert strategies for one chunk of validated import rows.

Independent entities (customers, services, employees) go to the store in a
single bulk call per chunk, so a chunk either lands completely or fails
completely. Bookings reference other entities by display name and are
inserted one row at a time; a failing row never stops the rest of the chunk.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from typing import Any, Protocol

from app.domain.data_import import ChunkResult, RowImportError, ValidatedRow
from db.repositories.errors import RecordStoreError
from db.repositories.record_store import RecordStore

logger = logging.getLogger(__name__)

WHOLE_ROW_FIELD = "*"
DEFAULT_BOOKING_LENGTH = timedelta(minutes=60)
DEFAULT_BOOKING_STATUS = "completed"

RecordBuilder = Callable[[ValidatedRow, uuid.UUID], dict[str, Any]]


class EntityInserter(Protocol):
    collection: str

    def insert_chunk(
        self,
        *,
        store: RecordStore,
        tenant_id: uuid.UUID,
        batch_id: uuid.UUID,
        rows: Sequence[ValidatedRow],
    ) -> ChunkResult:
        ...


def _optional(data: dict[str, Any], key: str) -> Any:
    value = data.get(key)
    return value if value not in ("", None) else None


def build_customer_record(row: ValidatedRow, batch_id: uuid.UUID) -> dict[str, Any]:
    return {
        "full_name": row.data["full_name"],
        "email": _optional(row.data, "email"),
        "phone": _optional(row.data, "phone"),
        "notes": _optional(row.data, "notes"),
        "gdpr_consent": True,
        "import_batch_id": batch_id,
    }


def build_service_record(row: ValidatedRow, batch_id: uuid.UUID) -> dict[str, Any]:
    price_cents = row.data.get("price_cents")
    return {
        "name": row.data["name"],
        "duration_minutes": row.data["duration_minutes"],
        "price_cents": price_cents if price_cents is not None else 0,
        "category": _optional(row.data, "category") or "other",
        "prep_minutes": 0,
        "cleanup_minutes": 0,
        "import_batch_id": batch_id,
    }


def build_employee_record(row: ValidatedRow, batch_id: uuid.UUID) -> dict[str, Any]:
    return {
        "full_name": row.data["full_name"],
        "email": _optional(row.data, "email"),
        "role": _optional(row.data, "role") or "staff",
        "import_batch_id": batch_id,
    }


class BulkEntityInserter:
    """
    One bulk insert per chunk; the whole chunk succeeds or fails together.
    """

    def __init__(self, *, collection: str, build_record: RecordBuilder) -> None:
        self.collection = collection
        self._build_record = build_record

    def insert_chunk(
        self,
        *,
        store: RecordStore,
        tenant_id: uuid.UUID,
        batch_id: uuid.UUID,
        rows: Sequence[ValidatedRow],
    ) -> ChunkResult:
        if not rows:
            return ChunkResult()

        records = [self._build_record(row, batch_id) for row in rows]
        try:
            store.bulk_insert(self.collection, tenant_id, records)
        except RecordStoreError as exc:
            logger.warning(
                "Bulk insert failed collection=%s batch_id=%s rows=%d: %s",
                self.collection,
                batch_id,
                len(rows),
                exc,
            )
            return ChunkResult(
                successes=0,
                failures=[
                    RowImportError(row=row.display_row, field=WHOLE_ROW_FIELD, error=str(exc))
                    for row in rows
                ],
            )
        return ChunkResult(successes=len(rows))


class _NameResolver:
    """
    Case-insensitive display-name -> id lookups, memoized for one chunk.
    """

    def __init__(self, store: RecordStore, tenant_id: uuid.UUID) -> None:
        self._store = store
        self._tenant_id = tenant_id
        self._cache: dict[tuple[str, str], uuid.UUID | None] = {}

    def resolve(self, collection: str, name: Any) -> uuid.UUID | None:
        if not name:
            return None
        key = (collection, str(name).strip().lower())
        if key not in self._cache:
            self._cache[key] = self._store.find_id_by_name(collection, self._tenant_id, str(name))
        return self._cache[key]


class BookingInserter:
    """
    Row-by-row booking insert with customer / service / employee name resolution.

    Unknown names resolve to NULL references without raising an error.
    """

    collection = "bookings"

    def insert_chunk(
        self,
        *,
        store: RecordStore,
        tenant_id: uuid.UUID,
        batch_id: uuid.UUID,
        rows: Sequence[ValidatedRow],
    ) -> ChunkResult:
        result = ChunkResult()
        resolver = _NameResolver(store, tenant_id)

        for row in rows:
            try:
                record = self._build_record(row=row, batch_id=batch_id, resolver=resolver)
                store.bulk_insert(self.collection, tenant_id, [record])
            except Exception as exc:  # noqa: BLE001
                result.failures.append(
                    RowImportError(
                        row=row.display_row,
                        field=WHOLE_ROW_FIELD,
                        error=str(exc) or "Unknown",
                    )
                )
                continue
            result.successes += 1

        return result

    def _build_record(
        self,
        *,
        row: ValidatedRow,
        batch_id: uuid.UUID,
        resolver: _NameResolver,
    ) -> dict[str, Any]:
        start_time: datetime = row.data["start_time"]
        end_time: datetime | None = row.data.get("end_time")
        return {
            "customer_id": resolver.resolve("customers", row.data.get("customer_name")),
            "service_id": resolver.resolve("services", row.data.get("service_name")),
            "employee_id": resolver.resolve("employees", row.data.get("employee_name")),
            "start_time": start_time,
            "end_time": end_time or start_time + DEFAULT_BOOKING_LENGTH,
            "status": _optional(row.data, "status") or DEFAULT_BOOKING_STATUS,
            "is_walk_in": False,
            "is_imported": True,
            "import_batch_id": batch_id,
        }
