"""
Tenant-scoped record store used by the import pipeline.

Collections are addressed by name ("customers", "services", "employees",
"bookings") and every call is scoped to one tenant. Writes run inside a
SAVEPOINT and commit immediately, so one failed call never discards rows
written by earlier calls.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol, TypeVar

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.booking import Booking
from db.models.customer import Customer
from db.models.employee import Employee
from db.models.service import Service
from db.repositories.errors import RecordStoreError, UnknownCollectionError

_T = TypeVar("_T")

_COLLECTION_MODELS: dict[str, type[Customer | Service | Employee | Booking]] = {
    "customers": Customer,
    "services": Service,
    "employees": Employee,
    "bookings": Booking,
}

# Display-name column used for case-insensitive lookups.
_NAME_COLUMNS: dict[str, str] = {
    "customers": "full_name",
    "services": "name",
    "employees": "full_name",
}


class RecordStore(Protocol):
    """
    Generic tenant-scoped insert / lookup / delete capability.
    """

    def bulk_insert(
        self,
        collection: str,
        tenant_id: uuid.UUID,
        rows: Sequence[Mapping[str, Any]],
    ) -> int:
        ...

    def find_id_by_name(
        self,
        collection: str,
        tenant_id: uuid.UUID,
        name: str,
    ) -> uuid.UUID | None:
        ...

    def delete_by_import_batch(
        self,
        collection: str,
        tenant_id: uuid.UUID,
        batch_id: uuid.UUID,
    ) -> int:
        ...


def describe_store_error(exc: SQLAlchemyError) -> str:
    """
    Reduce a SQLAlchemy error to the driver's first message line.
    """

    source = getattr(exc, "orig", None) or exc
    message = str(source).strip()
    return message.splitlines()[0] if message else exc.__class__.__name__


class SQLAlchemyRecordStore:
    def __init__(self, session: Session) -> None:
        self._session = session

    def bulk_insert(
        self,
        collection: str,
        tenant_id: uuid.UUID,
        rows: Sequence[Mapping[str, Any]],
    ) -> int:
        model = self._model_for(collection)
        if not rows:
            return 0

        payloads = [{**row, "tenant_id": tenant_id} for row in rows]
        self._run_atomic(lambda: self._session.execute(insert(model), payloads))
        return len(payloads)

    def find_id_by_name(
        self,
        collection: str,
        tenant_id: uuid.UUID,
        name: str,
    ) -> uuid.UUID | None:
        model = self._model_for(collection)
        column_name = _NAME_COLUMNS.get(collection)
        if column_name is None:
            raise UnknownCollectionError(f"Collection '{collection}' has no name column.")

        needle = name.strip().lower()
        if not needle:
            return None

        stmt = (
            select(model.id)
            .where(
                model.tenant_id == tenant_id,
                func.lower(getattr(model, column_name)) == needle,
            )
            .order_by(model.created_at)
            .limit(1)
        )
        try:
            return self._session.scalars(stmt).first()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise RecordStoreError(describe_store_error(exc)) from exc

    def delete_by_import_batch(
        self,
        collection: str,
        tenant_id: uuid.UUID,
        batch_id: uuid.UUID,
    ) -> int:
        model = self._model_for(collection)
        stmt = delete(model).where(
            model.tenant_id == tenant_id,
            model.import_batch_id == batch_id,
        )
        result = self._run_atomic(lambda: self._session.execute(stmt))
        return int(result.rowcount or 0)

    def _run_atomic(self, operation: Callable[[], _T]) -> _T:
        try:
            with self._session.begin_nested():
                outcome = operation()
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise RecordStoreError(describe_store_error(exc)) from exc
        return outcome

    @staticmethod
    def _model_for(collection: str) -> type[Customer | Service | Employee | Booking]:
        model = _COLLECTION_MODELS.get(collection)
        if model is None:
            raise UnknownCollectionError(f"Unknown collection: {collection}")
        return model
