"""
tests/test_import_rollback.py

Pytest unit tests for ImportRollbackManager and the batch lifecycle guard.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from app.services.import_rollback import (
    ImportRollbackManager,
    RollbackDeletionError,
    RollbackEligibilityError,
)
from db.models.import_batch import ImportBatchStatus
from db.repositories.errors import InvalidBatchTransitionError, RecordStoreError
from db.repositories.import_batch_repository import ensure_transition_allowed
from tests.fakes import InMemoryBatchStore, InMemoryRecordStore

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def manager(batch_store: InMemoryBatchStore, record_store: InMemoryRecordStore) -> ImportRollbackManager:
    return ImportRollbackManager(batches=batch_store, records=record_store, clock=lambda: NOW)


def _seed_imported_rows(record_store: InMemoryRecordStore, tenant_id: uuid.UUID, batch_id: uuid.UUID) -> None:
    record_store.seed("customers", tenant_id, full_name="Anna", import_batch_id=batch_id)
    record_store.seed("customers", tenant_id, full_name="Bo", import_batch_id=batch_id)
    record_store.seed("customers", tenant_id, full_name="Kept", import_batch_id=None)


class TestSuccessfulRollback:
    def test_deletes_tagged_rows_and_flips_status(
        self,
        manager: ImportRollbackManager,
        batch_store: InMemoryBatchStore,
        record_store: InMemoryRecordStore,
        tenant_id: uuid.UUID,
    ) -> None:
        batch = batch_store.add(tenant_id=tenant_id, created_at=NOW - timedelta(days=2))
        _seed_imported_rows(record_store, tenant_id, batch.id)

        result = manager.rollback(tenant_id=tenant_id, batch_id=batch.id)

        assert result.deleted_rows == 2
        assert result.collection == "customers"
        assert batch.status == ImportBatchStatus.ROLLED_BACK
        assert [record["full_name"] for record in record_store.records["customers"]] == ["Kept"]

    def test_failed_batch_can_be_rolled_back(
        self,
        manager: ImportRollbackManager,
        batch_store: InMemoryBatchStore,
        tenant_id: uuid.UUID,
    ) -> None:
        batch = batch_store.add(
            tenant_id=tenant_id,
            import_type="bookings",
            status=ImportBatchStatus.FAILED,
            created_at=NOW - timedelta(days=1),
        )

        result = manager.rollback(tenant_id=tenant_id, batch_id=batch.id)

        assert result.collection == "bookings"
        assert batch.status == ImportBatchStatus.ROLLED_BACK

    def test_naive_created_at_is_treated_as_utc(
        self,
        manager: ImportRollbackManager,
        batch_store: InMemoryBatchStore,
        tenant_id: uuid.UUID,
    ) -> None:
        batch = batch_store.add(tenant_id=tenant_id, created_at=(NOW - timedelta(days=6)).replace(tzinfo=None))

        manager.rollback(tenant_id=tenant_id, batch_id=batch.id)

        assert batch.status == ImportBatchStatus.ROLLED_BACK


class TestEligibilityGuards:
    def test_window_expired(
        self,
        manager: ImportRollbackManager,
        batch_store: InMemoryBatchStore,
        record_store: InMemoryRecordStore,
        tenant_id: uuid.UUID,
    ) -> None:
        batch = batch_store.add(tenant_id=tenant_id, created_at=NOW - timedelta(days=8))
        _seed_imported_rows(record_store, tenant_id, batch.id)

        with pytest.raises(RollbackEligibilityError) as exc_info:
            manager.rollback(tenant_id=tenant_id, batch_id=batch.id)

        assert exc_info.value.message == "Rollback window expired (7 days)"
        assert exc_info.value.code == RollbackEligibilityError.WINDOW_EXPIRED
        assert batch.status == ImportBatchStatus.COMPLETED
        assert len(record_store.records["customers"]) == 3

    def test_already_rolled_back(
        self,
        manager: ImportRollbackManager,
        batch_store: InMemoryBatchStore,
        tenant_id: uuid.UUID,
    ) -> None:
        batch = batch_store.add(tenant_id=tenant_id, status=ImportBatchStatus.ROLLED_BACK)

        with pytest.raises(RollbackEligibilityError, match="Already rolled back"):
            manager.rollback(tenant_id=tenant_id, batch_id=batch.id)

        assert batch.status == ImportBatchStatus.ROLLED_BACK
        assert batch_store.updates == []

    @pytest.mark.parametrize("status", [ImportBatchStatus.PENDING, ImportBatchStatus.PROCESSING])
    def test_in_progress_batch_is_rejected(
        self,
        status: str,
        manager: ImportRollbackManager,
        batch_store: InMemoryBatchStore,
        tenant_id: uuid.UUID,
    ) -> None:
        batch = batch_store.add(tenant_id=tenant_id, status=status, created_at=NOW)

        with pytest.raises(RollbackEligibilityError) as exc_info:
            manager.rollback(tenant_id=tenant_id, batch_id=batch.id)

        assert exc_info.value.code == RollbackEligibilityError.IN_PROGRESS
        assert batch.status == status

    def test_not_found(self, manager: ImportRollbackManager, tenant_id: uuid.UUID) -> None:
        with pytest.raises(RollbackEligibilityError, match="Import batch not found"):
            manager.rollback(tenant_id=tenant_id, batch_id=uuid.uuid4())

    def test_other_tenant_batch_is_not_found(
        self,
        manager: ImportRollbackManager,
        batch_store: InMemoryBatchStore,
        tenant_id: uuid.UUID,
    ) -> None:
        batch = batch_store.add(tenant_id=uuid.uuid4(), created_at=NOW)

        with pytest.raises(RollbackEligibilityError) as exc_info:
            manager.rollback(tenant_id=tenant_id, batch_id=batch.id)

        assert exc_info.value.code == RollbackEligibilityError.NOT_FOUND

    def test_unknown_import_type(
        self,
        manager: ImportRollbackManager,
        batch_store: InMemoryBatchStore,
        tenant_id: uuid.UUID,
    ) -> None:
        batch = batch_store.add(tenant_id=tenant_id, import_type="invoices", created_at=NOW)

        with pytest.raises(RollbackEligibilityError, match="Unknown import type"):
            manager.rollback(tenant_id=tenant_id, batch_id=batch.id)

        assert batch.status == ImportBatchStatus.COMPLETED


class TestDeletionFailure:
    def test_store_error_leaves_batch_unchanged(
        self,
        manager: ImportRollbackManager,
        batch_store: InMemoryBatchStore,
        record_store: InMemoryRecordStore,
        tenant_id: uuid.UUID,
    ) -> None:
        batch = batch_store.add(tenant_id=tenant_id, created_at=NOW)
        record_store.delete_error = RecordStoreError("permission denied for table customers")

        with pytest.raises(RollbackDeletionError, match="permission denied for table customers"):
            manager.rollback(tenant_id=tenant_id, batch_id=batch.id)

        assert batch.status == ImportBatchStatus.COMPLETED
        assert batch_store.updates == []


class TestBatchLifecycle:
    @pytest.mark.parametrize(
        ("current", "requested"),
        [
            (ImportBatchStatus.PENDING, ImportBatchStatus.PROCESSING),
            (ImportBatchStatus.PROCESSING, ImportBatchStatus.COMPLETED),
            (ImportBatchStatus.PROCESSING, ImportBatchStatus.FAILED),
            (ImportBatchStatus.COMPLETED, ImportBatchStatus.ROLLED_BACK),
            (ImportBatchStatus.FAILED, ImportBatchStatus.ROLLED_BACK),
        ],
    )
    def test_allowed_transitions(self, current: str, requested: str) -> None:
        ensure_transition_allowed(current, requested)

    @pytest.mark.parametrize(
        ("current", "requested"),
        [
            (ImportBatchStatus.PENDING, ImportBatchStatus.COMPLETED),
            (ImportBatchStatus.COMPLETED, ImportBatchStatus.PROCESSING),
            (ImportBatchStatus.ROLLED_BACK, ImportBatchStatus.COMPLETED),
            (ImportBatchStatus.PROCESSING, ImportBatchStatus.ROLLED_BACK),
        ],
    )
    def test_rejected_transitions(self, current: str, requested: str) -> None:
        with pytest.raises(InvalidBatchTransitionError):
            ensure_transition_allowed(current, requested)
