"""
Repository layer exports.
"""

from db.repositories.errors import (
    BatchPersistenceError,
    InvalidBatchTransitionError,
    RecordStoreError,
    RepositoryError,
    SalonInactiveError,
    SalonNotFoundError,
    UnknownCollectionError,
)
from db.repositories.import_batch_repository import ImportBatchRepository, ImportBatchStore
from db.repositories.record_store import RecordStore, SQLAlchemyRecordStore
from db.repositories.salon_repository import SalonRepository

__all__ = [
    "BatchPersistenceError",
    "ImportBatchRepository",
    "ImportBatchStore",
    "InvalidBatchTransitionError",
    "RecordStore",
    "RecordStoreError",
    "RepositoryError",
    "SQLAlchemyRecordStore",
    "SalonInactiveError",
    "SalonNotFoundError",
    "SalonRepository",
    "UnknownCollectionError",
]
