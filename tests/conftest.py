"""
tests/conftest.py

Shared pytest fixtures for the import pipeline tests.
"""

from __future__ import annotations

import uuid

import pytest

from tests.fakes import InMemoryBatchStore, InMemoryRecordStore


@pytest.fixture()
def tenant_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture()
def batch_store() -> InMemoryBatchStore:
    return InMemoryBatchStore()


@pytest.fixture()
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()
