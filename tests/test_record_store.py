from __future__ import annotations

import unittest
import uuid
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, OperationalError

from db.repositories.errors import RecordStoreError, UnknownCollectionError
from db.repositories.record_store import SQLAlchemyRecordStore, describe_store_error


def _session() -> MagicMock:
    session = MagicMock()
    session.begin_nested.return_value.__exit__.return_value = False
    return session


class TestDescribeStoreError(unittest.TestCase):
    def test_uses_first_line_of_driver_message(self) -> None:
        exc = IntegrityError(
            "INSERT INTO customers ...",
            {},
            Exception('duplicate key value violates unique constraint "customers_pkey"\nDETAIL: Key (id)=(...)'),
        )

        self.assertEqual(
            describe_store_error(exc),
            'duplicate key value violates unique constraint "customers_pkey"',
        )


class TestSQLAlchemyRecordStore(unittest.TestCase):
    def setUp(self) -> None:
        self.session = _session()
        self.store = SQLAlchemyRecordStore(self.session)
        self.tenant_id = uuid.uuid4()

    def test_unknown_collection(self) -> None:
        with self.assertRaises(UnknownCollectionError):
            self.store.bulk_insert("invoices", self.tenant_id, [{"name": "x"}])

    def test_empty_bulk_insert_skips_session(self) -> None:
        self.assertEqual(self.store.bulk_insert("customers", self.tenant_id, []), 0)
        self.session.execute.assert_not_called()

    def test_bulk_insert_adds_tenant_and_commits(self) -> None:
        inserted = self.store.bulk_insert("customers", self.tenant_id, [{"full_name": "Anna"}])

        self.assertEqual(inserted, 1)
        _, payloads = self.session.execute.call_args.args
        self.assertEqual(payloads, [{"full_name": "Anna", "tenant_id": self.tenant_id}])
        self.session.commit.assert_called_once()

    def test_driver_failure_is_wrapped_and_rolled_back(self) -> None:
        self.session.execute.side_effect = OperationalError("INSERT", {}, Exception("server closed the connection"))

        with self.assertRaises(RecordStoreError) as ctx:
            self.store.bulk_insert("employees", self.tenant_id, [{"full_name": "Mia"}])

        self.assertEqual(str(ctx.exception), "server closed the connection")
        self.session.rollback.assert_called_once()
        self.session.commit.assert_not_called()

    def test_blank_name_lookup_returns_none(self) -> None:
        self.assertIsNone(self.store.find_id_by_name("customers", self.tenant_id, "   "))
        self.session.scalars.assert_not_called()

    def test_bookings_have_no_name_column(self) -> None:
        with self.assertRaises(UnknownCollectionError):
            self.store.find_id_by_name("bookings", self.tenant_id, "Jane")


if __name__ == "__main__":
    unittest.main()
