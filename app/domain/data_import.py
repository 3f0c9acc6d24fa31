"""
app/domain/data_import.py

Domain models used by the bulk data-import pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ImportType(str, Enum):
    """
    Closed set of entity kinds a salon can import.
    """

    CUSTOMERS = "customers"
    SERVICES = "services"
    EMPLOYEES = "employees"
    BOOKINGS = "bookings"


@dataclass(frozen=True)
class RowImportError:
    """
    One row-level problem, reported to the user with a 1-based row number.

    field is "*" when the whole row (or its whole chunk) failed to insert.
    """

    row: int
    field: str
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"row": self.row, "field": self.field, "error": self.error}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> RowImportError:
        return cls(
            row=int(payload.get("row", 0)),
            field=str(payload.get("field", "*")),
            error=str(payload.get("error", "")),
        )


@dataclass
class ValidatedRow:
    """
    One source row after mapping and coercion.

    row_index is the 0-based position of the row in the uploaded file.
    """

    row_index: int
    data: dict[str, Any] = field(default_factory=dict)
    errors: list[RowImportError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def display_row(self) -> int:
        return self.row_index + 1


@dataclass(frozen=True)
class ValidationResult:
    """
    Partition of uploaded rows into importable and rejected rows.
    """

    valid_rows: list[ValidatedRow]
    error_rows: list[ValidatedRow]

    @property
    def total_rows(self) -> int:
        return len(self.valid_rows) + len(self.error_rows)

    @property
    def errors(self) -> list[RowImportError]:
        return [error for row in self.error_rows for error in row.errors]


@dataclass
class ChunkResult:
    """
    Outcome of inserting one chunk of validated rows.
    """

    successes: int = 0
    failures: list[RowImportError] = field(default_factory=list)
