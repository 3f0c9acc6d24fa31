"""
app/domain package marker.
"""

from app.domain.data_import import ChunkResult, ImportType, RowImportError, ValidatedRow, ValidationResult

__all__ = [
    "ChunkResult",
    "ImportType",
    "RowImportError",
    "ValidatedRow",
    "ValidationResult",
]
