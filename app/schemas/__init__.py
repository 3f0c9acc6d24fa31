"""
app/schemas package marker.
"""

from app.schemas.data_import import (
    ColumnMappingResponse,
    ExecuteImportRequest,
    ImportBatchResponse,
    ImportExecutionResponse,
    ImportHistoryResponse,
    ImportPresetListResponse,
    ImportPresetResponse,
    RollbackResponse,
    RowImportErrorResponse,
    SuggestMappingRequest,
    TargetFieldListResponse,
    TargetFieldResponse,
    ValidatedRowResponse,
    ValidateRowsRequest,
    ValidationSummaryResponse,
)

__all__ = [
    "ColumnMappingResponse",
    "ExecuteImportRequest",
    "ImportBatchResponse",
    "ImportExecutionResponse",
    "ImportHistoryResponse",
    "ImportPresetListResponse",
    "ImportPresetResponse",
    "RollbackResponse",
    "RowImportErrorResponse",
    "SuggestMappingRequest",
    "TargetFieldListResponse",
    "TargetFieldResponse",
    "ValidatedRowResponse",
    "ValidateRowsRequest",
    "ValidationSummaryResponse",
]
