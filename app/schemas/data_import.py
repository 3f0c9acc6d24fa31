"""
app/schemas/data_import.py

Request and response schemas for bulk data-import endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class TargetFieldResponse(BaseModel):
    key: str
    label: str
    kind: str
    required: bool
    aliases: list[str] = Field(default_factory=list)


class TargetFieldListResponse(BaseModel):
    import_type: str
    fields: list[TargetFieldResponse] = Field(default_factory=list)


class ImportPresetResponse(BaseModel):
    id: str
    name: str
    import_type: str
    mappings: dict[str, str] = Field(default_factory=dict)


class ImportPresetListResponse(BaseModel):
    presets: list[ImportPresetResponse] = Field(default_factory=list)


class SuggestMappingRequest(BaseModel):
    headers: list[str] = Field(default_factory=list)
    preset_id: str | None = Field(
        default=None,
        description="Optional preset overlaid on top of the suggested mapping",
    )


class ColumnMappingResponse(BaseModel):
    mapping: dict[str, str] = Field(default_factory=dict)


class ValidateRowsRequest(BaseModel):
    """
    Already-tokenized CSV rows plus the column -> target field mapping.
    """

    rows: list[dict[str, Any]] = Field(default_factory=list)
    mapping: dict[str, str] = Field(default_factory=dict)


class ExecuteImportRequest(ValidateRowsRequest):
    file_name: str | None = Field(default=None, max_length=255)


class RowImportErrorResponse(BaseModel):
    row: int = Field(..., ge=1)
    field: str
    error: str


class ValidatedRowResponse(BaseModel):
    row_index: int = Field(..., ge=0)
    data: dict[str, Any] = Field(default_factory=dict)


class ValidationSummaryResponse(BaseModel):
    total_rows: int = Field(..., ge=0)
    valid_count: int = Field(..., ge=0)
    error_count: int = Field(..., ge=0)
    valid_rows: list[ValidatedRowResponse] = Field(default_factory=list)
    errors: list[RowImportErrorResponse] = Field(default_factory=list)


class ImportBatchResponse(BaseModel):
    batch_id: UUID
    import_type: str
    status: str
    file_name: str | None = None
    column_mapping: dict[str, str] = Field(default_factory=dict)
    total_rows: int = Field(..., ge=0)
    success_count: int = Field(..., ge=0)
    failed_count: int = Field(..., ge=0)
    error_log: list[RowImportErrorResponse] = Field(default_factory=list)
    created_at: datetime
    completed_at: datetime | None = None


class ImportExecutionResponse(BaseModel):
    batch: ImportBatchResponse
    validation_errors: list[RowImportErrorResponse] = Field(default_factory=list)
    skipped_rows: int = Field(..., ge=0)


class ImportHistoryResponse(BaseModel):
    batches: list[ImportBatchResponse] = Field(default_factory=list)


class RollbackResponse(BaseModel):
    batch: ImportBatchResponse
    deleted_rows: int = Field(..., ge=0)
