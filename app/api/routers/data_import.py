"""
app/api/routers/data_import.py

Bulk data-import HTTP endpoints.
"""

from __future__ import annotations

from typing import Iterable
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_tenant_id
from app.domain.data_import import ImportType, RowImportError, ValidationResult
from app.mappers.column_mapping import apply_preset, get_preset, presets_for, suggest_mapping
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
from app.services.data_import_service import DataImportService, ImportRequestError, get_data_import_service
from app.services.error_report import render_error_csv
from app.services.import_orchestrator import ImportPipelineError, NoValidRowsError
from app.services.import_registry import UnknownImportTypeError, get_import_type_spec, parse_import_type
from app.services.import_rollback import RollbackDeletionError, RollbackEligibilityError
from db.models.import_batch import ImportBatch
from db.session import get_db

router = APIRouter(prefix="/imports", tags=["data-import"])

# Starlette renamed the 422 constant; the literal is stable across releases.
_HTTP_422_UNPROCESSABLE = 422

_ROLLBACK_STATUS_CODES: dict[str, int] = {
    RollbackEligibilityError.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RollbackEligibilityError.ALREADY_ROLLED_BACK: status.HTTP_409_CONFLICT,
    RollbackEligibilityError.IN_PROGRESS: status.HTTP_409_CONFLICT,
    RollbackEligibilityError.WINDOW_EXPIRED: status.HTTP_410_GONE,
    RollbackEligibilityError.UNKNOWN_IMPORT_TYPE: _HTTP_422_UNPROCESSABLE,
}


# ---------------------------------------------------------------------------
# Batch history and rollback
# ---------------------------------------------------------------------------


@router.get("/batches", response_model=ImportHistoryResponse)
def list_import_batches(
    limit: int | None = Query(default=None, ge=1, le=500, description="Max batches returned, newest first"),
    tenant_id: UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    import_service: DataImportService = Depends(get_data_import_service),
) -> ImportHistoryResponse:
    batches = import_service.get_history(db=db, tenant_id=tenant_id, limit=limit)
    return ImportHistoryResponse(batches=[_to_batch_response(batch) for batch in batches])


@router.get("/batches/{batch_id}", response_model=ImportBatchResponse)
def get_import_batch(
    batch_id: UUID,
    tenant_id: UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    import_service: DataImportService = Depends(get_data_import_service),
) -> ImportBatchResponse:
    return _to_batch_response(_require_batch(import_service, db=db, tenant_id=tenant_id, batch_id=batch_id))


@router.get("/batches/{batch_id}/errors.csv")
def download_batch_errors(
    batch_id: UUID,
    tenant_id: UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    import_service: DataImportService = Depends(get_data_import_service),
) -> Response:
    batch = _require_batch(import_service, db=db, tenant_id=tenant_id, batch_id=batch_id)
    return _csv_response(render_error_csv(batch.error_log or []), f"import_errors_{batch_id}.csv")


@router.post("/batches/{batch_id}/rollback", response_model=RollbackResponse)
def rollback_import_batch(
    batch_id: UUID,
    tenant_id: UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    import_service: DataImportService = Depends(get_data_import_service),
) -> RollbackResponse:
    """
    Delete every row created by the batch and mark it rolled back.
    """

    try:
        result, batch = import_service.rollback(db=db, tenant_id=tenant_id, batch_id=batch_id)
    except RollbackEligibilityError as exc:
        raise HTTPException(
            status_code=_ROLLBACK_STATUS_CODES.get(exc.code, status.HTTP_400_BAD_REQUEST),
            detail=exc.message,
        ) from exc
    except RollbackDeletionError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except ImportPipelineError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    return RollbackResponse(batch=_to_batch_response(batch), deleted_rows=result.deleted_rows)


# ---------------------------------------------------------------------------
# Mapping assistant and validation
# ---------------------------------------------------------------------------


@router.get("/{import_type}/fields", response_model=TargetFieldListResponse)
def list_target_fields(import_type: str) -> TargetFieldListResponse:
    resolved = _resolve_import_type(import_type)
    spec = get_import_type_spec(resolved)
    return TargetFieldListResponse(
        import_type=resolved.value,
        fields=[
            TargetFieldResponse(
                key=field.key,
                label=field.label,
                kind=field.kind,
                required=field.required,
                aliases=list(field.aliases),
            )
            for field in spec.fields
        ],
    )


@router.get("/{import_type}/presets", response_model=ImportPresetListResponse)
def list_presets(import_type: str) -> ImportPresetListResponse:
    resolved = _resolve_import_type(import_type)
    return ImportPresetListResponse(
        presets=[
            ImportPresetResponse(
                id=preset.id,
                name=preset.name,
                import_type=preset.import_type.value,
                mappings=dict(preset.mappings),
            )
            for preset in presets_for(resolved)
        ]
    )


@router.post("/{import_type}/suggest-mapping", response_model=ColumnMappingResponse)
def suggest_column_mapping(import_type: str, payload: SuggestMappingRequest) -> ColumnMappingResponse:
    resolved = _resolve_import_type(import_type)
    mapping = suggest_mapping(payload.headers, resolved)

    if payload.preset_id:
        preset = get_preset(payload.preset_id)
        if preset is None or preset.import_type != resolved:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Preset not found for {resolved.value}: {payload.preset_id}",
            )
        mapping = apply_preset(payload.headers, preset, mapping)

    return ColumnMappingResponse(mapping=mapping)


@router.post("/{import_type}/validate", response_model=ValidationSummaryResponse)
def validate_import_rows(
    import_type: str,
    payload: ValidateRowsRequest,
    import_service: DataImportService = Depends(get_data_import_service),
) -> ValidationSummaryResponse:
    result = _validate(import_service, import_type, payload)
    return ValidationSummaryResponse(
        total_rows=result.total_rows,
        valid_count=len(result.valid_rows),
        error_count=len(result.error_rows),
        valid_rows=[ValidatedRowResponse(row_index=row.row_index, data=row.data) for row in result.valid_rows],
        errors=_to_error_responses(result.errors),
    )


@router.post("/{import_type}/validate/errors.csv")
def download_validation_errors(
    import_type: str,
    payload: ValidateRowsRequest,
    import_service: DataImportService = Depends(get_data_import_service),
) -> Response:
    result = _validate(import_service, import_type, payload)
    return _csv_response(render_error_csv(result.errors), f"import_errors_{import_type}.csv")


# ---------------------------------------------------------------------------
# Import execution
# ---------------------------------------------------------------------------


@router.post(
    "/{import_type}",
    status_code=status.HTTP_201_CREATED,
    response_model=ImportExecutionResponse,
)
def execute_import(
    import_type: str,
    payload: ExecuteImportRequest,
    tenant_id: UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    import_service: DataImportService = Depends(get_data_import_service),
) -> ImportExecutionResponse:
    """
    Validate the rows server-side and import every valid one.
    """

    resolved = _resolve_import_type(import_type)
    try:
        outcome = import_service.run_import(
            db=db,
            tenant_id=tenant_id,
            import_type=resolved,
            rows=payload.rows,
            mapping=payload.mapping,
            file_name=payload.file_name,
        )
    except ImportRequestError as exc:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc)) from exc
    except NoValidRowsError as exc:
        raise HTTPException(status_code=_HTTP_422_UNPROCESSABLE, detail=str(exc)) from exc
    except ImportPipelineError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    return ImportExecutionResponse(
        batch=_to_batch_response(outcome.batch),
        validation_errors=_to_error_responses(outcome.validation.errors),
        skipped_rows=len(outcome.validation.error_rows),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_import_type(import_type: str) -> ImportType:
    try:
        return parse_import_type(import_type)
    except UnknownImportTypeError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown import type") from exc


def _validate(
    import_service: DataImportService,
    import_type: str,
    payload: ValidateRowsRequest,
) -> ValidationResult:
    resolved = _resolve_import_type(import_type)
    try:
        return import_service.validate(import_type=resolved, rows=payload.rows, mapping=payload.mapping)
    except ImportRequestError as exc:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc)) from exc


def _require_batch(
    import_service: DataImportService,
    *,
    db: Session,
    tenant_id: UUID,
    batch_id: UUID,
) -> ImportBatch:
    batch = import_service.get_batch(db=db, tenant_id=tenant_id, batch_id=batch_id)
    if batch is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Import batch not found")
    return batch


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _to_error_responses(errors: Iterable[RowImportError]) -> list[RowImportErrorResponse]:
    return [RowImportErrorResponse(row=error.row, field=error.field, error=error.error) for error in errors]


def _to_batch_response(batch: ImportBatch) -> ImportBatchResponse:
    return ImportBatchResponse(
        batch_id=batch.id,
        import_type=batch.import_type,
        status=batch.status,
        file_name=batch.file_name,
        column_mapping=dict(batch.column_mapping or {}),
        total_rows=batch.total_rows,
        success_count=batch.success_count,
        failed_count=batch.failed_count,
        error_log=_to_error_responses(RowImportError.from_dict(entry) for entry in batch.error_log or []),
        created_at=batch.created_at,
        completed_at=batch.completed_at,
    )
