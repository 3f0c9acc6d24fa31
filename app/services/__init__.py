"""
app/services package marker.

DataImportService is imported from app.services.data_import_service directly;
it depends on app.validators, which in turn reads the import registry here.
"""

from app.services.error_report import render_error_csv
from app.services.import_orchestrator import (
    CHUNK_SIZE,
    ImportOrchestrator,
    ImportPipelineError,
    NoValidRowsError,
)
from app.services.import_registry import (
    IMPORT_TYPE_REGISTRY,
    ImportTypeSpec,
    TargetField,
    UnknownImportTypeError,
    get_import_type_spec,
    parse_import_type,
)
from app.services.import_rollback import (
    ROLLBACK_WINDOW_DAYS,
    ImportRollbackManager,
    RollbackDeletionError,
    RollbackEligibilityError,
    RollbackError,
)

__all__ = [
    "CHUNK_SIZE",
    "IMPORT_TYPE_REGISTRY",
    "ImportOrchestrator",
    "ImportPipelineError",
    "ImportRollbackManager",
    "ImportTypeSpec",
    "NoValidRowsError",
    "ROLLBACK_WINDOW_DAYS",
    "RollbackDeletionError",
    "RollbackEligibilityError",
    "RollbackError",
    "TargetField",
    "UnknownImportTypeError",
    "get_import_type_spec",
    "parse_import_type",
    "render_error_csv",
]
