"""
app/validators/import_row_validator.py

Mapping, coercion and required-field validation for raw import rows.
"""

from __future__ import annotations

import logging
from datetime import timezone, tzinfo
from typing import Any, Mapping, Sequence
from zoneinfo import ZoneInfo

from app.config import get_data_import_settings
from app.domain.data_import import ImportType, RowImportError, ValidatedRow, ValidationResult
from app.services.import_registry import ImportTypeSpec, field_kind, get_import_type_spec
from app.validators.field_coercers import FieldCoercionError, coerce_value

logger = logging.getLogger(__name__)


class ImportRowValidator:
    """
    Splits raw rows into valid and rejected rows for one import type.

    Validation is deterministic and does no I/O: the same rows and mapping
    always produce the same partition and the same error messages.
    """

    def __init__(
        self,
        *,
        tz: tzinfo | None = None,
        log_validation_errors: bool | None = None,
    ) -> None:
        settings = get_data_import_settings()
        self._tz = tz if tz is not None else _resolve_timezone(settings.default_timezone)
        self._log_validation_errors = (
            settings.log_validation_errors if log_validation_errors is None else log_validation_errors
        )

    def validate_rows(
        self,
        import_type: ImportType | str,
        rows: Sequence[Mapping[str, Any]],
        mapping: Mapping[str, str],
    ) -> ValidationResult:
        spec = get_import_type_spec(import_type)
        valid_rows: list[ValidatedRow] = []
        error_rows: list[ValidatedRow] = []

        for row_index, raw_row in enumerate(rows):
            validated = self.validate_row(spec=spec, row_index=row_index, raw_row=raw_row, mapping=mapping)
            if validated.is_valid:
                valid_rows.append(validated)
            else:
                error_rows.append(validated)

        if error_rows and self._log_validation_errors:
            logger.warning(
                "Import validation rejected rows import_type=%s rejected=%d total=%d",
                spec.import_type.value,
                len(error_rows),
                len(rows),
            )

        return ValidationResult(valid_rows=valid_rows, error_rows=error_rows)

    def validate_row(
        self,
        *,
        spec: ImportTypeSpec,
        row_index: int,
        raw_row: Mapping[str, Any],
        mapping: Mapping[str, str],
    ) -> ValidatedRow:
        validated = ValidatedRow(row_index=row_index)

        for column, target_field in mapping.items():
            if not target_field:
                continue
            raw_value = self._clean(raw_row.get(column))
            if raw_value is None:
                continue
            try:
                validated.data[target_field] = coerce_value(field_kind(target_field), raw_value, tz=self._tz)
            except FieldCoercionError as exc:
                validated.errors.append(
                    RowImportError(row=validated.display_row, field=target_field, error=exc.message)
                )

        for required in spec.required_fields:
            if validated.data.get(required.key) is None:
                validated.errors.append(
                    RowImportError(
                        row=validated.display_row,
                        field=required.key,
                        error=required.required_message or f"{required.label} is required",
                    )
                )

        return validated

    @staticmethod
    def _clean(value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


def _resolve_timezone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)
