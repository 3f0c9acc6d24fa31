"""
app/services/error_report.py

CSV rendering of import errors for download.
"""

from __future__ import annotations

import csv
import io
from typing import Any, Iterable, Mapping

from app.domain.data_import import RowImportError

ERROR_CSV_HEADER: tuple[str, str, str] = ("Row", "Field", "Error")


def render_error_csv(errors: Iterable[RowImportError | Mapping[str, Any]]) -> str:
    """
    Render errors as `Row,Field,Error` CSV.

    Field and error are always quoted; the row number never is. Accepts
    RowImportError objects or the dicts stored in a batch's error_log.
    """

    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow(ERROR_CSV_HEADER)

    writer = csv.writer(buf, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for item in errors:
        error = item if isinstance(item, RowImportError) else RowImportError.from_dict(item)
        writer.writerow((error.row, error.field, error.error))

    return buf.getvalue()
