"""
app/mappers package marker.
"""

from app.mappers.column_mapping import (
    apply_preset,
    get_preset,
    normalize_header,
    presets_for,
    suggest_mapping,
)
from app.mappers.import_presets import IMPORT_PRESETS, ImportPreset

__all__ = [
    "IMPORT_PRESETS",
    "ImportPreset",
    "apply_preset",
    "get_preset",
    "normalize_header",
    "presets_for",
    "suggest_mapping",
]
