"""
app/mappers/column_mapping.py

Column mapping assistant: header suggestions and preset application.
"""

from __future__ import annotations

import unicodedata
from typing import Mapping, Sequence

from app.domain.data_import import ImportType
from app.mappers.import_presets import IMPORT_PRESETS, ImportPreset
from app.services.import_registry import get_import_type_spec, parse_import_type


def normalize_header(header: str) -> str:
    """
    Normalize a column name for flexible matching.

    Diacritics are folded first so "Sähköposti" matches the alias "sahkoposti".
    """

    folded = unicodedata.normalize("NFKD", header.strip().lower())
    return "".join(ch for ch in folded if "a" <= ch <= "z" or "0" <= ch <= "9")


def presets_for(import_type: ImportType | str) -> list[ImportPreset]:
    resolved = parse_import_type(import_type)
    return [preset for preset in IMPORT_PRESETS if preset.import_type == resolved]


def get_preset(preset_id: str) -> ImportPreset | None:
    for preset in IMPORT_PRESETS:
        if preset.id == preset_id:
            return preset
    return None


def suggest_mapping(headers: Sequence[str], import_type: ImportType | str) -> dict[str, str]:
    """
    Suggest a target field for each header, skipping headers with no match.

    The first target field (in declaration order) whose key or any alias
    overlaps the normalized header wins.
    """

    fields = get_import_type_spec(import_type).fields
    mapping: dict[str, str] = {}

    for header in headers:
        normalized = normalize_header(header)
        if not normalized:
            continue

        for target in fields:
            key_normalized = target.key.lower().replace("_", "")
            if (
                normalized == key_normalized
                or key_normalized in normalized
                or normalized in key_normalized
                or any(alias in normalized or normalized in alias for alias in target.aliases)
            ):
                mapping[header] = target.key
                break

    return mapping


def apply_preset(
    headers: Sequence[str],
    preset: ImportPreset,
    current: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Overlay a preset onto the current mapping for the given headers.
    """

    current = current or {}
    mapping: dict[str, str] = {}
    for header in headers:
        target = preset.mappings.get(header) or current.get(header)
        if target:
            mapping[header] = target
    return mapping
