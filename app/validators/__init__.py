"""
app/validators package marker.
"""

from app.validators.field_coercers import FieldCoercionError, FieldKind, coerce_value

__all__ = [
    "FieldCoercionError",
    "FieldKind",
    "coerce_value",
]
