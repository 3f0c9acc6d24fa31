"""
app/validators/field_coercers.py

Per-kind coercion of one raw CSV cell into a typed value.

Every coercer receives a trimmed, non-empty string and either returns the
typed value or raises FieldCoercionError carrying the user-facing message.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone, tzinfo


class FieldKind:
    TEXT = "text"
    EMAIL = "email"
    PHONE = "phone"
    DURATION = "duration"
    MONEY = "money"
    DATETIME = "datetime"


class FieldCoercionError(ValueError):
    """
    Raised when a raw cell cannot be coerced to its target field kind.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


EMAIL_ERROR = "Invalid email format"
PHONE_ERROR = "Invalid phone format"
DURATION_ERROR = "Duration must be a positive integer"
PRICE_ERROR = "Invalid price"
DATETIME_ERROR = "Could not parse date/time"

MIN_PHONE_DIGITS = 6
# Integers below this are read as major units (kroner, euros), above as cents.
MINOR_UNIT_THRESHOLD = 10_000

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_PATTERN = re.compile(r"^[+\d\s()-]+$", re.ASCII)
_LEADING_INT_PATTERN = re.compile(r"^[+-]?\d+", re.ASCII)
_LEADING_FLOAT_PATTERN = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)", re.ASCII)
_MONEY_DISCARD_PATTERN = re.compile(r"[^0-9.,]")

DATETIME_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(\d{1,2})[./](\d{1,2})[./](\d{4})\s+(\d{1,2}):(\d{2})$", re.ASCII),
    re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})\s+(\d{1,2}):(\d{2})$", re.ASCII),
)


def coerce_text(raw: str) -> str:
    return raw.strip()


def coerce_email(raw: str) -> str:
    value = raw.strip()
    if not _EMAIL_PATTERN.match(value):
        raise FieldCoercionError(EMAIL_ERROR)
    return value


def coerce_phone(raw: str) -> str:
    value = raw.strip()
    digits = sum(1 for ch in value if "0" <= ch <= "9")
    if not _PHONE_PATTERN.match(value) or digits < MIN_PHONE_DIGITS:
        raise FieldCoercionError(PHONE_ERROR)
    return value


def coerce_duration_minutes(raw: str) -> int:
    """
    Parse the leading integer of the cell ("45 min" -> 45); it must be positive.
    """

    match = _LEADING_INT_PATTERN.match(raw.strip())
    if match is None:
        raise FieldCoercionError(DURATION_ERROR)
    minutes = int(match.group(0))
    if minutes <= 0:
        raise FieldCoercionError(DURATION_ERROR)
    return minutes


def coerce_price_cents(raw: str) -> int:
    """
    Convert a price cell to minor currency units.

    Anything with a decimal point, or any number below MINOR_UNIT_THRESHOLD,
    is read as major units and multiplied by 100. Larger integers are taken
    to be minor units already. Integers between roughly 100 and 9999 are
    ambiguous between the two readings; the threshold is kept as-is.
    """

    cleaned = _MONEY_DISCARD_PATTERN.sub("", raw).replace(",", ".", 1)
    match = _LEADING_FLOAT_PATTERN.match(cleaned)
    if match is None:
        raise FieldCoercionError(PRICE_ERROR)

    amount = float(match.group(0))
    if "." in cleaned or amount < MINOR_UNIT_THRESHOLD:
        amount *= 100
    if not math.isfinite(amount):
        raise FieldCoercionError(PRICE_ERROR)
    return _round_half_up(amount)


def coerce_datetime(raw: str, *, tz: tzinfo = timezone.utc) -> datetime:
    """
    Parse an ISO-8601 value, or `D.M.YYYY HH:MM` / `D/M/YYYY HH:MM` /
    `YYYY-M-D HH:MM`, and return an aware UTC datetime.

    Naive values are interpreted in tz. For the slash/dot form the first
    number is the year when it exceeds 31, otherwise the day; `03/04/2024`
    is therefore always 3 April.
    """

    value = raw.strip()
    parsed = _parse_iso(value)
    if parsed is None:
        parsed = _parse_day_first_or_year_first(value)
    if parsed is None:
        raise FieldCoercionError(DATETIME_ERROR)

    # Values at the calendar edges can fall outside datetime's range once shifted to UTC.
    try:
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=tz)
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError) as exc:
        raise FieldCoercionError(DATETIME_ERROR) from exc


def coerce_value(kind: str, raw: str, *, tz: tzinfo = timezone.utc) -> object:
    """
    Dispatch one raw cell to the coercer for its field kind.
    """

    if kind == FieldKind.EMAIL:
        return coerce_email(raw)
    if kind == FieldKind.PHONE:
        return coerce_phone(raw)
    if kind == FieldKind.DURATION:
        return coerce_duration_minutes(raw)
    if kind == FieldKind.MONEY:
        return coerce_price_cents(raw)
    if kind == FieldKind.DATETIME:
        return coerce_datetime(raw, tz=tz)
    return coerce_text(raw)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _parse_iso(value: str) -> datetime | None:
    normalized = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _parse_day_first_or_year_first(value: str) -> datetime | None:
    for pattern in DATETIME_PATTERNS:
        match = pattern.match(value)
        if match is None:
            continue

        first, second, third, hour, minute = (int(group) for group in match.groups())
        if first > 31:
            year, month, day = first, second, third
        else:
            day, month, year = first, second, third

        try:
            return datetime(year, month, day, hour, minute)
        except ValueError:
            continue
    return None
