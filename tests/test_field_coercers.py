from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from app.validators.field_coercers import (
    DATETIME_ERROR,
    DURATION_ERROR,
    EMAIL_ERROR,
    PHONE_ERROR,
    PRICE_ERROR,
    FieldCoercionError,
    FieldKind,
    coerce_datetime,
    coerce_duration_minutes,
    coerce_email,
    coerce_phone,
    coerce_price_cents,
    coerce_value,
)


class TestPriceCoercion(unittest.TestCase):
    def test_decimal_amount_is_major_units(self) -> None:
        self.assertEqual(coerce_price_cents("45.00"), 4500)

    def test_large_integer_is_already_minor_units(self) -> None:
        self.assertEqual(coerce_price_cents("15000"), 15000)

    def test_small_integer_is_major_units(self) -> None:
        self.assertEqual(coerce_price_cents("500"), 50000)

    def test_threshold_boundary(self) -> None:
        self.assertEqual(coerce_price_cents("9999"), 999900)
        self.assertEqual(coerce_price_cents("10000"), 10000)

    def test_comma_decimal_and_currency_symbols(self) -> None:
        self.assertEqual(coerce_price_cents("kr 299,50"), 29950)
        self.assertEqual(coerce_price_cents("€12.5"), 1250)

    def test_zero_is_a_valid_price(self) -> None:
        self.assertEqual(coerce_price_cents("0"), 0)

    def test_rounds_half_up(self) -> None:
        self.assertEqual(coerce_price_cents("0.125"), 13)

    def test_unparseable_price(self) -> None:
        with self.assertRaises(FieldCoercionError) as ctx:
            coerce_price_cents("free")
        self.assertEqual(ctx.exception.message, PRICE_ERROR)

    def test_amount_beyond_float_range_fails(self) -> None:
        for raw in ("9" * 400, "9" * 400 + ".50"):
            with self.subTest(digits=len(raw)):
                with self.assertRaises(FieldCoercionError) as ctx:
                    coerce_price_cents(raw)
                self.assertEqual(ctx.exception.message, PRICE_ERROR)


class TestDateTimeCoercion(unittest.TestCase):
    def test_year_first_pattern(self) -> None:
        self.assertEqual(
            coerce_datetime("2024-01-15 10:30"),
            datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        )

    def test_day_first_slash_pattern_matches_same_instant(self) -> None:
        self.assertEqual(coerce_datetime("15/01/2024 10:30"), coerce_datetime("2024-01-15 10:30"))

    def test_dot_separator(self) -> None:
        self.assertEqual(
            coerce_datetime("3.4.2024 09:05"),
            datetime(2024, 4, 3, 9, 5, tzinfo=timezone.utc),
        )

    def test_ambiguous_date_is_day_first(self) -> None:
        self.assertEqual(coerce_datetime("03/04/2024 12:00").month, 4)

    def test_iso_with_offset_is_converted_to_utc(self) -> None:
        self.assertEqual(
            coerce_datetime("2024-01-15T10:30:00+02:00"),
            datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc),
        )

    def test_iso_zulu_suffix(self) -> None:
        self.assertEqual(
            coerce_datetime("2024-01-15T10:30:00Z"),
            datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        )

    def test_naive_value_uses_given_timezone(self) -> None:
        parsed = coerce_datetime("2024-01-15 10:30", tz=ZoneInfo("Europe/Helsinki"))
        self.assertEqual(parsed, datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc))
        self.assertEqual(parsed.utcoffset(), timedelta(0))

    def test_out_of_range_first_group_fails(self) -> None:
        with self.assertRaises(FieldCoercionError) as ctx:
            coerce_datetime("99/01/2024 10:30")
        self.assertEqual(ctx.exception.message, DATETIME_ERROR)

    def test_impossible_calendar_date_fails(self) -> None:
        with self.assertRaises(FieldCoercionError):
            coerce_datetime("31/02/2024 10:30")

    def test_free_text_fails(self) -> None:
        with self.assertRaises(FieldCoercionError):
            coerce_datetime("next tuesday")

    def test_calendar_edge_offsets_fail(self) -> None:
        for raw in ("0001-01-01T00:00:00+05:00", "9999-12-31T23:59:00-05:00"):
            with self.subTest(raw=raw):
                with self.assertRaises(FieldCoercionError) as ctx:
                    coerce_datetime(raw)
                self.assertEqual(ctx.exception.message, DATETIME_ERROR)

    def test_naive_calendar_edge_in_local_zone_fails(self) -> None:
        with self.assertRaises(FieldCoercionError):
            coerce_datetime("0001-01-01 00:00", tz=ZoneInfo("Asia/Tokyo"))


class TestContactCoercion(unittest.TestCase):
    def test_valid_email(self) -> None:
        self.assertEqual(coerce_email(" anna@salon.fi "), "anna@salon.fi")

    def test_invalid_email(self) -> None:
        for raw in ("anna", "anna@salon", "an na@salon.fi", "@salon.fi"):
            with self.subTest(raw=raw):
                with self.assertRaises(FieldCoercionError) as ctx:
                    coerce_email(raw)
                self.assertEqual(ctx.exception.message, EMAIL_ERROR)

    def test_valid_phone(self) -> None:
        self.assertEqual(coerce_phone("+358 (40) 123-4567"), "+358 (40) 123-4567")
        self.assertEqual(coerce_phone("555-1234"), "555-1234")

    def test_phone_with_too_few_digits(self) -> None:
        with self.assertRaises(FieldCoercionError) as ctx:
            coerce_phone("12345")
        self.assertEqual(ctx.exception.message, PHONE_ERROR)

    def test_phone_with_letters(self) -> None:
        with self.assertRaises(FieldCoercionError):
            coerce_phone("040 123 4567 ext")


class TestDurationCoercion(unittest.TestCase):
    def test_plain_integer(self) -> None:
        self.assertEqual(coerce_duration_minutes("45"), 45)

    def test_leading_integer_with_unit(self) -> None:
        self.assertEqual(coerce_duration_minutes("60 min"), 60)

    def test_zero_and_negative_rejected(self) -> None:
        for raw in ("0", "-15", "min"):
            with self.subTest(raw=raw):
                with self.assertRaises(FieldCoercionError) as ctx:
                    coerce_duration_minutes(raw)
                self.assertEqual(ctx.exception.message, DURATION_ERROR)


class TestCoerceValueDispatch(unittest.TestCase):
    def test_text_is_trimmed(self) -> None:
        self.assertEqual(coerce_value(FieldKind.TEXT, "  Anna  "), "Anna")

    def test_dispatches_by_kind(self) -> None:
        self.assertEqual(coerce_value(FieldKind.MONEY, "45.00"), 4500)
        self.assertEqual(coerce_value(FieldKind.DURATION, "30"), 30)


if __name__ == "__main__":
    unittest.main()
