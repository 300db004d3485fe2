"""Tests for fixed-width pattern formatting and parsing."""

import logging

import pytest

from tempora.calendar.formatting import (
    DEFAULT_FORMAT,
    format_instant,
    parse_instant,
    tokenize_format,
)
from tempora.calendar.instant import Instant
from tempora.calendar.interop import fixed_offset
from tempora.errors import CalendarRangeError, FormatError


class TestTokenize:
    def test_known_tokens_and_literals(self):
        assert tokenize_format("yyyyMMdd HH:mm") == ["yyyy", "MM", "dd", " ", "HH", ":", "mm"]

    def test_chinese_literals(self):
        assert tokenize_format("yyyy年MM月dd日") == ["yyyy", "年", "MM", "月", "dd", "日"]

    def test_unknown_runs_are_literal(self):
        assert tokenize_format("yyy-MM") == ["yyy-", "MM"]
        assert tokenize_format("T") == ["T"]

    def test_default_format(self):
        assert tokenize_format(DEFAULT_FORMAT) == [
            "yyyy", "-", "MM", "-", "dd", " ", "HH", ":", "mm", ":", "ss",
        ]


class TestFormatInstant:
    def test_default_format(self, reference):
        assert format_instant(reference) == "2025-04-16 13:26:47"

    def test_custom_patterns(self, reference):
        assert format_instant(reference, "yyyyMMdd") == "20250416"
        assert format_instant(reference, "yyyy-MM-dd HH:mm:ss.SSS") == "2025-04-16 13:26:47.123"
        assert format_instant(reference, "yyyy年MM月dd日") == "2025年04月16日"

    def test_wall_clock_in_zone(self, reference):
        assert format_instant(reference, "yyyy-MM-dd HH:mm", tz=fixed_offset(480)) == "2025-04-16 21:26"
        assert format_instant(reference, "yyyy-MM-dd HH:mm", tz=fixed_offset(-840)) == "2025-04-15 23:26"

    def test_small_and_negative_years(self):
        assert format_instant(Instant.of_date(990101), "yyyy") == "0099"
        assert format_instant(Instant().set_year(-44), "yyyy") == "-0044"

    def test_does_not_mutate(self, reference):
        format_instant(reference, "yyyy", tz=fixed_offset(480))

        assert reference.datetime_as_num() == 20250416132647


class TestParseInstant:
    def test_default_format(self):
        instant = parse_instant("2025-04-16 13:26:47")

        assert instant.datetime_as_num() == 20250416132647
        assert instant.millisecond == 0

    def test_milliseconds(self):
        instant = parse_instant("20250416132647123", "yyyyMMddHHmmssSSS")

        assert str(instant) == "2025-04-16T13:26:47.123Z"

    def test_time_fields_default_to_zero(self):
        assert parse_instant("2025-04-16", "yyyy-MM-dd").time_as_num() == 0

    def test_missing_date_fields_come_from_base(self):
        base = Instant.of_date(20240101)

        assert parse_instant("0229", "MMdd", base=base).date_as_num() == 20240229
        assert parse_instant("13:00", "HH:mm").date_as_num() == 19700101

    def test_short_field(self):
        with pytest.raises(FormatError) as exc_info:
            parse_instant("2025-4-16", "yyyy-MM-dd")

        error = exc_info.value
        assert (error.token, error.start, error.end) == ("MM", 5, 7)
        assert "'4-'" in str(error)

    def test_truncated_input(self):
        with pytest.raises(FormatError) as exc_info:
            parse_instant("2025-04", "yyyy-MM-dd")

        assert (exc_info.value.token, exc_info.value.start, exc_info.value.end) == ("dd", 8, 10)

    def test_non_ascii_digits_rejected(self):
        with pytest.raises(FormatError):
            parse_instant("２０２５-04-16", "yyyy-MM-dd")

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_instant("abcd", "yyyy")

    @pytest.mark.parametrize(
        "text, field",
        [
            ("2025-02-30 00:00:00", "day"),
            ("2025-13-01 00:00:00", "month"),
            ("2025-00-01 00:00:00", "month"),
            ("2025-04-16 24:00:00", "hour"),
            ("2025-04-16 12:60:00", "minute"),
            ("2025-04-16 12:00:60", "second"),
        ],
    )
    def test_values_out_of_range(self, text, field):
        with pytest.raises(CalendarRangeError) as exc_info:
            parse_instant(text)

        assert exc_info.value.field == field

    def test_leap_day(self):
        assert parse_instant("2024-02-29", "yyyy-MM-dd").date_as_num() == 20240229

    def test_wall_clock_converted_to_utc(self):
        instant = parse_instant("2025-04-16 08:00", "yyyy-MM-dd HH:mm", tz=fixed_offset(480))

        assert str(instant) == "2025-04-16T00:00:00.000Z"

    def test_negative_offset_crosses_midnight(self):
        instant = parse_instant("2025-12-31 20:00", "yyyy-MM-dd HH:mm", tz=fixed_offset(-300))

        assert str(instant) == "2026-01-01T01:00:00.000Z"

    def test_format_parse_agree(self, reference):
        fmt = "yyyy-MM-dd HH:mm:ss.SSS"

        assert parse_instant(format_instant(reference, fmt), fmt) == reference

    def test_zone_shift_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="tempora.calendar.formatting"):
            parse_instant("2025-04-16 08:00", "yyyy-MM-dd HH:mm", tz=fixed_offset(480))

        assert "UTC offset" in caplog.text
