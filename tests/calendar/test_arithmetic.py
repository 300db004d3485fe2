"""Carry/borrow arithmetic tests for the add_* family."""

from datetime import date, datetime, timedelta

import pytest
from dateutil.relativedelta import relativedelta

from tempora.calendar.constants import INT32_MAX, INT64_MAX
from tempora.calendar.instant import Instant
from tempora.errors import ArithmeticOverflowError


def _as_date(instant: Instant) -> date:
    return date(instant.year, instant.month, instant.day)


# ---------------------------------------------------------------------------
# Date units
# ---------------------------------------------------------------------------


class TestDateArithmetic:
    """Year, month and day adders."""

    def test_chained_adds(self):
        instant = Instant.of_date(20250416)

        instant.add_day(1)
        assert instant.date_as_num() == 20250417
        instant.add_month(1)
        assert instant.date_as_num() == 20250517
        instant.add_year(1)
        assert instant.date_as_num() == 20260517
        instant.add_hour(1)
        assert instant.datetime_as_num() == 20260517010000
        instant.add_minute(1)
        assert instant.datetime_as_num() == 20260517010100
        instant.add_second(1)
        assert instant.datetime_as_num() == 20260517010101

    def test_add_day_crosses_year(self):
        assert Instant.of_date(20251231).add_day(1).date_as_num() == 20260101
        assert Instant.of_date(19991231).add_day(1).date_as_num() == 20000101

    def test_add_day_through_leap_day(self):
        instant = Instant.of_date(20000228)

        assert instant.add_day(1).date_as_num() == 20000229
        assert instant.add_day(1).date_as_num() == 20000301

    def test_add_month_clamps_day(self):
        assert Instant.of_date(20250131).add_month(1).date_as_num() == 20250228
        assert Instant.of_date(20240131).add_month(1).date_as_num() == 20240229

    def test_add_month_clamp_is_lossy(self):
        instant = Instant.of_date(20250131).add_month(1).add_month(-1)

        assert instant.date_as_num() == 20250128

    def test_add_month_round_trip_without_clamp(self):
        for months in (-25, -12, -1, 1, 11, 12, 100):
            assert Instant.of_date(20250416).add_month(months).add_month(-months).date_as_num() == 20250416

    def test_year_month_day_arithmetic(self):
        first = Instant.of_date(20250416).add_year(5)
        assert first.date_as_num() == 20300416
        assert first.add_year(-3).date_as_num() == 20270416

        second = Instant.of_date(20250416).add_month(8)
        assert second.date_as_num() == 20251216
        assert second.add_month(5).date_as_num() == 20260516

        third = Instant.of_date(20250416).add_day(15)
        assert third.date_as_num() == 20250501
        assert third.add_day(-5).date_as_num() == 20250426

    def test_add_year_keeps_leap_day_valid(self):
        assert Instant.of_date(20240229).add_year(1).date_as_num() == 20250228
        assert Instant.of_date(20240229).add_year(4).date_as_num() == 20280229

    @pytest.mark.parametrize("start", [date(2024, 1, 31), date(2024, 2, 29), date(2025, 3, 30), date(1969, 12, 31)])
    def test_add_month_agrees_with_relativedelta(self, start):
        for months in range(-40, 41):
            instant = Instant.of_date(start.year * 10000 + start.month * 100 + start.day)
            instant.add_month(months)
            assert _as_date(instant) == start + relativedelta(months=months)

    @pytest.mark.parametrize("days", [-700_000, -438_296, -146_097, -366, -1, 0, 1, 59, 365, 146_097, 146_098, 1_000_000])
    def test_add_day_agrees_with_timedelta(self, days):
        start = date(2025, 4, 16)
        instant = Instant.of_date(20250416).add_day(days)

        assert _as_date(instant) == start + timedelta(days=days)

    def test_large_additions(self):
        instant = Instant.of_date(20250416)
        instant.add_year(1_000_000)
        assert instant.year == 1_002_025
        instant.add_year(-1_000_000)
        assert instant.date_as_num() == 20250416

        assert Instant.of_date(20250416).add_month(INT32_MAX).year > 2025
        assert Instant.of_date(20250416).add_day(INT32_MAX).timestamp > 0
        assert Instant.of_date(20250416).add_day(1_000_000).year > 2025


# ---------------------------------------------------------------------------
# Time units
# ---------------------------------------------------------------------------


class TestTimeArithmetic:
    """Hour and smaller adders carry into the next unit."""

    def test_hour_carry(self):
        instant = Instant.of_datetime(20250416132647)

        assert instant.add_hour(5).datetime_as_num() == 20250416182647
        assert instant.add_hour(8).datetime_as_num() == 20250417022647

    def test_minute_and_second_carry(self):
        assert Instant.of_datetime(20250416132647).add_minute(40).datetime_as_num() == 20250416140647
        assert Instant.of_datetime(20250416132647).add_second(20).datetime_as_num() == 20250416132707

    def test_negative_borrow(self):
        assert Instant.of_datetime(20250101000000).add_second(-1).datetime_as_num() == 20241231235959
        assert Instant.of_datetime(20250301000000).add_hour(-1).datetime_as_num() == 20250228230000

    def test_sub_millisecond_carry(self):
        instant = Instant.of_datetime(20250416132647).add_nanosecond(60 * 1_000_000_000)

        assert instant.datetime_as_num() == 20250416132747
        assert (instant.microsecond, instant.nanosecond) == (0, 0)

    def test_millisecond_borrow_matches_datetime(self):
        start = datetime(2025, 4, 16, 13, 26, 47)
        for millis in (-1, -1000, -86_400_001, 123_456_789):
            instant = Instant.of_datetime(20250416132647).add_millisecond(millis)
            expected = start + timedelta(milliseconds=millis)
            assert instant.datetime_as_num() == int(expected.strftime("%Y%m%d%H%M%S"))
            assert instant.millisecond == expected.microsecond // 1000

    def test_zero_is_noop(self):
        instant = Instant.of_date(20250416)
        instant.update()

        instant.add_month(0).add_day(0).add_hour(0).add_nanosecond(0)

        assert not instant.dirty


# ---------------------------------------------------------------------------
# Overflow
# ---------------------------------------------------------------------------


class TestOverflow:
    """Totals outside the native widths raise instead of wrapping."""

    def test_add_year_beyond_int32(self):
        with pytest.raises(ArithmeticOverflowError) as exc_info:
            Instant.of_date(20250416).add_year(INT32_MAX + 1)

        assert exc_info.value.field == "year"
        assert not exc_info.value.recoverable

    def test_add_beyond_int64(self):
        with pytest.raises(ArithmeticOverflowError):
            Instant.of_date(20250416).add_day(INT64_MAX)
        with pytest.raises(ArithmeticOverflowError):
            Instant.of_date(20250416).add_year(2**63)

    def test_timestamp_beyond_int64(self):
        instant = Instant.of_date(20250416).add_millisecond(INT64_MAX)

        with pytest.raises(ArithmeticOverflowError) as exc_info:
            instant.timestamp

        assert exc_info.value.field == "timestamp"

    def test_overflow_is_an_overflow_error(self):
        with pytest.raises(OverflowError):
            Instant().set_year(-(2**31) - 1)
