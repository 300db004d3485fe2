"""Gregorian calendar tables and unit constants shared by the engine."""

from __future__ import annotations

from typing import Tuple

# Day counts per month, indexed by [leap][zero-based month].
MONTH_DAYS: Tuple[Tuple[int, ...], Tuple[int, ...]] = (
    (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31),
    (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31),
)
YEAR_DAYS: Tuple[int, int] = (365, 366)

SECOND_NEXT = 60
MINUTE_NEXT = 60
HOUR_NEXT = 24
MONTH_NEXT = 12
SUB_NEXT = 1000  # millisecond, microsecond and nanosecond all roll over at 1000

SECOND_MS = 1000
MINUTE_MS = SECOND_MS * SECOND_NEXT
HOUR_MS = MINUTE_MS * MINUTE_NEXT
DAY_MS = HOUR_MS * HOUR_NEXT

EPOCH_YEAR = 1970

# A 400-year Gregorian cycle always has the same length and weekday layout.
CYCLE_YEARS = 400
DAYS_PER_CYCLE = 146_097

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def leap(year: int) -> int:
    """Return 1 for a leap year, 0 otherwise."""
    return 1 if year % 400 == 0 or (year % 4 == 0 and year % 100 != 0) else 0


def days_in_month(year: int, month: int) -> int:
    """Number of days in ``month`` (1-12) of ``year``."""
    return MONTH_DAYS[leap(year)][month - 1]


def days_in_year(year: int) -> int:
    return YEAR_DAYS[leap(year)]


def days_before_year(year: int) -> int:
    """Days from 0001-01-01 to January 1st of ``year`` (negative before year 1)."""
    y = year - 1
    return y * 365 + y // 4 - y // 100 + y // 400


def days_in_years(start: int, stop: int) -> int:
    """Total days of the years ``start <= y < stop``."""
    return days_before_year(stop) - days_before_year(start)


def is_valid_date(year: int, month: int, day: int) -> bool:
    return 1 <= month <= MONTH_NEXT and 1 <= day <= days_in_month(year, month)
