"""Mutable calendar instant backed by a millisecond epoch timestamp.

The instant keeps two views of the same point in time:

- a signed 64-bit millisecond timestamp since 1970-01-01T00:00:00Z
- a proleptic Gregorian field cache (year, zero-based month and day, hour,
  minute, second, millisecond)

Microsecond and nanosecond are carried next to the millisecond timestamp.

Field setters and adders only touch the cache and mark it dirty; the timestamp
is rebuilt by ``update()`` the next time it is read. Every mutator returns the
instance so calls can be chained::

    Instant.of_date(20250131).add_month(1).set_hour(9).timestamp

Instances are not thread-safe. Hand out ``copy()`` snapshots instead of
sharing one instance between threads.
"""

from __future__ import annotations

import time
from functools import total_ordering
from typing import Callable, Optional

from tempora.calendar.constants import (
    CYCLE_YEARS,
    DAY_MS,
    DAYS_PER_CYCLE,
    EPOCH_YEAR,
    HOUR_MS,
    HOUR_NEXT,
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    MINUTE_MS,
    MINUTE_NEXT,
    MONTH_DAYS,
    MONTH_NEXT,
    SECOND_MS,
    SECOND_NEXT,
    SUB_NEXT,
    YEAR_DAYS,
    days_in_years,
    leap,
)
from tempora.calendar.fields import FieldTuple, complement_fields
from tempora.errors import ArithmeticOverflowError, CalendarRangeError


def _checked_add(field: str, current: int, delta: int) -> int:
    total = current + delta
    if total < INT64_MIN or total > INT64_MAX:
        raise ArithmeticOverflowError(field, total)
    return total


def _pad(value: int, width: int) -> str:
    if value < 0:
        return "-" + str(-value).zfill(width)
    return str(value).zfill(width)


@total_ordering
class Instant:
    """A point in time as calendar fields synchronized with an epoch timestamp."""

    def __init__(self, timestamp: int = 0, micros: int = 0, nanos: int = 0) -> None:
        for name, value in (("microsecond", micros), ("nanosecond", nanos)):
            if not 0 <= value < SUB_NEXT:
                raise CalendarRangeError(name, value, 0, SUB_NEXT - 1)
        self._timestamp = 0
        self._year = EPOCH_YEAR
        self._month = 0
        self._day = 0
        self._hour = 0
        self._minute = 0
        self._second = 0
        self._millis = 0
        self._micros = micros
        self._nanos = nanos
        self._dirty = False
        self.set_timestamp(timestamp)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def now(cls) -> "Instant":
        """Current wall-clock time with nanosecond precision where available."""
        millis, rest = divmod(time.time_ns(), 1_000_000)
        return cls(millis, rest // 1000, rest % 1000)

    @classmethod
    def of(cls, timestamp: int) -> "Instant":
        return cls(timestamp)

    @classmethod
    def of_date(cls, packed: int) -> "Instant":
        """Create from a packed ``yyyyMMdd`` integer such as ``20250416``."""
        return cls().set_date(packed)

    @classmethod
    def of_datetime(cls, packed: int) -> "Instant":
        """Create from a packed ``yyyyMMddHHmmss`` integer."""
        return cls().set_datetime(packed)

    def copy(self) -> "Instant":
        """Independent snapshot; later mutations of either side are not shared."""
        self.update()
        other = type(self).__new__(type(self))
        other.__dict__.update(self.__dict__)
        return other

    def __copy__(self) -> "Instant":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "Instant":
        return self.copy()

    # ------------------------------------------------------------------
    # Epoch conversion
    # ------------------------------------------------------------------

    def set_timestamp(self, timestamp: int) -> "Instant":
        """Replace every field with the calendar view of ``timestamp``."""
        if timestamp < INT64_MIN or timestamp > INT64_MAX:
            raise ArithmeticOverflowError("timestamp", timestamp)
        self._timestamp = timestamp
        if timestamp >= 0:
            rest, self._millis = divmod(timestamp, SECOND_MS)
            rest, self._second = divmod(rest, SECOND_NEXT)
            rest, self._minute = divmod(rest, MINUTE_NEXT)
            days, self._hour = divmod(rest, HOUR_NEXT)

            cycles, days = divmod(days, DAYS_PER_CYCLE)
            year = EPOCH_YEAR + cycles * CYCLE_YEARS
            while days >= YEAR_DAYS[leap(year)]:
                days -= YEAR_DAYS[leap(year)]
                year += 1
            month_days = MONTH_DAYS[leap(year)]
            month = 0
            while days >= month_days[month]:
                days -= month_days[month]
                month += 1
            self._year = year
            self._month = month
            self._day = days
        else:
            # distance back from 1969-12-31T23:59:59.999, in complement fields
            rest = -timestamp - 1
            rest, millis = divmod(rest, SECOND_MS)
            rest, second = divmod(rest, SECOND_NEXT)
            rest, minute = divmod(rest, MINUTE_NEXT)
            days, hour = divmod(rest, HOUR_NEXT)

            cycles, days = divmod(days, DAYS_PER_CYCLE)
            year = EPOCH_YEAR - 1 - cycles * CYCLE_YEARS
            while days >= YEAR_DAYS[leap(year)]:
                days -= YEAR_DAYS[leap(year)]
                year -= 1
            month_days = MONTH_DAYS[leap(year)]
            month = MONTH_NEXT - 1
            while days >= month_days[month]:
                days -= month_days[month]
                month -= 1
            self._assign(complement_fields(FieldTuple(
                year=year,
                month=MONTH_NEXT - 1 - month,
                day=days,
                hour=hour,
                minute=minute,
                second=second,
                millisecond=millis,
                complement=True,
            )))
        self._dirty = False
        return self

    def update(self) -> "Instant":
        """Rebuild the timestamp from the field cache if it is stale."""
        if not self._dirty:
            return self
        month_days = MONTH_DAYS[leap(self._year)]
        if self._year >= EPOCH_YEAR:
            days = days_in_years(EPOCH_YEAR, self._year) + sum(month_days[:self._month]) + self._day
            value = (
                days * DAY_MS
                + self._hour * HOUR_MS
                + self._minute * MINUTE_MS
                + self._second * SECOND_MS
                + self._millis
            )
        else:
            c = complement_fields(self.fields)
            days = days_in_years(self._year + 1, EPOCH_YEAR) + sum(month_days[self._month + 1:]) + c.day
            value = -(
                days * DAY_MS
                + c.hour * HOUR_MS
                + c.minute * MINUTE_MS
                + c.second * SECOND_MS
                + c.millisecond
                + 1
            )
        if value < INT64_MIN or value > INT64_MAX:
            raise ArithmeticOverflowError("timestamp", value)
        self._timestamp = value
        self._dirty = False
        return self

    def _assign(self, fields: FieldTuple) -> None:
        self._year = fields.year
        self._month = fields.month
        self._day = fields.day
        self._hour = fields.hour
        self._minute = fields.minute
        self._second = fields.second
        self._millis = fields.millisecond

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def timestamp(self) -> int:
        """Milliseconds since the epoch; recomputed first when stale."""
        return self.update()._timestamp

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def fields(self) -> FieldTuple:
        """Forward-encoded field cache (zero-based month and day)."""
        return FieldTuple(
            self._year, self._month, self._day,
            self._hour, self._minute, self._second, self._millis,
        )

    @property
    def year(self) -> int:
        return self._year

    @property
    def month(self) -> int:
        return self._month + 1

    @property
    def day(self) -> int:
        return self._day + 1

    @property
    def hour(self) -> int:
        return self._hour

    @property
    def minute(self) -> int:
        return self._minute

    @property
    def second(self) -> int:
        return self._second

    @property
    def millisecond(self) -> int:
        return self._millis

    @property
    def microsecond(self) -> int:
        return self._micros

    @property
    def nanosecond(self) -> int:
        return self._nanos

    @property
    def quarter(self) -> int:
        return (self.month + 2) // 3

    @property
    def year_str(self) -> str:
        return str(self._year)

    @property
    def month_str(self) -> str:
        return _pad(self.month, 2)

    @property
    def day_str(self) -> str:
        return _pad(self.day, 2)

    @property
    def hour_str(self) -> str:
        return _pad(self._hour, 2)

    @property
    def minute_str(self) -> str:
        return _pad(self._minute, 2)

    @property
    def second_str(self) -> str:
        return _pad(self._second, 2)

    @property
    def millisecond_str(self) -> str:
        return _pad(self._millis, 3)

    @property
    def microsecond_str(self) -> str:
        return _pad(self._micros, 3)

    @property
    def nanosecond_str(self) -> str:
        return _pad(self._nanos, 3)

    def days_in_year(self) -> int:
        return YEAR_DAYS[leap(self._year)]

    def days_in_month(self) -> int:
        return MONTH_DAYS[leap(self._year)][self._month]

    def date_as_num(self) -> int:
        """Packed ``yyyyMMdd``, e.g. ``20250416``."""
        return self._year * 10000 + self.month * 100 + self.day

    def date_as_str(self) -> str:
        return str(self.date_as_num())

    def time_as_num(self) -> int:
        """Packed ``HHmmss``, e.g. ``132647``."""
        return self._hour * 10000 + self._minute * 100 + self._second

    def time_as_str(self) -> str:
        return str(self.time_as_num())

    def datetime_as_num(self) -> int:
        """Packed ``yyyyMMddHHmmss``, e.g. ``20250416132647``."""
        return self.date_as_num() * 1_000_000 + self.time_as_num()

    def datetime_as_str(self) -> str:
        return str(self.datetime_as_num())

    # ------------------------------------------------------------------
    # Packed setters
    # ------------------------------------------------------------------

    def set_date(self, packed: int) -> "Instant":
        """Set from packed ``yyyyMMdd``.

        Values below 100 only set the day, below 10000 month and day, anything
        larger all three. The sign is kept on the year.
        """
        sign = -1 if packed < 0 else 1
        magnitude = abs(packed)
        if magnitude < 100:
            self.set_day(magnitude)
        elif magnitude < 10000:
            self.set_month(magnitude // 100 % 100)
            self.set_day(magnitude % 100)
        else:
            self.set_year(sign * (magnitude // 10000))
            self.set_month(magnitude // 100 % 100)
            self.set_day(magnitude % 100)
        return self

    def set_time(self, packed: int) -> "Instant":
        """Set from packed ``HHmmss``; same magnitude rule as ``set_date``."""
        sign = -1 if packed < 0 else 1
        magnitude = abs(packed)
        if magnitude < 100:
            self.set_second(magnitude)
        elif magnitude < 10000:
            self.set_minute(magnitude // 100 % 100)
            self.set_second(magnitude % 100)
        else:
            self.set_hour(sign * (magnitude // 10000))
            self.set_minute(magnitude // 100 % 100)
            self.set_second(magnitude % 100)
        return self

    def set_datetime(self, packed: int) -> "Instant":
        """Set from packed ``yyyyMMddHHmmss`` (time first, then date)."""
        sign = -1 if packed < 0 else 1
        magnitude = abs(packed)
        self.set_time(sign * (magnitude % 1_000_000))
        self.set_date(sign * (magnitude // 1_000_000))
        return self

    # ------------------------------------------------------------------
    # Field setters
    # ------------------------------------------------------------------

    def set_year(self, value: int) -> "Instant":
        if value < INT32_MIN or value > INT32_MAX:
            raise ArithmeticOverflowError("year", value)
        self._year = value
        self._clamp_day()
        self._dirty = True
        return self

    def set_month(self, value: int) -> "Instant":
        """Set the 1-based month, carrying out-of-range values into the year."""
        index = value - 1
        self._dirty = True
        if 0 <= index < MONTH_NEXT:
            self._month = index
            self._clamp_day()
        elif index < 0:
            self._month = 0
            self.add_month(index)
        else:
            self._month = MONTH_NEXT - 1
            self.add_month(index - MONTH_NEXT + 1)
        return self

    def set_month_if_valid(self, value: int) -> "Instant":
        if 1 <= value <= MONTH_NEXT:
            self._month = value - 1
            self._clamp_day()
            self._dirty = True
        return self

    def set_day(self, value: int) -> "Instant":
        """Set the 1-based day, carrying out-of-range values across months."""
        index = value - 1
        limit = self.days_in_month()
        self._dirty = True
        if 0 <= index < limit:
            self._day = index
        elif index < 0:
            self._day = 0
            self.add_day(index)
        else:
            self._day = limit - 1
            self.add_day(index - limit + 1)
        return self

    def set_day_if_valid(self, value: int) -> "Instant":
        if 1 <= value <= self.days_in_month():
            self._day = value - 1
            self._dirty = True
        return self

    def set_hour(self, value: int) -> "Instant":
        return self._set_unit("_hour", value, HOUR_NEXT, self.add_hour)

    def set_hour_if_valid(self, value: int) -> "Instant":
        return self._set_unit_if_valid("_hour", value, HOUR_NEXT)

    def set_minute(self, value: int) -> "Instant":
        return self._set_unit("_minute", value, MINUTE_NEXT, self.add_minute)

    def set_minute_if_valid(self, value: int) -> "Instant":
        return self._set_unit_if_valid("_minute", value, MINUTE_NEXT)

    def set_second(self, value: int) -> "Instant":
        return self._set_unit("_second", value, SECOND_NEXT, self.add_second)

    def set_second_if_valid(self, value: int) -> "Instant":
        return self._set_unit_if_valid("_second", value, SECOND_NEXT)

    def set_millisecond(self, value: int) -> "Instant":
        return self._set_unit("_millis", value, SUB_NEXT, self.add_millisecond)

    def set_millisecond_if_valid(self, value: int) -> "Instant":
        return self._set_unit_if_valid("_millis", value, SUB_NEXT)

    def set_microsecond(self, value: int) -> "Instant":
        return self._set_unit("_micros", value, SUB_NEXT, self.add_microsecond)

    def set_microsecond_if_valid(self, value: int) -> "Instant":
        return self._set_unit_if_valid("_micros", value, SUB_NEXT)

    def set_nanosecond(self, value: int) -> "Instant":
        return self._set_unit("_nanos", value, SUB_NEXT, self.add_nanosecond)

    def set_nanosecond_if_valid(self, value: int) -> "Instant":
        return self._set_unit_if_valid("_nanos", value, SUB_NEXT)

    def _set_unit(
        self,
        attr: str,
        value: int,
        limit: int,
        add: Callable[[int], "Instant"],
    ) -> "Instant":
        self._dirty = True
        if 0 <= value < limit:
            setattr(self, attr, value)
        elif value < 0:
            setattr(self, attr, 0)
            add(value)
        else:
            setattr(self, attr, limit - 1)
            add(value - limit + 1)
        return self

    def _set_unit_if_valid(self, attr: str, value: int, limit: int) -> "Instant":
        if 0 <= value < limit:
            setattr(self, attr, value)
            self._dirty = True
        return self

    def _clamp_day(self) -> None:
        limit = MONTH_DAYS[leap(self._year)][self._month]
        if self._day >= limit:
            self._day = limit - 1

    # ------------------------------------------------------------------
    # Period anchors
    # ------------------------------------------------------------------

    def set_quarter_start(self, quarter: int = 0) -> "Instant":
        """First day of ``quarter`` (1-4); any other value means the current quarter."""
        if not 1 <= quarter <= 4:
            quarter = self.quarter
        return self.set_month(3 * quarter - 2).set_day(1)

    def set_quarter_end(self, quarter: int = 0) -> "Instant":
        """Last day of ``quarter`` (1-4); any other value means the current quarter."""
        if not 1 <= quarter <= 4:
            quarter = self.quarter
        return self.set_month(3 * quarter).set_month_end()

    def set_month_start(self, month: int = 0) -> "Instant":
        """First day of ``month``; a month outside 1-12 keeps the current one."""
        return self.set_month_if_valid(month).set_day(1)

    def set_month_end(self, month: int = 0) -> "Instant":
        """Last day of ``month``; a month outside 1-12 keeps the current one."""
        return self.set_month_if_valid(month).set_day(1).add_month(1).add_day(-1)

    def set_year_start(self, year: Optional[int] = None) -> "Instant":
        if year is not None:
            self.set_year(year)
        return self.set_month(1).set_day(1)

    def set_year_end(self, year: Optional[int] = None) -> "Instant":
        if year is not None:
            self.set_year(year)
        return self.set_month(12).set_day(31)

    # ------------------------------------------------------------------
    # Carry arithmetic
    # ------------------------------------------------------------------

    def add_year(self, value: int) -> "Instant":
        self._shift_year(value)
        self._clamp_day()
        return self

    def _shift_year(self, value: int) -> None:
        total = _checked_add("year", self._year, value)
        if total < INT32_MIN or total > INT32_MAX:
            raise ArithmeticOverflowError("year", total)
        self._year = total
        self._dirty = True

    def add_month(self, value: int) -> "Instant":
        """Add months; the day is clamped to the length of the target month."""
        if value:
            total = _checked_add("month", self._month, value)
            carry, month = divmod(total, MONTH_NEXT)
            if carry:
                self._shift_year(carry)
            self._month = month
            self._clamp_day()
            self._dirty = True
        return self

    def add_day(self, value: int) -> "Instant":
        if value:
            total = _checked_add("day", self._day, value)
            # whole 400-year cycles land on the same month and day
            if abs(total) >= DAYS_PER_CYCLE:
                cycles = abs(total) // DAYS_PER_CYCLE * (1 if total > 0 else -1)
                self._shift_year(cycles * CYCLE_YEARS)
                total -= cycles * DAYS_PER_CYCLE
            if total >= 0:
                while total >= self.days_in_month():
                    total -= self.days_in_month()
                    self.add_month(1)
            else:
                while total < 0:
                    self.add_month(-1)
                    total += self.days_in_month()
            self._day = total
            self._dirty = True
        return self

    def add_hour(self, value: int) -> "Instant":
        return self._add_unit("hour", "_hour", value, HOUR_NEXT, self.add_day)

    def add_minute(self, value: int) -> "Instant":
        return self._add_unit("minute", "_minute", value, MINUTE_NEXT, self.add_hour)

    def add_second(self, value: int) -> "Instant":
        return self._add_unit("second", "_second", value, SECOND_NEXT, self.add_minute)

    def add_millisecond(self, value: int) -> "Instant":
        return self._add_unit("millisecond", "_millis", value, SUB_NEXT, self.add_second)

    def add_microsecond(self, value: int) -> "Instant":
        return self._add_unit("microsecond", "_micros", value, SUB_NEXT, self.add_millisecond)

    def add_nanosecond(self, value: int) -> "Instant":
        return self._add_unit("nanosecond", "_nanos", value, SUB_NEXT, self.add_microsecond)

    def _add_unit(
        self,
        field: str,
        attr: str,
        value: int,
        modulus: int,
        carry_into: Callable[[int], "Instant"],
    ) -> "Instant":
        if value:
            total = _checked_add(field, getattr(self, attr), value)
            carry, rest = divmod(total, modulus)
            if carry:
                carry_into(carry)
            setattr(self, attr, rest)
            self._dirty = True
        return self

    # ------------------------------------------------------------------
    # Comparison and display
    # ------------------------------------------------------------------

    def _sort_key(self) -> tuple:
        return (self.timestamp, self._micros, self._nanos)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __lt__(self, other: "Instant") -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return (
            f"{_pad(self._year, 4)}-{self.month_str}-{self.day_str}"
            f"T{self.hour_str}:{self.minute_str}:{self.second_str}.{self.millisecond_str}Z"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self}')"
