"""Conversions between ``Instant`` and the standard library date types.

Time zones only exist at this boundary. The engine itself is always UTC, and
``tzinfo`` objects (``dateutil.tz`` zones or any other ``tzinfo``) are consulted
only when converting to or from ``datetime``.
"""

from __future__ import annotations

import logging
import re
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta, tzinfo
from typing import Any, Union

from dateutil import parser as dateutil_parser
from dateutil import tz as dateutil_tz

from tempora.calendar.instant import Instant
from tempora.errors import CalendarRangeError

logger = logging.getLogger(__name__)

UTC = dateutil_tz.UTC
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_NUMERIC = re.compile(r"-?\d+")

FlexibleValue = Union[Instant, datetime, date, int, str]


def to_datetime(instant: Instant, tz: tzinfo = UTC) -> datetime:
    """Aware ``datetime`` for ``instant`` in ``tz`` (UTC by default).

    Nanoseconds are dropped since ``datetime`` stops at microseconds.
    """
    try:
        moment = EPOCH + timedelta(
            milliseconds=instant.timestamp,
            microseconds=instant.microsecond,
        )
        return moment.astimezone(tz)
    except OverflowError as exc:
        raise CalendarRangeError("year", instant.year, MINYEAR, MAXYEAR) from exc


def from_datetime(value: datetime) -> Instant:
    """Instant for ``value``; a naive ``datetime`` is read as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    micros = (value - EPOCH) // timedelta(microseconds=1)
    millis, micro = divmod(micros, 1000)
    return Instant(millis, micro)


def from_date(value: date) -> Instant:
    """Midnight UTC of ``value``."""
    return Instant.of_date(value.year * 10000 + value.month * 100 + value.day)


def to_epoch_nanos(instant: Instant) -> int:
    return instant.timestamp * 1_000_000 + instant.microsecond * 1000 + instant.nanosecond


def from_epoch_nanos(nanos: int) -> Instant:
    millis, rest = divmod(nanos, 1_000_000)
    return Instant(millis, rest // 1000, rest % 1000)


def _from_int(value: int) -> Instant:
    digits = len(str(abs(value)))
    if digits == 8:
        return Instant.of_date(value)
    if digits == 14:
        return Instant.of_datetime(value)
    return Instant(value)


def parse_flexible(value: Any) -> Instant:
    """Coerce loosely typed input into a new ``Instant``.

    Integers (and all-digit strings) of 8 digits are packed ``yyyyMMdd``, 14
    digits are packed ``yyyyMMddHHmmss`` and anything else is epoch
    milliseconds. Other strings go through ``dateutil.parser``.

    Raises:
        CalendarRangeError: If the value cannot be interpreted.
    """
    if isinstance(value, Instant):
        return value.copy()
    if isinstance(value, datetime):
        return from_datetime(value)
    if isinstance(value, date):
        return from_date(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return _from_int(value)
    if isinstance(value, str):
        text = value.strip()
        if _NUMERIC.fullmatch(text):
            return _from_int(int(text))
        try:
            parsed = dateutil_parser.parse(text)
        except (ValueError, OverflowError) as exc:
            logger.debug("dateutil could not parse %r: %s", value, exc)
            raise CalendarRangeError(
                "value", value, message=f"Cannot interpret '{value}' as a date or time"
            ) from exc
        return from_datetime(parsed)
    raise CalendarRangeError(
        "value", value, message=f"Unsupported value type: {type(value).__name__}"
    )


def fixed_offset(minutes: int) -> tzinfo:
    """Fixed UTC offset zone, e.g. ``fixed_offset(480)`` for UTC+08:00."""
    if minutes == 0:
        return UTC
    return dateutil_tz.tzoffset(None, minutes * 60)
