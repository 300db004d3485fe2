"""Fixed-width pattern formatting and parsing.

Patterns use the familiar letters ``yyyy MM dd HH mm ss SSS``. A run of the
same letter is one token; runs that are not a known token, and every other
character, are copied literally. Parsing is positional: each token consumes
exactly its own width from the input.
"""

from __future__ import annotations

import logging
from datetime import MAXYEAR, MINYEAR, datetime, tzinfo
from typing import Dict, List, Optional, Tuple

from tempora.calendar.constants import (
    HOUR_NEXT,
    MINUTE_NEXT,
    MONTH_NEXT,
    SECOND_NEXT,
    SUB_NEXT,
    days_in_month,
)
from tempora.calendar.instant import Instant
from tempora.calendar.interop import to_datetime
from tempora.errors import CalendarRangeError, FormatError

logger = logging.getLogger(__name__)


# token -> (field name, width)
TOKENS: Dict[str, Tuple[str, int]] = {
    "yyyy": ("year", 4),
    "MM": ("month", 2),
    "dd": ("day", 2),
    "HH": ("hour", 2),
    "mm": ("minute", 2),
    "ss": ("second", 2),
    "SSS": ("millisecond", 3),
}

DEFAULT_FORMAT = "yyyy-MM-dd HH:mm:ss"


def tokenize_format(fmt: str) -> List[str]:
    """Split ``fmt`` into tokens and literal chunks.

    >>> tokenize_format("yyyyMMdd HH:mm")
    ['yyyy', 'MM', 'dd', ' ', 'HH', ':', 'mm']
    """
    parts: List[str] = []
    literal = ""
    i = 0
    while i < len(fmt):
        j = i + 1
        while j < len(fmt) and fmt[j] == fmt[i]:
            j += 1
        run = fmt[i:j]
        if run in TOKENS:
            if literal:
                parts.append(literal)
                literal = ""
            parts.append(run)
        else:
            literal += run
        i = j
    if literal:
        parts.append(literal)
    return parts


def _pad(value: int, width: int) -> str:
    if value < 0:
        return "-" + str(-value).zfill(width)
    return str(value).zfill(width)


def format_instant(instant: Instant, fmt: str = DEFAULT_FORMAT, tz: Optional[tzinfo] = None) -> str:
    """Render ``instant`` with ``fmt``, in UTC or as wall-clock time in ``tz``."""
    if tz is None:
        values = {
            "year": instant.year,
            "month": instant.month,
            "day": instant.day,
            "hour": instant.hour,
            "minute": instant.minute,
            "second": instant.second,
            "millisecond": instant.millisecond,
        }
    else:
        local = to_datetime(instant, tz)
        values = {
            "year": local.year,
            "month": local.month,
            "day": local.day,
            "hour": local.hour,
            "minute": local.minute,
            "second": local.second,
            "millisecond": local.microsecond // 1000,
        }

    out = []
    for part in tokenize_format(fmt):
        spec = TOKENS.get(part)
        if spec is None:
            out.append(part)
        else:
            name, width = spec
            out.append(_pad(values[name], width))
    return "".join(out)


def _validate(values: Dict[str, int]) -> None:
    year, month, day = values["year"], values["month"], values["day"]
    if not 1 <= month <= MONTH_NEXT:
        raise CalendarRangeError("month", month, 1, MONTH_NEXT)
    limit = days_in_month(year, month)
    if not 1 <= day <= limit:
        raise CalendarRangeError("day", day, 1, limit)
    for name, limit in (
        ("hour", HOUR_NEXT),
        ("minute", MINUTE_NEXT),
        ("second", SECOND_NEXT),
        ("millisecond", SUB_NEXT),
    ):
        if not 0 <= values[name] < limit:
            raise CalendarRangeError(name, values[name], 0, limit - 1)


def parse_instant(
    text: str,
    fmt: str = DEFAULT_FORMAT,
    tz: Optional[tzinfo] = None,
    base: Optional[Instant] = None,
) -> Instant:
    """Parse ``text`` positionally against ``fmt``.

    Year, month and day missing from the pattern come from ``base`` (the epoch
    when omitted); missing time fields are zero. With ``tz`` the text is read
    as wall-clock time in that zone and converted to UTC.

    Raises:
        FormatError: If a token's substring is short or not numeric.
        CalendarRangeError: If a parsed value is not a real date or time.
    """
    origin = base if base is not None else Instant()
    values = {
        "year": origin.year,
        "month": origin.month,
        "day": origin.day,
        "hour": 0,
        "minute": 0,
        "second": 0,
        "millisecond": 0,
    }

    pos = 0
    for part in tokenize_format(fmt):
        end = pos + len(part)
        spec = TOKENS.get(part)
        if spec is not None:
            chunk = text[pos:end]
            if len(chunk) != len(part) or not (chunk.isascii() and chunk.isdigit()):
                raise FormatError(part, pos, end, text)
            values[spec[0]] = int(chunk)
        pos = end

    _validate(values)

    result = (
        Instant()
        .set_year(values["year"])
        .set_month_if_valid(values["month"])
        .set_day_if_valid(values["day"])
        .set_hour_if_valid(values["hour"])
        .set_minute_if_valid(values["minute"])
        .set_second_if_valid(values["second"])
        .set_millisecond_if_valid(values["millisecond"])
    )

    if tz is not None:
        if not MINYEAR <= values["year"] <= MAXYEAR:
            raise CalendarRangeError("year", values["year"], MINYEAR, MAXYEAR)
        wall = datetime(
            values["year"], values["month"], values["day"],
            values["hour"], values["minute"], values["second"],
        )
        offset = tz.utcoffset(wall)
        if offset:
            result.add_second(-int(offset.total_seconds()))
            logger.debug("Shifted %s by UTC offset %s", text, offset)
    return result
