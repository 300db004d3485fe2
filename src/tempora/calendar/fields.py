"""Field tuples and the complement encoding used for pre-epoch instants.

Millisecond counting runs backwards from the epoch for instants before 1970,
so the conversion works on "distance to the end of the unit" instead of the
forward offset. ``Instant`` keeps its cache forward-encoded and only passes
through the complement form at the epoch boundary.
"""

from __future__ import annotations

from typing import NamedTuple

from tempora.calendar.constants import (
    HOUR_NEXT,
    MINUTE_NEXT,
    MONTH_DAYS,
    MONTH_NEXT,
    SECOND_NEXT,
    SUB_NEXT,
    leap,
)


class FieldTuple(NamedTuple):
    """Calendar fields with zero-based month and day.

    ``complement`` tells which encoding the sub-year fields use.
    """

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    millisecond: int = 0
    complement: bool = False

    @property
    def forward_month(self) -> int:
        return MONTH_NEXT - 1 - self.month if self.complement else self.month

    @property
    def month_length(self) -> int:
        return MONTH_DAYS[leap(self.year)][self.forward_month]


def complement_fields(fields: FieldTuple) -> FieldTuple:
    """Swap between forward and complement encoding.

    Every sub-year field ``v`` of a unit of length ``n`` becomes ``n - 1 - v``;
    the day's unit is the length of the (forward) month it belongs to.
    Applying it twice returns the original tuple.
    """
    return FieldTuple(
        year=fields.year,
        month=MONTH_NEXT - 1 - fields.month,
        day=fields.month_length - 1 - fields.day,
        hour=HOUR_NEXT - 1 - fields.hour,
        minute=MINUTE_NEXT - 1 - fields.minute,
        second=SECOND_NEXT - 1 - fields.second,
        millisecond=SUB_NEXT - 1 - fields.millisecond,
        complement=not fields.complement,
    )
