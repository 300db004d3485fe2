"""Calendar engine: epoch/field synchronized instants and their conversions."""

from tempora.calendar.constants import (
    DAY_MS,
    EPOCH_YEAR,
    days_in_month,
    days_in_year,
    is_valid_date,
    leap,
)
from tempora.calendar.fields import FieldTuple, complement_fields
from tempora.calendar.instant import Instant
from tempora.calendar.interop import (
    UTC,
    fixed_offset,
    from_date,
    from_datetime,
    from_epoch_nanos,
    parse_flexible,
    to_datetime,
    to_epoch_nanos,
)
from tempora.calendar.formatting import (
    DEFAULT_FORMAT,
    format_instant,
    parse_instant,
    tokenize_format,
)

__all__ = [
    # Constants
    "DAY_MS",
    "EPOCH_YEAR",
    "days_in_month",
    "days_in_year",
    "is_valid_date",
    "leap",
    # Engine
    "FieldTuple",
    "complement_fields",
    "Instant",
    # Interop
    "UTC",
    "fixed_offset",
    "from_date",
    "from_datetime",
    "from_epoch_nanos",
    "parse_flexible",
    "to_datetime",
    "to_epoch_nanos",
    # Formatting
    "DEFAULT_FORMAT",
    "format_instant",
    "parse_instant",
    "tokenize_format",
]
