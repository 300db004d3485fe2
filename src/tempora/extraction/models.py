"""Data models for date-expression extraction.

The extractor turns an input string into an ordered sequence of segments:
literal text that no pattern claimed (``TextSegment``) and resolved date
expressions (``DateMark``). Spans are character offsets into the original
input, so the sequence can be mapped back onto the text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from tempora.calendar.instant import Instant


class DatePattern(Enum):
    """Recognizer passes, listed in precedence order."""

    YEAR_MONTH_DAY = "year_month_day"    # 2025年4月16日, 2025-04-16
    COMPACT_DATE = "compact_date"        # 20250416
    QUARTER = "quarter"                  # 第2季度初, Q3, 上季度
    RELATIVE_PERIOD = "relative_period"  # 去年末, 上月初, 2024年年末
    BARE_YEAR = "bare_year"              # 2025年, (2025)


@dataclass
class TextSegment:
    """Literal text left untouched by every pass."""

    text: str
    span_start: int = 0

    @property
    def span_end(self) -> int:
        return self.span_start + len(self.text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "date": None,
            "pattern": None,
            "span_start": self.span_start,
            "span_end": self.span_end,
        }


@dataclass
class DateMark:
    """A date expression and the instant it resolved to."""

    text: str                 # Matched substring, e.g. "第2季度末"
    instant: Instant          # Resolved instant (copy of the reference)
    pattern: DatePattern      # Pass that claimed the substring
    span_start: int = 0       # Character offset in the input
    span_end: int = 0

    @property
    def date_str(self) -> str:
        """Packed ``YYYYMMDD`` string, e.g. ``"20250630"``."""
        return self.instant.date_as_str()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "text": self.text,
            "date": self.date_str,
            "instant": str(self.instant),
            "pattern": self.pattern.value,
            "span_start": self.span_start,
            "span_end": self.span_end,
        }


Segment = Union[TextSegment, DateMark]
