"""Date expression extraction for Chinese and numeric date phrases.

Recognizes, in precedence order:
- explicit dates: ``2025年4月16日``, ``2025-04-16``, ``25/4/16``
- compact dates: ``20250416`` (only real calendar dates)
- fiscal quarters: ``第2季度``, ``第一季度初``, ``Q3``, ``上季度末``, ``2024年Q4``
- relative periods: ``本月初``, ``上月末``, ``去年``, ``下下月``, ``2024年年末``, ``2025年末``
- bare years: ``2025年``, ``(2025)``

The input starts as one literal segment. Each pass scans only the segments
that are still literal, left to right, and splits every non-overlapping match
out as a ``DateMark``. Each match is resolved on a fresh copy of the reference
instant, so fields a phrase does not mention (time of day, often the day) come
from the reference.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from re import Match, Pattern
from typing import Any, Callable, Iterable, List, Optional

from tempora.calendar.constants import is_valid_date
from tempora.calendar.instant import Instant
from tempora.calendar.interop import parse_flexible
from tempora.extraction.models import DateMark, DatePattern, Segment, TextSegment

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Regular Expression Patterns
# ---------------------------------------------------------------------------

_YEAR = r"(?P<y>[\[(\"']?(?:(?:\d\s*?){2}){1,2}[\])\"']?[ 年\\/-]?\s*)"
_MONTH = r"(?P<m>(?:\d\s*?){1,2}[ 月\\/-]\s*)"
_DAY = r"(?P<d>(?:\d\s*?){1,2}(?:'T'|[ 日\\/T-])?)(?!\d)"
_QUARTER = (
    r"(?P<q>(?:(?:第\s*?[1234一二三四]|[上下本])?\s*?季度[初末]?)"
    r"|(?:[Qq]\s*?[1-4]\s*?(?:季度)?[初末]?))"
)

YEAR_MONTH_DAY_PATTERN = re.compile(r"(?<!\d)" + _YEAR + _MONTH + _DAY)
COMPACT_DATE_PATTERN = re.compile(
    r"(?<!\d)(?P<date>[1-9]\d{3}(?:0[1-9]|1[0-2])(?:0[1-9]|[12]\d|3[01]))(?!\d)"
)
QUARTER_PATTERN = re.compile(r"(?:(?<!\d)" + _YEAR + r")?" + _QUARTER)
_EXPLICIT_YEAR = r"(?:(?:\d\s*?){2}){1,2}年"
RELATIVE_PERIOD_PATTERN = re.compile(
    r"(?<!\d)(?:" + _EXPLICIT_YEAR + r"[初末]"
    r"|(?:" + _EXPLICIT_YEAR + r"|[本今]|[上去]{1,2}|[下明]{1,2})?"
    r"(?:年?[年期月]|期期|月月)[初末]?)"
)
BARE_YEAR_PATTERN = re.compile(r"(?<!\d)" + _YEAR + r"(?!\d)")

_NON_DIGIT = re.compile(r"\D+")
_WHITESPACE = re.compile(r"\s+")
_LEADING_DIGITS = re.compile(r"\d+")

QUARTER_NUMBERS = {
    "1": 1, "一": 1,
    "2": 2, "二": 2,
    "3": 3, "三": 3,
    "4": 4, "四": 4,
}

BACKWARD_PREFIXES = "上去"
FORWARD_PREFIXES = "下明"
START_SUFFIX = "初"
PERIOD_SUFFIXES = "初末"


def _expand_year(digits: str, reference: Instant) -> int:
    """Read a year from its digits; two digits take the reference's century."""
    value = int(digits)
    if len(digits) == 2:
        century = abs(reference.year) // 100 * 100
        value = century + value
        if reference.year < 0:
            value = -value
    return value


# ---------------------------------------------------------------------------
# Resolvers
# ---------------------------------------------------------------------------


def _resolve_year_month_day(match: Match, date: Instant, reference: Instant) -> None:
    date.set_year(_expand_year(_NON_DIGIT.sub("", match.group("y")), reference))
    date.set_month_if_valid(int(_NON_DIGIT.sub("", match.group("m"))))
    date.set_day_if_valid(int(_NON_DIGIT.sub("", match.group("d"))))


def _accept_compact_date(match: Match) -> bool:
    digits = match.group("date")
    return is_valid_date(int(digits[:4]), int(digits[4:6]), int(digits[6:]))


def _resolve_compact_date(match: Match, date: Instant, reference: Instant) -> None:
    date.set_date(int(match.group("date")))


def _resolve_quarter(match: Match, date: Instant, reference: Instant) -> None:
    year = match.group("y")
    if year is not None:
        date.set_year(_expand_year(_NON_DIGIT.sub("", year), reference))

    phrase = _WHITESPACE.sub("", match.group("q"))
    at_start = phrase.endswith(START_SUFFIX)

    if phrase[0] in "第Qq":
        quarter = QUARTER_NUMBERS.get(phrase[1], 4)
        if at_start:
            date.set_quarter_start(quarter)
        else:
            date.set_quarter_end(quarter)
        return

    # 上季度 / 下季度 / 本季度: move from the current quarter first
    shift = {"上": -3, "下": 3}.get(phrase[0], 0)
    date.set_quarter_start().add_month(shift)
    if at_start:
        date.set_quarter_start()
    else:
        date.set_quarter_end()


def _prefix_count(prefix: str) -> int:
    """Signed unit count of a 上/去/下/明 prefix run (at most two characters)."""
    count = 0
    for char in prefix[:2]:
        if char in BACKWARD_PREFIXES and count <= 0:
            count -= 1
        elif char in FORWARD_PREFIXES and count >= 0:
            count += 1
        else:
            break
    return count


def _resolve_relative_period(match: Match, date: Instant, reference: Instant) -> None:
    phrase = _WHITESPACE.sub("", match.group(0))
    suffix = phrase[-1] if phrase[-1] in PERIOD_SUFFIXES else ""
    body = phrase[: len(phrase) - len(suffix)]
    unit = body[-1]

    # anchor on the reference period first, then move it
    at_start = suffix == START_SUFFIX
    if unit == "月":
        if at_start:
            date.set_month_start()
        else:
            date.set_month_end()
    elif unit == "年":
        if at_start:
            date.set_year_start()
        else:
            date.set_year_end()
    else:
        if at_start:
            date.set_quarter_start()
        else:
            date.set_quarter_end()

    digits = _LEADING_DIGITS.match(body)
    if digits:
        # an explicit year replaces any relative offset
        date.set_year(_expand_year(digits.group(), reference))
        return

    count = _prefix_count(body)
    if count:
        step_unit = body[abs(count)]
        if step_unit in "年期":
            date.add_year(count)
        elif step_unit == "月":
            date.add_month(count)


def _resolve_bare_year(match: Match, date: Instant, reference: Instant) -> None:
    date.set_year(_expand_year(_NON_DIGIT.sub("", match.group("y")), reference))


Resolver = Callable[[Match, Instant, Instant], None]


@dataclass(frozen=True)
class ExpressionPass:
    """One recognizer: a pattern plus how a match mutates the instant."""

    pattern: DatePattern
    regex: Pattern
    resolve: Resolver
    accept: Optional[Callable[[Match], bool]] = None


DEFAULT_PASSES: List[ExpressionPass] = [
    ExpressionPass(DatePattern.YEAR_MONTH_DAY, YEAR_MONTH_DAY_PATTERN, _resolve_year_month_day),
    ExpressionPass(
        DatePattern.COMPACT_DATE,
        COMPACT_DATE_PATTERN,
        _resolve_compact_date,
        accept=_accept_compact_date,
    ),
    ExpressionPass(DatePattern.QUARTER, QUARTER_PATTERN, _resolve_quarter),
    ExpressionPass(DatePattern.RELATIVE_PERIOD, RELATIVE_PERIOD_PATTERN, _resolve_relative_period),
    ExpressionPass(DatePattern.BARE_YEAR, BARE_YEAR_PATTERN, _resolve_bare_year),
]


# ---------------------------------------------------------------------------
# Main Expression Parser
# ---------------------------------------------------------------------------


class ExpressionParser:
    """Extract date expressions from text relative to a reference instant.

    Example:
        >>> parser = ExpressionParser()
        >>> parser.parse_to_dates("报告期为2025年4月16日", reference=20250101)
        ['20250416']
    """

    def __init__(self, passes: Optional[Iterable[Any]] = None):
        """Initialize the parser.

        Args:
            passes: Subset of ``DatePattern`` members (or their string values)
                to run. Passes always run in precedence order; ``None`` runs all.
        """
        if passes is None:
            self.passes = list(DEFAULT_PASSES)
        else:
            selected = {DatePattern(p) for p in passes}
            self.passes = [p for p in DEFAULT_PASSES if p.pattern in selected]

    def extract(self, text: str, reference: Any = None) -> List[Segment]:
        """Split ``text`` into literal segments and resolved date marks.

        Args:
            text: Input text.
            reference: Anything ``parse_flexible`` accepts; defaults to now.

        Returns:
            Segments in input order. Empty literal segments are omitted.
        """
        origin = Instant.now() if reference is None else parse_flexible(reference)
        segments: List[Segment] = [TextSegment(text, 0)] if text else []
        for expression_pass in self.passes:
            segments = self._apply_pass(segments, expression_pass, origin)
        return segments

    def extract_marks(self, text: str, reference: Any = None) -> List[DateMark]:
        return [s for s in self.extract(text, reference) if isinstance(s, DateMark)]

    def parse_to_dates(self, text: str, reference: Any = None) -> List[str]:
        """Packed ``YYYYMMDD`` strings of every date found, literal text dropped."""
        return [mark.date_str for mark in self.extract_marks(text, reference)]

    def _apply_pass(
        self,
        segments: List[Segment],
        expression_pass: ExpressionPass,
        reference: Instant,
    ) -> List[Segment]:
        result: List[Segment] = []
        for segment in segments:
            if isinstance(segment, DateMark):
                result.append(segment)
                continue

            last = 0
            for match in expression_pass.regex.finditer(segment.text):
                if expression_pass.accept is not None and not expression_pass.accept(match):
                    logger.debug(
                        "Rejected %s candidate %r",
                        expression_pass.pattern.value,
                        match.group(0),
                    )
                    continue
                start, end = match.span()
                if start > last:
                    result.append(TextSegment(segment.text[last:start], segment.span_start + last))
                last = end

                date = reference.copy()
                expression_pass.resolve(match, date, reference)
                mark = DateMark(
                    text=match.group(0),
                    instant=date,
                    pattern=expression_pass.pattern,
                    span_start=segment.span_start + start,
                    span_end=segment.span_start + end,
                )
                logger.debug(
                    "Resolved %r via %s to %s",
                    mark.text,
                    mark.pattern.value,
                    mark.date_str,
                )
                result.append(mark)

            if last < len(segment.text):
                result.append(TextSegment(segment.text[last:], segment.span_start + last))
        return result


def parse_to_dates(text: str, reference: Any = None) -> List[str]:
    """Convenience function: run every pass and return packed date strings."""
    return ExpressionParser().parse_to_dates(text, reference)
