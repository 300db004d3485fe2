"""Date expression extraction.

Finds explicit, compact, quarter, relative-period and bare-year expressions
in free text and resolves each one against a reference ``Instant``.
"""

from tempora.extraction.models import (
    DateMark,
    DatePattern,
    Segment,
    TextSegment,
)
from tempora.extraction.expressions import (
    DEFAULT_PASSES,
    ExpressionParser,
    ExpressionPass,
    parse_to_dates,
)

__all__ = [
    # Models
    "DateMark",
    "DatePattern",
    "Segment",
    "TextSegment",
    # Parser
    "DEFAULT_PASSES",
    "ExpressionParser",
    "ExpressionPass",
    "parse_to_dates",
]
