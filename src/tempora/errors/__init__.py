"""Centralized error definitions for tempora.

This module provides a unified error hierarchy for the calendar engine, the
fixed-width formatter and the configuration layer.

Usage:
    from tempora.errors import (
        TemporaError,
        FormatError,
        handle_error,
    )

    try:
        instant = parse_instant(text, "yyyy-MM-dd")
    except TemporaError as e:
        print(handle_error(e))
"""

from __future__ import annotations

from typing import Any

from tempora.errors.user_messages import (
    get_user_message,
    get_recovery_suggestion,
    format_error_for_user,
)


# =============================================================================
# Base Error
# =============================================================================


class TemporaError(Exception):
    """Base exception for all tempora errors.

    Attributes:
        code: Error code for categorization
        user_message: User-friendly message (optional override)
        recoverable: Whether the error is potentially recoverable
        details: Additional error details for debugging
    """

    code: str = "TEMPORA_ERROR"
    default_message: str = "An unexpected error occurred"
    recoverable: bool = True

    def __init__(
        self,
        message: str | None = None,
        *,
        user_message: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.message = message or self.default_message
        self._user_message = user_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        """Get user-friendly message."""
        if self._user_message:
            return self._user_message
        return get_user_message(self)

    @property
    def recovery_suggestion(self) -> str:
        """Get recovery suggestion."""
        return get_recovery_suggestion(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "recoverable": self.recoverable,
            "details": self.details,
        }


# =============================================================================
# Calendar Errors
# =============================================================================


class CalendarError(TemporaError):
    """Base error for calendar engine operations."""

    code = "CALENDAR_ERROR"
    default_message = "Calendar operation failed"


class FormatError(CalendarError, ValueError):
    """A fixed-width pattern token could not be read from the input."""

    code = "FORMAT_ERROR"
    default_message = "Input does not match the date pattern"

    def __init__(
        self,
        token: str,
        start: int,
        end: int,
        text: str,
        *,
        message: str | None = None,
    ) -> None:
        self.token = token
        self.start = start
        self.end = end
        self.text = text
        super().__init__(
            message
            or (
                f"Cannot parse the '{token}' pattern from substring "
                f"'{text[start:end]}' at ({start},{end}) of '{text}'"
            ),
            details={"token": token, "start": start, "end": end, "text": text},
        )


class CalendarRangeError(CalendarError, ValueError):
    """A calendar field holds a value outside its legal range."""

    code = "CALENDAR_RANGE_ERROR"
    default_message = "Calendar value out of range"

    def __init__(
        self,
        field: str,
        value: Any,
        minimum: Any = None,
        maximum: Any = None,
        *,
        message: str | None = None,
    ) -> None:
        self.field = field
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        if message is None:
            if minimum is not None and maximum is not None:
                message = f"The {field} exceeds the range [{minimum},{maximum}], resolved value is '{value}'"
            else:
                message = f"Invalid {field}: '{value}'"
        super().__init__(
            message,
            details={"field": field, "value": value, "minimum": minimum, "maximum": maximum},
        )


class ArithmeticOverflowError(CalendarError, OverflowError):
    """A field total no longer fits its native integer width.

    The instant that raised it may hold partially applied carries and must
    not be used further.
    """

    code = "ARITHMETIC_OVERFLOW"
    default_message = "Integer overflow in calendar arithmetic"
    recoverable = False

    def __init__(self, field: str, value: int, *, message: str | None = None) -> None:
        self.field = field
        self.value = value
        super().__init__(
            message or f"Integer overflow: the {field} value {value} is outside the allowable range",
            details={"field": field, "value": value},
        )


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(TemporaError):
    """Base error for configuration issues."""

    code = "CONFIGURATION_ERROR"
    default_message = "Configuration error"
    recoverable = True


class InvalidConfigError(ConfigurationError):
    """Configuration is invalid."""

    code = "INVALID_CONFIG"
    default_message = "Invalid configuration"


class MissingConfigError(ConfigurationError):
    """Required configuration is missing."""

    code = "MISSING_CONFIG"
    default_message = "Missing required configuration"


# =============================================================================
# Error Handler
# =============================================================================


def handle_error(error: Exception) -> str:
    """Handle an error and return a user-friendly message.

    Args:
        error: The exception to handle

    Returns:
        User-friendly error message with recovery suggestion
    """
    return format_error_for_user(error)


def is_recoverable(error: Exception) -> bool:
    """Check if an error is potentially recoverable."""
    if isinstance(error, TemporaError):
        return error.recoverable
    return False


__all__ = [
    # Base
    "TemporaError",
    # Calendar
    "CalendarError",
    "FormatError",
    "CalendarRangeError",
    "ArithmeticOverflowError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigError",
    "MissingConfigError",
    # Handlers
    "handle_error",
    "is_recoverable",
]
