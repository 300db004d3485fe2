"""User-friendly error messages for tempora.

Maps error codes to human-readable messages and recovery suggestions so the
CLI never prints a raw traceback for expected failures.
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Error Message Catalog
# =============================================================================

ERROR_MESSAGES: dict[str, str] = {
    # Calendar errors
    "CALENDAR_ERROR": "The calendar operation could not be completed.",
    "FORMAT_ERROR": "The input does not match the date pattern.",
    "CALENDAR_RANGE_ERROR": "A date or time field is out of range.",
    "ARITHMETIC_OVERFLOW": "The date arithmetic overflowed the supported range.",
    # Configuration errors
    "CONFIGURATION_ERROR": "There's a configuration issue.",
    "INVALID_CONFIG": "The configuration is invalid. Check settings.",
    "MISSING_CONFIG": "Required configuration is missing.",
    # Generic
    "TEMPORA_ERROR": "An unexpected error occurred. Please try again.",
    "UNKNOWN_ERROR": "Something went wrong. Please try again.",
}


# =============================================================================
# Recovery Suggestions
# =============================================================================

RECOVERY_SUGGESTIONS: dict[str, str] = {
    # Calendar errors
    "CALENDAR_ERROR": "Check the input value and try again.",
    "FORMAT_ERROR": "Make each field exactly as wide as its token (yyyy=4, MM=2, SSS=3).",
    "CALENDAR_RANGE_ERROR": "Use months 1-12, days valid for the month, hours 0-23, minutes and seconds 0-59.",
    "ARITHMETIC_OVERFLOW": "Use a smaller amount; the value must be discarded after an overflow.",
    # Configuration errors
    "CONFIGURATION_ERROR": "Check config: tempora config show",
    "INVALID_CONFIG": "Recreate defaults: tempora config init --force",
    "MISSING_CONFIG": "Create a config file: tempora config init",
    # Generic
    "TEMPORA_ERROR": "If this persists, please report the issue.",
    "UNKNOWN_ERROR": "Report the issue if it continues.",
}


# =============================================================================
# Helper Functions
# =============================================================================


def _error_code(error: Any) -> str:
    if hasattr(error, "code"):
        return error.code
    if isinstance(error, str):
        return error
    return type(error).__name__.upper()


def get_user_message(error: Any) -> str:
    """Get user-friendly message for an error.

    Args:
        error: The error (can be Exception or error code string)

    Returns:
        User-friendly error message
    """
    return ERROR_MESSAGES.get(_error_code(error), ERROR_MESSAGES["UNKNOWN_ERROR"])


def get_recovery_suggestion(error: Any) -> str:
    """Get recovery suggestion for an error."""
    return RECOVERY_SUGGESTIONS.get(_error_code(error), RECOVERY_SUGGESTIONS["UNKNOWN_ERROR"])


def format_error_for_user(error: Any) -> str:
    """Format a complete user-friendly error message.

    Args:
        error: The error to format

    Returns:
        Complete error message with recovery suggestion
    """
    message = get_user_message(error)
    suggestion = get_recovery_suggestion(error)

    return f"{message}\n\nSuggestion: {suggestion}"


def format_error_for_cli(error: Any) -> str:
    """Format error for CLI output.

    Args:
        error: The error to format

    Returns:
        CLI-formatted error message
    """
    message = get_user_message(error)
    suggestion = get_recovery_suggestion(error)
    code = getattr(error, "code", "ERROR")

    lines = [
        f"Error [{code}]: {message}",
        "",
        f"Suggestion: {suggestion}",
    ]

    if getattr(error, "details", None):
        lines.append("")
        lines.append("Details:")
        for key, value in error.details.items():
            if value is not None:
                lines.append(f"  {key}: {value}")

    return "\n".join(lines)


__all__ = [
    "ERROR_MESSAGES",
    "RECOVERY_SUGGESTIONS",
    "get_user_message",
    "get_recovery_suggestion",
    "format_error_for_user",
    "format_error_for_cli",
]
