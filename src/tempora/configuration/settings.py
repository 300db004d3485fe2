"""Typed settings management for tempora.

User configuration is wrapped in Pydantic models so the CLI can rely on
validated display, parser and logging settings. Settings live in a JSON file
and a few values can be overridden through ``TEMPORA_*`` environment
variables.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from tempora.calendar.formatting import DEFAULT_FORMAT, TOKENS, tokenize_format
from tempora.calendar.interop import fixed_offset, parse_flexible
from tempora.errors import InvalidConfigError, MissingConfigError
from tempora.extraction.models import DatePattern

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".tempora" / "config.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
MAX_OFFSET_MINUTES = 18 * 60


class DisplaySettings(BaseModel):
    """How instants are rendered by the CLI."""

    date_format: str = Field(DEFAULT_FORMAT, description="Fixed-width output pattern")
    utc_offset_minutes: int = Field(
        0,
        ge=-MAX_OFFSET_MINUTES,
        le=MAX_OFFSET_MINUTES,
        description="Offset applied when formatting, e.g. 480 for UTC+08:00",
    )

    @field_validator("date_format")
    def _validate_date_format(cls, value: str) -> str:
        if not any(part in TOKENS for part in tokenize_format(value)):
            raise ValueError("date_format must contain at least one of " + ", ".join(TOKENS))
        return value

    @property
    def tzinfo(self):
        return fixed_offset(self.utc_offset_minutes)


class ParserSettings(BaseModel):
    """Expression parser configuration."""

    passes: List[DatePattern] = Field(
        default_factory=lambda: list(DatePattern),
        description="Recognizer passes to run (always applied in precedence order)",
    )
    reference: Optional[str] = Field(
        default=None,
        description="Fixed reference date for relative phrases; current time when unset",
    )

    @field_validator("passes")
    def _validate_passes(cls, value: List[DatePattern]) -> List[DatePattern]:
        if not value:
            raise ValueError("at least one parser pass must be enabled")
        return value

    @field_validator("reference")
    def _validate_reference(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            parse_flexible(value)
        return value


class LoggingSettings(BaseModel):
    """Log level for the ``tempora`` logger hierarchy."""

    level: str = Field("WARNING", description="Python logging level name")

    @field_validator("level")
    def _validate_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}")
        return value


class Settings(BaseModel):
    """Root configuration state."""

    display: DisplaySettings = Field(default_factory=DisplaySettings)
    parser: ParserSettings = Field(default_factory=ParserSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings from disk or raise if missing or invalid."""

    if not path.exists():
        raise MissingConfigError(
            f"Settings file not found at {path}",
            details={"path": str(path)},
        )
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidConfigError(
            f"Settings file is not valid JSON: {exc}",
            details={"path": str(path)},
        ) from exc
    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        raise InvalidConfigError(
            f"Invalid configuration: {exc}",
            details={"path": str(path)},
        ) from exc


def save_settings(settings: Settings, path: Path = DEFAULT_CONFIG_PATH) -> None:
    """Persist settings to disk as JSON."""

    payload = settings.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("Saved settings to %s", path)


def bootstrap_settings(
    *,
    path: Path = DEFAULT_CONFIG_PATH,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """Create or load settings respecting explicit and environment overrides."""

    overrides = overrides or {}

    if path.exists():
        settings = load_settings(path)
    else:
        settings = Settings()
        save_settings(settings, path)
        logger.info("Created default settings at %s", path)

    merged = settings.model_dump(mode="json")
    merged = _apply_overrides(merged, overrides)
    try:
        merged = _apply_env_overrides(merged)
        resolved = Settings.model_validate(merged)
    except (ValidationError, ValueError) as exc:
        raise InvalidConfigError(f"Invalid configuration override: {exc}") from exc

    save_settings(resolved, path)
    return resolved


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = base.copy()
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _apply_overrides(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    display = data.setdefault("display", {})
    _set_env_override(display, "date_format", "TEMPORA_DATE_FORMAT")
    _set_env_override(display, "utc_offset_minutes", "TEMPORA_UTC_OFFSET", cast_int=True)

    parser = data.setdefault("parser", {})
    _set_env_override(parser, "passes", "TEMPORA_PASSES", cast_list=True)

    logging_section = data.setdefault("logging", {})
    _set_env_override(logging_section, "level", "TEMPORA_LOG_LEVEL")
    return data


def _set_env_override(
    mapping: Dict[str, Any],
    key: str,
    env_name: str,
    *,
    cast_int: bool = False,
    cast_list: bool = False,
) -> None:
    raw = os.getenv(env_name)
    if raw is None:
        return
    if cast_int:
        mapping[key] = int(raw)
    elif cast_list:
        mapping[key] = [item.strip() for item in raw.split(",") if item.strip()]
    else:
        mapping[key] = raw
