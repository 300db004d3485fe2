"""CLI commands for managing tempora settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from tempora.configuration.settings import (
    DEFAULT_CONFIG_PATH,
    Settings,
    bootstrap_settings,
    load_settings,
    save_settings,
)
from tempora.errors import ConfigurationError
from tempora.errors.user_messages import format_error_for_cli


config_app = typer.Typer(help="Manage tempora configuration")


@config_app.command("init")
def init_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config file"),
    date_format: Optional[str] = typer.Option(None, help="Override the display pattern"),
    utc_offset: Optional[int] = typer.Option(None, help="Override the display UTC offset in minutes"),
    log_level: Optional[str] = typer.Option(None, help="Override the log level"),
    force: bool = typer.Option(False, "--force", help="Replace an existing file with defaults"),
) -> None:
    """Initialize the tempora settings file."""

    overrides: dict = {}
    if date_format:
        overrides.setdefault("display", {})["date_format"] = date_format
    if utc_offset is not None:
        overrides.setdefault("display", {})["utc_offset_minutes"] = utc_offset
    if log_level:
        overrides.setdefault("logging", {})["level"] = log_level

    try:
        if force and config_path.exists():
            save_settings(Settings(), config_path)
        settings = bootstrap_settings(path=config_path, overrides=overrides)
    except ConfigurationError as exc:
        typer.echo(format_error_for_cli(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Configuration initialized at {config_path}")
    typer.echo(_summarize_settings(settings))


@config_app.command("show")
def show_config(config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config")) -> None:
    """Display the effective configuration."""

    try:
        settings = load_settings(config_path)
    except ConfigurationError as exc:
        typer.echo(format_error_for_cli(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(_summarize_settings(settings))


@config_app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key, e.g. display.utc_offset_minutes"),
    value: str = typer.Argument(..., help="New value"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Update a configuration value."""

    try:
        settings = load_settings(config_path)
        payload = settings.model_dump(mode="json")
        _assign(payload, key.split("."), value)
        updated = Settings.model_validate(payload)
    except ConfigurationError as exc:
        typer.echo(format_error_for_cli(exc), err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"❌ Invalid value for {key}: {exc}", err=True)
        raise typer.Exit(code=1)
    save_settings(updated, config_path)
    typer.echo(f"Updated {key}")


@config_app.command("validate")
def validate_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config file"),
) -> None:
    """Validate configuration file for correctness."""

    try:
        settings = load_settings(config_path)
    except ConfigurationError as e:
        typer.echo(f"❌ Configuration invalid: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"✅ Configuration valid at {config_path}")
    typer.echo(f"   Date format: {settings.display.date_format}")
    typer.echo(f"   UTC offset: {settings.display.utc_offset_minutes} min")
    typer.echo(f"   Passes: {', '.join(p.value for p in settings.parser.passes)}")
    typer.echo(f"   Log level: {settings.logging.level}")


def _summarize_settings(settings: Settings) -> str:
    data = settings.model_dump(mode="json")
    return json.dumps(data, indent=2, ensure_ascii=False)


def _assign(payload: dict, keys: list[str], value: str) -> None:
    current = payload
    for key in keys[:-1]:
        current = current.setdefault(key, {})
    if isinstance(current.get(keys[-1]), list):
        current[keys[-1]] = [item.strip() for item in value.split(",") if item.strip()]
    else:
        current[keys[-1]] = value
