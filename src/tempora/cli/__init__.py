"""Command line entry points for tempora."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from typer import Typer

from ..configuration.cli import config_app
from ..configuration.settings import DEFAULT_CONFIG_PATH, Settings, load_settings
from ..errors import InvalidConfigError, MissingConfigError
from .dates import parse_text, shift_instant, show_instant

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Route ``tempora`` log records to stderr at ``level``."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("tempora").setLevel(level)


cli = Typer(help="tempora calendar and date expression tools")


@cli.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
) -> None:
    """Load settings and configure logging for every command."""
    try:
        settings = load_settings(config_path)
    except MissingConfigError:
        settings = Settings()
    except InvalidConfigError as exc:
        logger.warning("Ignoring invalid configuration at %s: %s", config_path, exc)
        settings = Settings()

    configure_logging("DEBUG" if verbose else settings.logging.level)
    ctx.obj = settings


cli.command("parse")(parse_text)
cli.command("show")(show_instant)
cli.command("shift")(shift_instant)
cli.add_typer(config_app, name="config")

__all__ = ["cli", "config_app", "configure_logging"]
