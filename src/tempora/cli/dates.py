"""Date commands: extract expressions, inspect instants, shift by calendar units."""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Dict, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tempora.calendar.formatting import format_instant
from tempora.calendar.instant import Instant
from tempora.calendar.interop import parse_flexible, to_epoch_nanos
from tempora.configuration.settings import Settings
from tempora.errors import TemporaError
from tempora.errors.user_messages import format_error_for_cli
from tempora.extraction.expressions import ExpressionParser
from tempora.extraction.models import DateMark

logger = logging.getLogger(__name__)
console = Console()


class Unit(str, Enum):
    """Calendar units accepted by ``tempora shift``."""

    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"
    MICROSECOND = "microsecond"
    NANOSECOND = "nanosecond"


def _settings(ctx: typer.Context) -> Settings:
    if isinstance(ctx.obj, Settings):
        return ctx.obj
    return Settings()


def _fail(error: Exception) -> NoReturn:
    typer.echo(format_error_for_cli(error), err=True)
    raise typer.Exit(code=1)


def describe_instant(instant: Instant, fmt: str, settings: Settings) -> Dict[str, Any]:
    """Summary of an instant for ``show`` and ``shift`` output."""
    tz = settings.display.tzinfo if settings.display.utc_offset_minutes else None
    return {
        "instant": str(instant),
        "formatted": format_instant(instant, fmt, tz),
        "timestamp": instant.timestamp,
        "epoch_nanos": to_epoch_nanos(instant),
        "date": instant.date_as_num(),
        "time": instant.time_as_num(),
        "datetime": instant.datetime_as_num(),
        "year": instant.year,
        "month": instant.month,
        "day": instant.day,
        "hour": instant.hour,
        "minute": instant.minute,
        "second": instant.second,
        "millisecond": instant.millisecond,
        "quarter": instant.quarter,
        "days_in_month": instant.days_in_month(),
    }


def parse_text(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Text containing date expressions"),
    reference: Optional[str] = typer.Option(
        None, "--reference", "-r", help="Reference date (packed yyyyMMdd, epoch ms or ISO text)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Emit JSON output"),
    segments: bool = typer.Option(False, "--segments", help="Include literal text segments"),
) -> None:
    """Extract date expressions from TEXT."""
    settings = _settings(ctx)
    reference = reference or settings.parser.reference
    parser = ExpressionParser(settings.parser.passes)
    try:
        if segments:
            items = parser.extract(text, reference)
        else:
            items = parser.extract_marks(text, reference)
    except TemporaError as exc:
        _fail(exc)

    if json_output:
        typer.echo(json.dumps([item.to_dict() for item in items], ensure_ascii=False, indent=2))
        return

    if not items:
        console.print("[yellow]No date expressions found[/yellow]")
        return

    table = Table(title="Date expressions")
    table.add_column("Text")
    table.add_column("Date")
    table.add_column("Pattern")
    table.add_column("Span", justify="right")
    for item in items:
        if isinstance(item, DateMark):
            table.add_row(escape(item.text), item.date_str, item.pattern.value, f"{item.span_start}-{item.span_end}")
        else:
            table.add_row(f"[dim]{escape(item.text)}[/dim]", "", "", f"{item.span_start}-{item.span_end}")
    console.print(table)


def show_instant(
    ctx: typer.Context,
    value: str = typer.Argument(..., help="Packed yyyyMMdd / yyyyMMddHHmmss, epoch ms or ISO text"),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Output pattern, e.g. yyyy/MM/dd"),
    json_output: bool = typer.Option(False, "--json", help="Emit JSON output"),
) -> None:
    """Show the fields, timestamp and packed forms of VALUE."""
    settings = _settings(ctx)
    try:
        instant = parse_flexible(value)
        summary = describe_instant(instant, fmt or settings.display.date_format, settings)
    except TemporaError as exc:
        _fail(exc)

    if json_output:
        typer.echo(json.dumps(summary, indent=2))
        return

    table = Table(title=summary["instant"], show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key, item in summary.items():
        table.add_row(key, str(item))
    console.print(table)


def shift_instant(
    ctx: typer.Context,
    value: str = typer.Argument(..., help="Starting value (same forms as show)"),
    unit: Unit = typer.Option(..., "--unit", "-u", help="Calendar unit to add"),
    amount: int = typer.Option(..., "--amount", "-n", help="Signed amount"),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Output pattern"),
    json_output: bool = typer.Option(False, "--json", help="Emit JSON output"),
) -> None:
    """Add AMOUNT units to VALUE with calendar carry and day clamping."""
    settings = _settings(ctx)
    pattern = fmt or settings.display.date_format
    try:
        instant = parse_flexible(value)
        before = describe_instant(instant, pattern, settings)["formatted"]
        getattr(instant, f"add_{unit.value}")(amount)
        summary = describe_instant(instant, pattern, settings)
    except TemporaError as exc:
        _fail(exc)

    logger.debug("Shifted %s by %d %s", value, amount, unit.value)
    if json_output:
        typer.echo(json.dumps(summary, indent=2))
        return
    console.print(f"{escape(before)} [bold]{amount:+d} {unit.value}[/bold] -> [green]{escape(summary['formatted'])}[/green]")
