"""Tests for the tempora command line interface."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tempora.cli import cli
from tempora.configuration.settings import Settings, load_settings, save_settings


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


def _invoke(runner: CliRunner, config_path: Path, *args: str):
    return runner.invoke(cli, ["--config", str(config_path), *args])


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


def test_parse_json(runner, config_path):
    """Test parse command with JSON output."""
    result = _invoke(runner, config_path, "parse", "会议定于2025年4月16日召开", "-r", "20250416", "--json")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data == [
        {
            "text": "2025年4月16日",
            "date": "20250416",
            "instant": "2025-04-16T00:00:00.000Z",
            "pattern": "year_month_day",
            "span_start": 4,
            "span_end": 14,
        }
    ]


def test_parse_segments_json(runner, config_path):
    result = _invoke(runner, config_path, "parse", "截至上月末", "-r", "20250416", "--json", "--segments")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert [item["date"] for item in data] == [None, "20250330"]
    assert data[0]["text"] == "截至"


def test_parse_table(runner, config_path):
    """Test parse command with table output."""
    result = _invoke(runner, config_path, "parse", "第2季度与下季度末", "--reference", "20250416")

    assert result.exit_code == 0
    assert "Date expressions" in result.output
    assert "20250630" in result.output
    assert "20250930" in result.output
    assert "quarter" in result.output


def test_parse_nothing_found(runner, config_path):
    result = _invoke(runner, config_path, "parse", "hello world", "-r", "20250416")

    assert result.exit_code == 0
    assert "No date expressions found" in result.output


def test_parse_bad_reference(runner, config_path):
    result = _invoke(runner, config_path, "parse", "上月末", "-r", "sometime")

    assert result.exit_code == 1
    assert "CALENDAR_RANGE_ERROR" in result.output


def test_parse_uses_configured_passes_and_reference(runner, config_path):
    save_settings(
        Settings.model_validate({"parser": {"passes": ["quarter"], "reference": "20240101"}}),
        config_path,
    )

    result = _invoke(runner, config_path, "parse", "第2季度和2025年4月16日", "--json")

    assert result.exit_code == 0
    assert [item["date"] for item in json.loads(result.stdout)] == ["20240630"]


# ---------------------------------------------------------------------------
# show / shift
# ---------------------------------------------------------------------------


def test_show_json(runner, config_path):
    result = _invoke(runner, config_path, "show", "20250416132647", "--json")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["instant"] == "2025-04-16T13:26:47.000Z"
    assert data["formatted"] == "2025-04-16 13:26:47"
    assert data["timestamp"] == 1_744_810_007_000
    assert data["epoch_nanos"] == 1_744_810_007_000_000_000
    assert data["quarter"] == 2
    assert data["days_in_month"] == 30


def test_show_custom_format(runner, config_path):
    result = _invoke(runner, config_path, "show", "2025-04-16T13:26:47Z", "-f", "yyyy/MM/dd", "--json")

    assert result.exit_code == 0
    assert json.loads(result.stdout)["formatted"] == "2025/04/16"


def test_show_uses_display_offset(runner, config_path):
    save_settings(Settings.model_validate({"display": {"utc_offset_minutes": 480}}), config_path)

    result = _invoke(runner, config_path, "show", "20250416132647", "--json")

    data = json.loads(result.stdout)
    assert data["formatted"] == "2025-04-16 21:26:47"
    assert data["instant"] == "2025-04-16T13:26:47.000Z"


def test_show_table(runner, config_path):
    result = _invoke(runner, config_path, "show", "20250416")

    assert result.exit_code == 0
    assert "2025-04-16T00:00:00.000Z" in result.output
    assert "days_in_month" in result.output


def test_show_invalid_value(runner, config_path):
    result = _invoke(runner, config_path, "show", "not a date")

    assert result.exit_code == 1
    assert "Error [CALENDAR_RANGE_ERROR]" in result.output


def test_shift_month_clamps(runner, config_path):
    result = _invoke(runner, config_path, "shift", "20250131", "--unit", "month", "--amount", "1", "--json")

    assert result.exit_code == 0
    assert json.loads(result.stdout)["date"] == 20250228


def test_shift_negative_second(runner, config_path):
    result = _invoke(runner, config_path, "shift", "20250101000000", "-u", "second", "--amount=-1", "--json")

    assert result.exit_code == 0
    assert json.loads(result.stdout)["datetime"] == 20241231235959


def test_shift_text_output(runner, config_path):
    result = _invoke(runner, config_path, "shift", "20250416", "-u", "day", "-n", "15")

    assert result.exit_code == 0
    assert "2025-04-16 00:00:00" in result.output
    assert "2025-05-01 00:00:00" in result.output


def test_shift_overflow(runner, config_path):
    result = _invoke(runner, config_path, "shift", "20250416", "-u", "year", "-n", "3000000000")

    assert result.exit_code == 1
    assert "ARITHMETIC_OVERFLOW" in result.output


def test_invalid_config_falls_back_to_defaults(runner, config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("{broken", encoding="utf-8")

    result = _invoke(runner, config_path, "show", "20250416", "--json")

    assert result.exit_code == 0
    assert json.loads(result.stdout)["formatted"] == "2025-04-16 00:00:00"


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


def test_config_init_and_show(runner, config_path):
    result = runner.invoke(cli, ["config", "init", "--config-path", str(config_path), "--utc-offset", "480"])

    assert result.exit_code == 0
    assert "Configuration initialized" in result.output
    assert load_settings(config_path).display.utc_offset_minutes == 480

    result = runner.invoke(cli, ["config", "show", "--config-path", str(config_path)])
    assert result.exit_code == 0
    assert '"utc_offset_minutes": 480' in result.output


def test_config_init_force_resets(runner, config_path):
    save_settings(Settings.model_validate({"display": {"utc_offset_minutes": 60}}), config_path)

    result = runner.invoke(cli, ["config", "init", "--config-path", str(config_path), "--force"])

    assert result.exit_code == 0
    assert load_settings(config_path).display.utc_offset_minutes == 0


def test_config_set(runner, config_path):
    save_settings(Settings(), config_path)

    result = runner.invoke(
        cli, ["config", "set", "parser.passes", "quarter,bare_year", "--config-path", str(config_path)]
    )

    assert result.exit_code == 0
    assert "Updated parser.passes" in result.output
    assert [p.value for p in load_settings(config_path).parser.passes] == ["quarter", "bare_year"]


def test_config_set_invalid_value(runner, config_path):
    save_settings(Settings(), config_path)

    result = runner.invoke(
        cli, ["config", "set", "display.utc_offset_minutes", "5000", "--config-path", str(config_path)]
    )

    assert result.exit_code == 1
    assert "Invalid value for display.utc_offset_minutes" in result.output
    assert load_settings(config_path).display.utc_offset_minutes == 0


def test_config_show_missing(runner, config_path):
    result = runner.invoke(cli, ["config", "show", "--config-path", str(config_path)])

    assert result.exit_code == 1
    assert "MISSING_CONFIG" in result.output


def test_config_validate(runner, config_path):
    save_settings(Settings(), config_path)

    result = runner.invoke(cli, ["config", "validate", "--config-path", str(config_path)])

    assert result.exit_code == 0
    assert "Configuration valid" in result.output
    assert "Log level: WARNING" in result.output


def test_config_validate_invalid(runner, config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text(json.dumps({"logging": {"level": "LOUD"}}), encoding="utf-8")

    result = runner.invoke(cli, ["config", "validate", "--config-path", str(config_path)])

    assert result.exit_code == 1
    assert "Configuration invalid" in result.output
