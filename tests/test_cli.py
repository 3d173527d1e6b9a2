"""Tests for the root prioctl CLI."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from prioctl import __version__
from prioctl.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "prioctl" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_global_flags_accepted(cli_runner: CliRunner) -> None:
    for flag in (["--json"], ["-q"], ["-v"], ["--log-json"], ["-c", "/tmp/none.toml"]):
        result = cli_runner.invoke(cli, [*flag, "--version"])
        assert result.exit_code == 0, flag


def test_all_commands_registered(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    for name in ("init", "add", "list", "show", "move", "check", "rebalance"):
        assert name in result.output


def test_short_help_flag(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "--board" in result.output


def test_json_and_quiet_conflict(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--json", "-q", "show"])
    assert result.exit_code == 2
    assert "cannot be combined" in result.output


def test_board_option_from_another_directory(
    cli_runner: CliRunner,
    board_root: Path,
    tmp_path_factory: pytest.TempPathFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("PRIOCTL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path_factory.mktemp("elsewhere"))
    result = cli_runner.invoke(cli, ["-b", str(board_root), "--json", "add", "Pay rent", "--to", "Q1"])
    assert result.exit_code == 0, result.output
    shown = json.loads(cli_runner.invoke(cli, ["--board", str(board_root), "--json", "show", "Q1"]).output)
    assert [i["title"] for i in shown["data"]["containers"][0]["items"]] == ["Pay rent"]


def test_missing_board_reports_no_board(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("PRIOCTL_CONFIG", raising=False)
    result = cli_runner.invoke(cli, ["-b", str(tmp_path), "show"])
    assert result.exit_code == 1
    assert "NO_BOARD" in result.output


def test_root_examples(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--examples"])
    assert result.exit_code == 0
    assert "Examples for 'prioctl':" in result.output
