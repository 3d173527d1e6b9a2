"""Tests for the init command."""

import json
from pathlib import Path

from click.testing import CliRunner

from prioctl.cli import cli
from prioctl.services.board import board_exists


class TestInitCommand:
    def test_init_path(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "work"
        result = cli_runner.invoke(cli, ["--json", "init", str(target), "--name", "work"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["data"]["name"] == "work"
        assert board_exists(target)
        assert 'name = "work"' in (target / "prioctl.toml").read_text()

    def test_name_defaults_to_directory(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "garden"
        result = cli_runner.invoke(cli, ["--json", "init", str(target)])
        assert json.loads(result.output)["data"]["name"] == "garden"

    def test_reinit_warns(self, cli_runner: CliRunner, board_root: Path) -> None:
        result = cli_runner.invoke(cli, ["init", str(board_root)])
        assert result.exit_code == 0
        assert "already exists" in result.output
