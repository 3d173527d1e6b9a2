"""Tests for PrioSettings: unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from prioctl.config.settings import PrioSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PRIOCTL_CONFIG", raising=False)
    monkeypatch.delenv("PRIOCTL_ORDERING__DEFAULT_GAP", raising=False)
    monkeypatch.delenv("PRIOCTL_QUIET", raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = PrioSettings.from_cli(board_root=tmp_path)
        assert settings.board_root == tmp_path
        assert settings.json_output is False
        assert settings.board.name == "my-board"
        assert settings.ordering.default_gap == 1000

    def test_frozen(self, tmp_path: Path) -> None:
        settings = PrioSettings.from_cli(board_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "prioctl.toml").write_text('[board]\nname = "home"\n[gesture]\nlong_press_ms = 300\n')
        settings = PrioSettings.from_cli(board_root=tmp_path)
        assert settings.board.name == "home"
        assert settings.gesture.long_press_ms == 300
        assert settings.gesture.move_threshold_px == 10.0

    def test_board_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "prioctl.toml").write_text("")
        nested = tmp_path / "sub"
        nested.mkdir()
        monkeypatch.chdir(nested)
        settings = PrioSettings.from_cli()
        assert settings.board_root == tmp_path.resolve()
        assert settings.config_path is not None

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text('[board]\nname = "custom"\n')
        settings = PrioSettings.from_cli(config_path=str(custom), board_root=tmp_path)
        assert settings.board.name == "custom"
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "prioctl.toml").write_text("[board\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            PrioSettings.from_cli(board_root=tmp_path)


class TestPriority:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "prioctl.toml").write_text("[ordering]\ndefault_gap = 64\n")
        monkeypatch.setenv("PRIOCTL_ORDERING__DEFAULT_GAP", "128")
        settings = PrioSettings.from_cli(board_root=tmp_path)
        assert settings.ordering.default_gap == 128

    def test_cli_flags_beat_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PRIOCTL_QUIET", "true")
        settings = PrioSettings.from_cli(board_root=tmp_path, quiet=False)
        assert settings.quiet is False

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            PrioSettings.from_cli(config_path=str(tmp_path / "nope.toml"), board_root=tmp_path)

    def test_env_nested_section(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PRIOCTL_SYNC__REFRESH_AFTER_MOVE", "false")
        settings = PrioSettings.from_cli(board_root=tmp_path)
        assert settings.sync.refresh_after_move is False
