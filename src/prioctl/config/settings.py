"""PrioSettings: one frozen object for CLI flags, ``PRIOCTL_*`` env and TOML.

Sources, highest priority first: CLI flags, environment, ``prioctl.toml``,
then the defaults in :mod:`prioctl.config.models`. Nested sections read
from env with a double underscore, e.g. ``PRIOCTL_SYNC__MOVE_TIMEOUT_S``.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from prioctl.config.discovery import find_config
from prioctl.config.models import BoardConfig, GestureConfig, OrderingConfig, SyncConfig

# The TOML file for the settings object currently being built.
_active_toml: ContextVar[Path | None] = ContextVar("prioctl_active_toml", default=None)


class PrioSettings(BaseSettings):
    """Settings for one prioctl invocation.

    ``board_root`` is where the SQLite board lives: ``--board`` when given,
    else the directory of the config file in effect, else the CWD.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="PRIOCTL_",
        env_nested_delimiter="__",
    )

    board_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    board: BoardConfig = Field(default_factory=BoardConfig)
    ordering: OrderingConfig = Field(default_factory=OrderingConfig)
    gesture: GestureConfig = Field(default_factory=GestureConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_file = _active_toml.get()
        if toml_file is None:
            return init_settings, env_settings
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        board_root: Path | None = None,
        **cli_flags: Any,
    ) -> PrioSettings:
        """Build settings for a CLI invocation.

        An explicit *config_path* must exist. Without one, ``prioctl.toml``
        is looked up from *board_root* (or the CWD) upwards.

        Raises:
            click.ClickException: The config file is missing or not valid TOML.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                raise click.ClickException(f"Config file not found: {config_path}")
        else:
            toml_path = find_config(board_root)

        if board_root is None:
            board_root = toml_path.parent if toml_path is not None else Path.cwd()

        token = _active_toml.set(toml_path)
        try:
            return cls(board_root=board_root, config_path=toml_path, **cli_flags)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc
        finally:
            _active_toml.reset(token)
