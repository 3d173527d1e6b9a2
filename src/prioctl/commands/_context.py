"""AppContext: the object every prioctl command receives via ``@click.pass_obj``.

It owns the SQLite backend for the duration of one invocation and turns
a :class:`ServiceResult` into output plus an exit code. Opening the board
is deferred so ``--help``, ``--examples`` and ``init`` never require one.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

import click

from prioctl.output.formatters import OutputSettings, format_result
from prioctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from prioctl.config.settings import PrioSettings
    from prioctl.infrastructure.database.backend import SqliteBackend
    from prioctl.plugins.manager import PluginManager
    from prioctl.services.board import BoardService


class AppContext:
    def __init__(self, settings: PrioSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        self._backend: SqliteBackend | None = None
        self._plugins: PluginManager | None = None

        from prioctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            from prioctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def plugins(self) -> PluginManager:
        """Entry-point plugins, discovered on first use."""
        if self._plugins is None:
            from prioctl.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.load_entry_points()
        return self._plugins

    @property
    def board(self) -> BoardService:
        """Service over the configured board; exits with NO_BOARD if there is none."""
        from prioctl.services.board import BoardService

        return BoardService(
            self._open_backend(),
            gap=self.settings.ordering.default_gap,
            sync=self.settings.sync,
            plugins=self.plugins,
            notifier=self._notify,
        )

    def _open_backend(self) -> SqliteBackend:
        if self._backend is not None:
            return self._backend

        from prioctl.infrastructure.database.backend import SqliteBackend
        from prioctl.services.board import board_exists

        root = self.settings.board_root
        if not board_exists(root):
            self.emit(
                ServiceResult.failure(
                    "open_board",
                    ErrorCode.NO_BOARD,
                    f"No board found at {root} (run 'prioctl init')",
                    board_root=str(root),
                )
            )
        self._backend = SqliteBackend.open(root, gap=self.settings.ordering.default_gap)
        return self._backend

    def run(self, coro: Coroutine[Any, Any, ServiceResult]) -> ServiceResult:
        """Drive an async service call on a fresh event loop."""
        return asyncio.run(coro)

    def _notify(self, message: str) -> None:
        # JSON and quiet output report the rollback through error.code only.
        if not self.output.json_output and not self.output.quiet:
            click.echo(f"NOTICE: {message}", err=True)

    def close(self) -> None:
        if self._backend is not None:
            self._backend.close()
            self._backend = None

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; failures go to stderr and exit with status 1.

        Outside JSON mode, warnings go to stderr so ``-q`` output stays
        pipeable.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)
        click.echo(text)
        if not self.output.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
