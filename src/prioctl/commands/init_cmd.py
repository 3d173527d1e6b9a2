"""Command: board initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from prioctl.commands._base import PrioCommand

if TYPE_CHECKING:
    from prioctl.commands._context import AppContext

_INIT_EXAMPLES = [
    ("prioctl init", "board in the current directory"),
    ("prioctl init ~/boards/work --name work", "named board elsewhere"),
    "prioctl --json init /tmp/board",
]


@click.command("init", cls=PrioCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--name", default=None, help="Board name (defaults to the directory name).")
@click.pass_obj
def init_cmd(app: AppContext, path: str, name: str | None) -> None:
    """Create a board with the four quadrants and routine sections."""
    from prioctl.services.board import init_board

    board_root = Path(path).resolve()
    app.emit(
        init_board(
            board_root,
            name=name or board_root.name,
            gap=app.settings.ordering.default_gap,
        )
    )
