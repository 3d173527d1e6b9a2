"""Command: print containers and their items in display order."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from prioctl.commands._base import PrioCommand

if TYPE_CHECKING:
    from prioctl.commands._context import AppContext


@click.command(
    cls=PrioCommand,
    examples=[
        "prioctl show",
        "prioctl show Q2",
        ("prioctl -v show", "include raw order keys"),
        ("prioctl -q show Q1", "ids only, one per line"),
        "prioctl --json show",
    ],
)
@click.argument("container_id", required=False)
@click.pass_obj
def show(app: AppContext, container_id: str | None) -> None:
    """Show the board, or one container."""
    app.emit(app.board.show(container_id))
