"""Command: renumber order keys."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from prioctl.commands._base import PrioCommand

if TYPE_CHECKING:
    from prioctl.commands._context import AppContext


@click.command(
    cls=PrioCommand,
    examples=[
        ("prioctl rebalance", "every container"),
        "prioctl rebalance Q1",
    ],
)
@click.argument("container_id", required=False)
@click.pass_obj
def rebalance(app: AppContext, container_id: str | None) -> None:
    """Renumber keys to gap, 2*gap, ... preserving display order."""
    app.emit(app.board.rebalance(container_id))
