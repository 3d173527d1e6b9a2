"""Command: order-key integrity check."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from prioctl.commands._base import PrioCommand

if TYPE_CHECKING:
    from prioctl.commands._context import AppContext


@click.command(
    cls=PrioCommand,
    examples=[
        "prioctl check",
        ("prioctl -v check", "list offending keys"),
    ],
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Report containers whose order keys are duplicated or out of order."""
    app.emit(app.board.check())
