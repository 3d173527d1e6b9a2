"""Command: move an item to a gap in a container."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from prioctl.commands._base import PrioCommand

if TYPE_CHECKING:
    from prioctl.commands._context import AppContext


@click.command(
    cls=PrioCommand,
    examples=[
        ("prioctl move TASK-0003 Q1", "to the top of Do First"),
        ("prioctl move TASK-0003 Q1 --at 2", "between the 2nd and 3rd cards"),
        ("prioctl move TASK-0003 Q4 --bottom", "after the last card"),
    ],
)
@click.argument("item_id")
@click.argument("container_id")
@click.option("--at", "insert_at", type=click.IntRange(min=0), default=0, help="Gap index.")
@click.option("--bottom", is_flag=True, help="Append after the last item.")
@click.pass_obj
def move(app: AppContext, item_id: str, container_id: str, insert_at: int, bottom: bool) -> None:
    """Move ITEM_ID into CONTAINER_ID at gap index --at.

    Gap 0 is above the first card; gap N is below the N-th card. Indices
    count the destination's other items, so the moved item never counts
    itself.
    """
    board = app.board
    if bottom:
        # Out-of-range gaps clamp to the end.
        insert_at = 2**31
    app.emit(app.run(board.move(item_id, container_id, insert_at)))
