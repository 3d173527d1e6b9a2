"""Command: add a task or routine to the end of a container."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from prioctl.commands._base import PrioCommand
from prioctl.domain.items import ItemKind

if TYPE_CHECKING:
    from prioctl.commands._context import AppContext


@click.command(
    cls=PrioCommand,
    examples=[
        ("prioctl add 'Write report' --to Q1", "quadrant sets urgent and important"),
        ("prioctl add 'Inbox zero' --to LIST-0001 --urgent --long", "lists keep flags"),
        ("prioctl add Stretch --to RTN-TOP --routine", "daily routine"),
    ],
)
@click.argument("title")
@click.option("--to", "container_id", required=True, help="Destination container id.")
@click.option("--urgent", is_flag=True, help="Mark urgent (quadrants override this).")
@click.option("--important", is_flag=True, help="Mark important (quadrants override this).")
@click.option("--long", "is_long_task", is_flag=True, help="Mark as a long task.")
@click.option("--routine", is_flag=True, help="Create a routine instead of a task.")
@click.pass_obj
def add(
    app: AppContext,
    title: str,
    container_id: str,
    urgent: bool,
    important: bool,
    is_long_task: bool,
    routine: bool,
) -> None:
    """Append a new item to a container."""
    app.emit(
        app.board.add(
            title,
            container_id,
            kind=ItemKind.ROUTINE if routine else ItemKind.TASK,
            urgent=urgent,
            important=important,
            is_long_task=is_long_task,
        )
    )
