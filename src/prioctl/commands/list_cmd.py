"""Command group: custom lists."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from prioctl.commands._base import PrioGroup

if TYPE_CHECKING:
    from prioctl.commands._context import AppContext


_LIST_EXAMPLES = [("prioctl list create Errands", "new LIST-nnnn container")]


@click.group("list", cls=PrioGroup, examples=_LIST_EXAMPLES)
def list_group() -> None:
    """Manage custom lists."""


@list_group.command("create", examples=_LIST_EXAMPLES)
@click.argument("name")
@click.pass_obj
def create(app: AppContext, name: str) -> None:
    """Create a custom list (no forced urgency or importance)."""
    app.emit(app.board.create_list(name))
