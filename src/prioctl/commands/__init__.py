"""Subcommand modules for prioctl.

register_commands() uses deferred imports to keep ``prioctl --help`` fast.
Registration order is the order ``--help`` lists them in.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the board workflow: set up, fill, inspect, reorder, repair."""
    from prioctl.commands.add import add
    from prioctl.commands.check import check
    from prioctl.commands.init_cmd import init_cmd
    from prioctl.commands.list_cmd import list_group
    from prioctl.commands.move import move
    from prioctl.commands.rebalance import rebalance
    from prioctl.commands.show import show

    for command in (init_cmd, list_group, add, show, move, check, rebalance):
        cli.add_command(command)
