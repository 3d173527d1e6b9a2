"""prioctl entry point: global output and board-location flags."""

from __future__ import annotations

from pathlib import Path

import click

from prioctl import __version__
from prioctl.commands import register_commands
from prioctl.commands._base import PrioGroup
from prioctl.commands._context import AppContext
from prioctl.config.settings import PrioSettings

_EXAMPLES = [
    ("prioctl init", "create a board here"),
    ("prioctl add 'Call the bank' --to Q1", ""),
    ("prioctl show", "every container in display order"),
    ("prioctl -b ~/boards/work show Q2", "a board somewhere else"),
    ("prioctl --json move TASK-0001 Q2 --at 1", ""),
]


@click.group(
    cls=PrioGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    examples=_EXAMPLES,
)
@click.version_option(__version__, "-V", "--version", prog_name="prioctl")
@click.option(
    "-b",
    "--board",
    "board_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Board directory. Default: the directory holding the nearest prioctl.toml.",
)
@click.option("-c", "--config", "config_path", default=None, help="Read this TOML file.")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids or OK/ERROR lines only.")
@click.option("-v", "--verbose", is_flag=True, help="Order keys, debug logs and timings.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.pass_context
def cli(
    ctx: click.Context,
    board_root: Path | None,
    config_path: str | None,
    **flags: bool,
) -> None:
    """prioctl: Eisenhower-matrix board with drag-and-drop ordering.

    Items sit in four quadrants, custom lists and two routine sections,
    each kept in order by sparse integer keys.
    """
    if flags["json_output"] and flags["quiet"]:
        raise click.UsageError("--json and --quiet cannot be combined.")

    app = AppContext(
        PrioSettings.from_cli(config_path=config_path, board_root=board_root, **flags)
    )
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
