"""Click base classes shared by every prioctl command.

Commands declare usage examples as plain invocations or as
``(invocation, note)`` pairs. ``--examples`` prints them with the notes
lined up and exits before the board is opened.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click

Example = str | tuple[str, str]


def format_examples(command_path: str, examples: Sequence[Example]) -> str:
    rows = [(example, "") if isinstance(example, str) else example for example in examples]
    width = max(len(invocation) for invocation, _ in rows)
    lines = [f"Examples for '{command_path}':", ""]
    for invocation, note in rows:
        if note:
            lines.append(f"  {invocation.ljust(width)}  # {note}")
        else:
            lines.append(f"  {invocation}")
    return "\n".join(lines)


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", ())
    click.echo(format_examples(ctx.command_path, examples))
    ctx.exit(0)


class _ExamplesMixin:
    """Adds an eager ``--examples`` flag when examples are given."""

    examples: tuple[Example, ...]
    params: list[click.Parameter]

    def _attach_examples(self, examples: Sequence[Example] | None) -> None:
        self.examples = tuple(examples or ())
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_print_examples,
                    help="Show usage examples and exit.",
                )
            )


class PrioCommand(_ExamplesMixin, click.Command):
    def __init__(
        self, *args: Any, examples: Sequence[Example] | None = None, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)


class PrioGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`PrioCommand`.

    ``--help`` lists subcommands in registration order (init, add, show,
    move, ...) rather than alphabetically, following a board's workflow.
    """

    command_class = PrioCommand

    def __init__(
        self, *args: Any, examples: Sequence[Example] | None = None, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)
