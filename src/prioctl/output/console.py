"""Rich theme and the capture helper every renderer draws through.

Renderers never print directly: they draw on a Console that writes to a
buffer and hand back plain text, which the CLI echoes to stdout or
stderr. Rich drops ANSI codes when the buffer is not a terminal.
"""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO

from rich.console import Console
from rich.theme import Theme

PRIO_THEME = Theme(
    {
        "prio.ok": "bold green",
        "prio.error": "bold red",
        "prio.warning": "bold yellow",
        "prio.op": "bold cyan",
        "prio.key": "dim",
        "prio.id": "bold blue",
        "prio.title": "bold",
        "prio.order": "magenta",
        "prio.slow": "yellow",
        "prio.kind.quadrant": "yellow",
        "prio.kind.list": "cyan",
        "prio.kind.routine_section": "green",
    }
)


def style_for_kind(container_kind: str) -> str:
    """Theme style for a container kind, or ``""`` for unknown kinds."""
    name = f"prio.kind.{container_kind}"
    return name if name in PRIO_THEME.styles else ""


def render_to_text(
    draw: Callable[[Console], object], *, width: int = 120, no_color: bool = False
) -> str:
    buffer = StringIO()
    draw(Console(file=buffer, theme=PRIO_THEME, width=width, no_color=no_color, highlight=False))
    return buffer.getvalue().rstrip("\n")
