"""Human and ``--quiet`` rendering of ServiceResult, keyed by ``result.op``.

Ops without a dedicated renderer print their data as ``key: value`` lines.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from prioctl.output.console import render_to_text, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from prioctl.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console", bool], None]

SLOW_SPAN_MS = 100.0


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    if not result.ok:
        return render_to_text(lambda console: _render_error(result, console, verbose))
    renderer = _OP_RENDERERS.get(result.op, _render_generic)
    return render_to_text(lambda console: renderer(result, console, verbose))


def render_quiet(result: ServiceResult) -> str:
    """One status line, or one item id per line for board listings."""
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {message}"
    containers = result.data.get("containers")
    if isinstance(containers, list):
        return "\n".join(item["id"] for c in containers for item in c.get("items", []))
    return f"OK: {result.op}"


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="prio.ok"), Text(f"  {result.op}", style="prio.op"))


_FIELD_STYLES = {"title": "prio.title", "order": "prio.order"}


def _field(console: Console, key: str, value: Any) -> None:
    style = "prio.id" if key == "id" or key.endswith("_id") else _FIELD_STYLES.get(key, "")
    console.print(Text(f"  {key}: ", style="prio.key"), Text(str(value), style=style))


def _span_tree(span: dict[str, Any], tree: Tree | None = None) -> Tree:
    duration = float(span.get("duration_ms", 0.0))
    label = Text(f"{duration:8.2f}ms  ", style="prio.slow" if duration > SLOW_SPAN_MS else "dim")
    label.append(str(span.get("name", "?")))
    notes = span.get("annotations") or {}
    if notes:
        label.append("  " + ", ".join(f"{k}={v}" for k, v in notes.items()), style="dim")
    node = Tree(label) if tree is None else tree.add(label)
    for child in span.get("children", []):
        _span_tree(child, node)
    return node


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    for key, value in result.meta.items():
        if key == "telemetry":
            console.print(_span_tree(value))
        else:
            console.print(Text(f"  {key}: ", style="prio.key"), Text(str(value)))


def _flag(value: Any) -> str:
    return "x" if value else ""


def _render_error(result: ServiceResult, console: Console, verbose: bool) -> None:
    error = result.error
    heading = Text("ERROR", style="prio.error")
    heading.append(f"  {result.op}", style="prio.op")
    if error is None:
        console.print(heading, Text("Unknown error"))
        return
    heading.append(f" [{error.code}]", style="prio.op")
    console.print(heading, Text(error.message))
    if error.rolled_back:
        console.print(Text("  the local board was restored", style="prio.warning"))
    if verbose:
        for key, value in error.detail.items():
            _field(console, key, value)


def _render_generic(result: ServiceResult, console: Console, verbose: bool) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_board(result: ServiceResult, console: Console, verbose: bool) -> None:
    """One table per container, items in display order."""
    for container in result.data.get("containers", []):
        style = style_for_kind(str(container.get("kind", "")))
        title = Text(f"{container['name']} ({container['id']})", style=style or "bold")
        table = Table(title=title, show_header=True, pad_edge=False, expand=False)
        table.add_column("#", justify="right", style="dim")
        table.add_column("ID", style="prio.id", no_wrap=True)
        table.add_column("Title", style="prio.title")
        table.add_column("U", justify="center")
        table.add_column("I", justify="center")
        table.add_column("Weight", justify="right")
        if verbose:
            table.add_column("Order", style="prio.order", justify="right")

        for index, item in enumerate(container.get("items", [])):
            row = [
                str(index),
                str(item["id"]),
                str(item["title"]),
                _flag(item.get("urgent")),
                _flag(item.get("important")),
                f"{item.get('weight', 0):.1f}",
            ]
            if verbose:
                row.append(str(item.get("order", "")))
            table.add_row(*row)
        console.print(table)

    console.print(f"\n{result.data.get('count', 0)} items")
    if verbose:
        _render_meta(console, result)


def _render_move(result: ServiceResult, console: Console, verbose: bool) -> None:
    _status_line(console, result)
    data = result.data
    if data.get("status") == "noop":
        console.print(f"  {data.get('item_id')} unchanged ({data.get('reason')})")
        return
    for key in ("item_id", "container_id", "insert_at", "order"):
        if key in data:
            _field(console, key, data[key])
    if data.get("renumbered"):
        console.print(Text("  destination keys renumbered", style="prio.warning"))
    if verbose:
        if data.get("refreshed"):
            _field(console, "refreshed", True)
        _render_meta(console, result)


def _render_check(result: ServiceResult, console: Console, verbose: bool) -> None:
    issues = result.data.get("issues", [])
    if not issues:
        console.print("[prio.ok]OK[/prio.ok]  All order keys are strictly increasing.")
        return
    for issue in issues:
        console.print(
            f"  [prio.warning]{issue['category']}[/prio.warning] "
            f"{escape('[' + issue['container_id'] + ']')}: {escape(issue['message'])}"
        )
        if verbose:
            console.print(f"    keys: {issue.get('keys')}")
    console.print(f"\n{len(issues)} containers need rebalancing (run 'prioctl rebalance')")


def _render_rebalance(result: ServiceResult, console: Console, verbose: bool) -> None:
    _status_line(console, result)
    for container_id, count in result.data.get("containers", {}).items():
        console.print(f"  [prio.id]{container_id}[/prio.id]: {count} items renumbered")


_OP_RENDERERS: dict[str, Renderer] = {
    "show": _render_board,
    "move_item": _render_move,
    "check": _render_check,
    "rebalance": _render_rebalance,
}
