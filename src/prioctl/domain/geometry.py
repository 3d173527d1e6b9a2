"""Pointer geometry: turn a pointer position into an insertion gap.

All functions here are pure over a layout snapshot taken for the current
event. Screen coordinates grow downward: a card's midpoint is "below" the
pointer when its ``mid_y`` is greater than or equal to the pointer's y.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned bounding box of a rendered element."""

    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    @classmethod
    def from_span(cls, top: float, bottom: float, *, x: float = 0.0, width: float = 0.0) -> Rect:
        """Build a rect from a vertical ``[top, bottom]`` span."""
        return cls(x=x, y=top, width=width, height=bottom - top)


@dataclass(frozen=True, slots=True)
class RenderedCard:
    """A rendered item card: which item it shows and where."""

    item_id: str
    rect: Rect


def resolve_gap_index(rects: Sequence[Rect], pointer_y: float) -> int:
    """Gap index for a pointer at *pointer_y* over cards in display order.

    The first card whose midpoint is at or below the pointer receives the
    insertion in front of it. If no card qualifies the pointer is past the
    last card and the gap is ``len(rects)``; no cards means gap 0.

    Examples:
        >>> cards = [Rect.from_span(0, 10), Rect.from_span(10, 20), Rect.from_span(20, 30)]
        >>> resolve_gap_index(cards, 5), resolve_gap_index(cards, 15), resolve_gap_index(cards, 35)
        (0, 1, 3)
    """
    for index, rect in enumerate(rects):
        if pointer_y <= rect.mid_y:
            return index
    return len(rects)


def container_at(bounds: Mapping[str, Rect], x: float, y: float) -> str | None:
    """Id of the first container whose bounds contain ``(x, y)``, if any."""
    for container_id, rect in bounds.items():
        if rect.contains(x, y):
            return container_id
    return None
