"""Read-only ordered projection of an item collection.

:class:`ContainerOrderingView` is the single place that maps a container
to its display sequence. Gesture resolution, the move coordinator and the
board renderers all read through it so they agree on index-to-item
mapping.
"""

from __future__ import annotations

from collections.abc import Iterable

from prioctl.domain.items import Container, Item, place_in_container
from prioctl.domain.order_keys import DEFAULT_GAP, clamp_gap_index, renumber_keys


def sort_key(item: Item) -> tuple[int, str]:
    """Order key first, item id as tie-breaker."""
    return (item.order, item.id)


class ContainerOrderingView:
    """Sorted per-container view over an immutable item collection."""

    def __init__(self, items: Iterable[Item]) -> None:
        self._items = tuple(items)

    def items_in(self, container_id: str, *, exclude: str | None = None) -> list[Item]:
        """Items of *container_id* sorted by ``(order, id)``.

        *exclude* drops one item id (the item being moved).
        """
        members = [
            item
            for item in self._items
            if item.container_id == container_id and item.id != exclude
        ]
        return sorted(members, key=sort_key)

    def keys_in(self, container_id: str, *, exclude: str | None = None) -> list[int]:
        return [item.order for item in self.items_in(container_id, exclude=exclude)]

    def index_of(self, item_id: str) -> int | None:
        """Display index of *item_id* within its own container."""
        for item in self._items:
            if item.id == item_id:
                siblings = self.items_in(item.container_id)
                return next(i for i, s in enumerate(siblings) if s.id == item_id)
        return None


def apply_authoritative_move(
    items: Iterable[Item],
    item_id: str,
    destination: Container,
    insertion_index: int,
    *,
    gap: int = DEFAULT_GAP,
) -> tuple[Item, ...]:
    """Server-side move: insert at *insertion_index* and renumber the destination.

    Used by the reference backends. The destination container ends up with
    evenly spaced keys, which is the normalization a refetch after an
    optimistic move reconciles against. Unknown *item_id* returns the
    collection unchanged.
    """
    collection = tuple(items)
    moving = next((item for item in collection if item.id == item_id), None)
    if moving is None:
        return collection

    view = ContainerOrderingView(collection)
    siblings = view.items_in(destination.id, exclude=item_id)
    index = clamp_gap_index(insertion_index, len(siblings))
    sequence = [*siblings[:index], moving, *siblings[index:]]
    keys = renumber_keys(len(sequence), gap=gap)

    placed: dict[str, Item] = {}
    for item, key in zip(sequence, keys, strict=True):
        if item.id == item_id:
            placed[item.id] = place_in_container(item, destination, key)
        else:
            placed[item.id] = item.model_copy(update={"order": key})

    return tuple(placed.get(item.id, item) for item in collection)
