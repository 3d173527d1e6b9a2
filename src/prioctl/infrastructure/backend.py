"""Backend boundary: the authoritative side of a move.

:class:`MoveBackend` is everything the move coordinator needs from the
server. :class:`InMemoryBackend` is a reference implementation holding
the authoritative collection in memory; it renumbers the destination
container on every move, the same normalization the hosted backend
applies.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

from prioctl.domain.order_keys import DEFAULT_GAP
from prioctl.domain.ordering import apply_authoritative_move

if TYPE_CHECKING:
    from prioctl.domain.containers import ContainerDirectory
    from prioctl.domain.items import Item

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """The backend rejected or could not complete a request."""


class MoveBackend(Protocol):
    """Authoritative move/read operations, assumed atomic."""

    async def move_item(
        self,
        item_id: str,
        destination_container_id: str,
        insertion_index: int,
    ) -> None: ...

    async def list_items(self) -> list[Item]: ...


class InMemoryBackend:
    """Authoritative backend backed by an in-memory collection.

    Parameters:
        items: Initial authoritative items.
        containers: Container directory used to validate destinations
            and apply forced attributes.
        gap: Spacing used when renumbering a container.
    """

    def __init__(
        self,
        items: Iterable[Item],
        containers: ContainerDirectory,
        *,
        gap: int = DEFAULT_GAP,
    ) -> None:
        self._items: tuple[Item, ...] = tuple(items)
        self._containers = containers
        self._gap = gap
        self.calls: list[tuple[str, str, int]] = []

    async def move_item(
        self,
        item_id: str,
        destination_container_id: str,
        insertion_index: int,
    ) -> None:
        self.calls.append((item_id, destination_container_id, insertion_index))
        destination = self._containers.get(destination_container_id)
        if destination is None:
            msg = f"Unknown container: {destination_container_id}"
            raise BackendError(msg)
        if not any(item.id == item_id for item in self._items):
            msg = f"Unknown item: {item_id}"
            raise BackendError(msg)
        self._items = apply_authoritative_move(
            self._items, item_id, destination, insertion_index, gap=self._gap
        )
        logger.debug("Moved %s to %s at %d", item_id, destination_container_id, insertion_index)

    async def list_items(self) -> list[Item]:
        return list(self._items)

    def snapshot(self) -> tuple[Item, ...]:
        """Current authoritative collection (for assertions)."""
        return self._items
