"""SqliteBackend: authoritative board storage on SQLite.

Implements the async :class:`~prioctl.infrastructure.backend.MoveBackend`
contract used by the move coordinator, the
:class:`~prioctl.domain.containers.ContainerDirectory` lookup, and the
board CRUD the CLI needs (default containers, custom lists, new items,
renumbering).

Every write runs inside ``engine.begin()`` so a move either lands
completely (item row plus renumbered siblings) or not at all.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select, update

from prioctl.domain.containers import default_containers
from prioctl.domain.items import (
    Container,
    ContainerKind,
    ForcedAttributes,
    Item,
    ItemKind,
    place_in_container,
)
from prioctl.domain.order_keys import DEFAULT_GAP, renumber_keys
from prioctl.domain.ordering import ContainerOrderingView, apply_authoritative_move
from prioctl.infrastructure.backend import BackendError
from prioctl.infrastructure.database.counters import (
    LIST_PREFIX,
    ROUTINE_PREFIX,
    TASK_PREFIX,
    next_sequential_id,
)
from prioctl.infrastructure.database.engine import init_database
from prioctl.infrastructure.database.schema import containers, items

if TYPE_CHECKING:
    from sqlalchemy import Connection, Row
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _flag(value: Any) -> bool | None:
    return None if value is None else bool(value)


def _container_from_row(row: Row[Any]) -> Container:
    return Container(
        id=row.id,
        name=row.name,
        kind=ContainerKind(row.kind),
        forced=ForcedAttributes(
            urgent=_flag(row.forced_urgent),
            important=_flag(row.forced_important),
        ),
    )


def _item_from_row(row: Row[Any]) -> Item:
    return Item(
        id=row.id,
        container_id=row.container_id,
        order=row.order_key,
        title=row.title,
        kind=ItemKind(row.kind),
        urgent=bool(row.urgent),
        important=bool(row.important),
        is_long_task=bool(row.is_long_task),
        completed=bool(row.completed),
        weight=row.weight,
    )


def _item_values(item: Item) -> dict[str, Any]:
    return {
        "container_id": item.container_id,
        "order_key": item.order,
        "title": item.title,
        "kind": str(item.kind),
        "urgent": int(item.urgent),
        "important": int(item.important),
        "is_long_task": int(item.is_long_task),
        "completed": int(item.completed),
        "weight": item.weight,
    }


class SqliteBackend:
    """Board storage backed by a SQLite database.

    Parameters:
        engine: Engine with the board tables created.
        gap: Key spacing for appends and renumbering.
    """

    def __init__(self, engine: Engine, *, gap: int = DEFAULT_GAP) -> None:
        self._engine = engine
        self._gap = gap

    @classmethod
    def open(cls, board_root: Path, *, gap: int = DEFAULT_GAP) -> SqliteBackend:
        """Open (creating if needed) the board database under *board_root*."""
        return cls(init_database(board_root), gap=gap)

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def ensure_default_containers(self) -> list[str]:
        """Create the quadrants and routine sections that are missing.

        Returns the ids that were created.
        """
        created: list[str] = []
        with self._engine.begin() as conn:
            existing = set(conn.execute(select(containers.c.id)).scalars())
            for position, container in enumerate(default_containers()):
                if container.id in existing:
                    continue
                self._insert_container(conn, container, position)
                created.append(container.id)
        return created

    def create_list(self, name: str) -> Container:
        """Create a custom list (no forced attributes)."""
        with self._engine.begin() as conn:
            container_id = next_sequential_id(conn, LIST_PREFIX)
            position = conn.execute(
                select(func.coalesce(func.max(containers.c.position), -1) + 1)
            ).scalar_one()
            container = Container(id=container_id, name=name, kind=ContainerKind.LIST)
            self._insert_container(conn, container, position)
        return container

    def list_containers(self) -> list[Container]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(containers).order_by(containers.c.position, containers.c.id)
            ).fetchall()
        return [_container_from_row(row) for row in rows]

    def get(self, container_id: str) -> Container | None:
        with self._engine.connect() as conn:
            row = conn.execute(select(containers).where(containers.c.id == container_id)).first()
        return _container_from_row(row) if row is not None else None

    @staticmethod
    def _insert_container(conn: Connection, container: Container, position: int) -> None:
        forced = container.forced
        conn.execute(
            insert(containers).values(
                id=container.id,
                name=container.name,
                kind=str(container.kind),
                forced_urgent=None if forced.urgent is None else int(forced.urgent),
                forced_important=None if forced.important is None else int(forced.important),
                position=position,
                created=_now_iso(),
            )
        )

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def add_item(
        self,
        title: str,
        container_id: str,
        *,
        kind: ItemKind = ItemKind.TASK,
        urgent: bool = False,
        important: bool = False,
        is_long_task: bool = False,
    ) -> Item:
        """Append a new item to the end of *container_id*.

        Raises:
            BackendError: The container does not exist.
        """
        container = self.get(container_id)
        if container is None:
            msg = f"Unknown container: {container_id}"
            raise BackendError(msg)

        prefix = ROUTINE_PREFIX if kind == ItemKind.ROUTINE else TASK_PREFIX
        now = _now_iso()
        with self._engine.begin() as conn:
            last = conn.execute(
                select(func.max(items.c.order_key)).where(items.c.container_id == container_id)
            ).scalar_one()
            order = self._gap if last is None else last + self._gap
            draft = Item(
                id=next_sequential_id(conn, prefix),
                container_id=container_id,
                order=order,
                title=title,
                kind=kind,
                urgent=urgent,
                important=important,
                is_long_task=is_long_task,
            )
            item = place_in_container(draft, container, order)
            conn.execute(
                insert(items).values(id=item.id, created=now, modified=now, **_item_values(item))
            )
        return item

    def load_items(self) -> list[Item]:
        with self._engine.connect() as conn:
            rows = conn.execute(select(items).order_by(items.c.id)).fetchall()
        return [_item_from_row(row) for row in rows]

    def renumber_container(self, container_id: str) -> int:
        """Rewrite *container_id*'s keys as ``gap, 2*gap, ...``; returns the count."""
        view = ContainerOrderingView(self.load_items())
        members = view.items_in(container_id)
        keys = renumber_keys(len(members), gap=self._gap)
        now = _now_iso()
        with self._engine.begin() as conn:
            for member, key in zip(members, keys, strict=True):
                conn.execute(
                    update(items)
                    .where(items.c.id == member.id)
                    .values(order_key=key, modified=now)
                )
        return len(members)

    # ------------------------------------------------------------------
    # MoveBackend contract
    # ------------------------------------------------------------------

    async def list_items(self) -> list[Item]:
        return self.load_items()

    async def move_item(
        self,
        item_id: str,
        destination_container_id: str,
        insertion_index: int,
    ) -> None:
        destination = self.get(destination_container_id)
        if destination is None:
            msg = f"Unknown container: {destination_container_id}"
            raise BackendError(msg)

        now = _now_iso()
        with self._engine.begin() as conn:
            rows = conn.execute(select(items)).fetchall()
            before = {row.id: _item_from_row(row) for row in rows}
            if item_id not in before:
                msg = f"Unknown item: {item_id}"
                raise BackendError(msg)
            after = apply_authoritative_move(
                before.values(), item_id, destination, insertion_index, gap=self._gap
            )
            for item in after:
                if item == before[item.id]:
                    continue
                conn.execute(
                    update(items)
                    .where(items.c.id == item.id)
                    .values(modified=now, **_item_values(item))
                )
        logger.debug("Moved %s to %s at %d", item_id, destination_container_id, insertion_index)
