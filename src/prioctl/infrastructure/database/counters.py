"""Sequential ids for tasks, routine entries and custom lists.

Ids are claimed inside the caller's transaction, so a rolled-back insert
gives its id back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import update

from prioctl.infrastructure.database.schema import id_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection

TASK_PREFIX = "TASK-"
ROUTINE_PREFIX = "RTN-"
LIST_PREFIX = "LIST-"

SEQUENTIAL_PREFIXES = (TASK_PREFIX, ROUTINE_PREFIX, LIST_PREFIX)


def next_sequential_id(conn: Connection, type_prefix: str) -> str:
    """Claim the next id for *type_prefix*, e.g. ``TASK-0042``.

    Raises:
        ValueError: *type_prefix* has no counter.
    """
    if type_prefix not in SEQUENTIAL_PREFIXES:
        msg = f"Unknown sequential type prefix: {type_prefix!r}"
        raise ValueError(msg)
    claimed = conn.execute(
        update(id_counters)
        .where(id_counters.c.type_prefix == type_prefix)
        .values(next_value=id_counters.c.next_value + 1)
        .returning(id_counters.c.next_value - 1)
    ).scalar_one()
    return f"{type_prefix}{claimed:04d}"
