"""SQLite engine for a board: ``{board_root}/.prioctl/prioctl.db``.

Plain SQLAlchemy Core over one file. Every connection runs in WAL mode
with foreign keys enforced, so an item can never point at a container
that does not exist.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert
from sqlalchemy.engine import Engine

from prioctl.infrastructure.database.counters import SEQUENTIAL_PREFIXES
from prioctl.infrastructure.database.schema import id_counters, metadata

DATA_DIRNAME = ".prioctl"
DB_FILENAME = "prioctl.db"

_PRAGMAS = ("journal_mode=WAL", "foreign_keys=ON", "busy_timeout=5000")


def db_path_for(board_root: Path) -> Path:
    return board_root / DATA_DIRNAME / DB_FILENAME


def _apply_pragmas(dbapi_conn: Any, _record: Any) -> None:
    cursor = dbapi_conn.cursor()
    try:
        for pragma in _PRAGMAS:
            cursor.execute(f"PRAGMA {pragma}")
    finally:
        cursor.close()


def board_engine(db_path: Path) -> Engine:
    engine = create_engine(f"sqlite:///{db_path}")
    event.listen(engine, "connect", _apply_pragmas)
    return engine


def init_database(board_root: Path) -> Engine:
    """Open the board database, creating tables and id counters as needed.

    Safe to run against an existing board; nothing already stored changes.
    """
    db_path = db_path_for(board_root)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = board_engine(db_path)
    metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(
            insert(id_counters).prefix_with("OR IGNORE"),
            [{"type_prefix": prefix, "next_value": 1} for prefix in SEQUENTIAL_PREFIXES],
        )
    return engine
