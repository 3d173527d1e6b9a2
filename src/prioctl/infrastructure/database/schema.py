"""SQLAlchemy Core table definitions for the prioctl board database."""

from __future__ import annotations

from sqlalchemy import (
    REAL,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)

metadata = MetaData()

containers = Table(
    "containers",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("kind", Text, nullable=False),
    Column("forced_urgent", Integer),  # NULL = not forced
    Column("forced_important", Integer),  # NULL = not forced
    Column("position", Integer, nullable=False, default=0, server_default="0"),
    Column("created", Text, nullable=False),
)

items = Table(
    "items",
    metadata,
    Column("id", Text, primary_key=True),
    Column("container_id", Text, ForeignKey("containers.id"), nullable=False),
    Column("order_key", Integer, nullable=False),
    Column("title", Text, nullable=False, default="", server_default=""),
    Column("kind", Text, nullable=False, default="task", server_default="task"),
    Column("urgent", Integer, nullable=False, default=0, server_default="0"),
    Column("important", Integer, nullable=False, default=0, server_default="0"),
    Column("is_long_task", Integer, nullable=False, default=0, server_default="0"),
    Column("completed", Integer, nullable=False, default=0, server_default="0"),
    Column("weight", REAL, nullable=False, default=1.0, server_default="1.0"),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

Index("ix_items_container_order", items.c.container_id, items.c.order_key)

id_counters = Table(
    "id_counters",
    metadata,
    Column("type_prefix", Text, primary_key=True),
    Column("next_value", Integer, nullable=False),
)
