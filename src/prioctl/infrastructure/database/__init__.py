"""SQLite persistence for boards."""

from prioctl.infrastructure.database.engine import board_engine, init_database

__all__ = ["board_engine", "init_database"]
