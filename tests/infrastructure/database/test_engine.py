"""Tests for database engine setup."""

from pathlib import Path

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from prioctl.infrastructure.database.engine import db_path_for, init_database


class TestInitDatabase:
    def test_creates_db_file(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path)
        try:
            assert db_path_for(tmp_path).is_file()
            assert db_path_for(tmp_path).parent.name == ".prioctl"
        finally:
            engine.dispose()

    def test_creates_tables(self, db_engine: Engine) -> None:
        tables = set(inspect(db_engine).get_table_names())
        assert {"containers", "items", "id_counters"} <= tables

    def test_pragmas(self, db_engine: Engine) -> None:
        with db_engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_idempotent(self, tmp_path: Path) -> None:
        init_database(tmp_path).dispose()
        engine = init_database(tmp_path)
        try:
            with engine.connect() as conn:
                count = conn.execute(text("SELECT COUNT(*) FROM id_counters")).scalar()
            assert count == 3
        finally:
            engine.dispose()
