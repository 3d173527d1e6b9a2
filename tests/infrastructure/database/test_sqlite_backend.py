"""Tests for the SQLite board backend."""

import asyncio

import pytest

from prioctl.domain.items import ItemKind
from prioctl.domain.ordering import ContainerOrderingView
from prioctl.infrastructure.backend import BackendError
from prioctl.infrastructure.database.backend import SqliteBackend


def _ids(backend: SqliteBackend, container_id: str) -> list[str]:
    return [i.id for i in ContainerOrderingView(backend.load_items()).items_in(container_id)]


class TestContainers:
    def test_defaults_created_once(self, sqlite_backend: SqliteBackend) -> None:
        assert sqlite_backend.ensure_default_containers() == []
        ids = [c.id for c in sqlite_backend.list_containers()]
        assert ids == ["Q1", "Q2", "Q3", "Q4", "RTN-TOP", "RTN-BOTTOM"]

    def test_forced_attributes_round_trip(self, sqlite_backend: SqliteBackend) -> None:
        schedule = sqlite_backend.get("Q2")
        assert schedule is not None
        assert (schedule.forced.urgent, schedule.forced.important) == (False, True)
        morning = sqlite_backend.get("RTN-TOP")
        assert morning is not None
        assert morning.forced.is_empty

    def test_create_list(self, sqlite_backend: SqliteBackend) -> None:
        errands = sqlite_backend.create_list("Errands")
        assert errands.id == "LIST-0001"
        assert sqlite_backend.list_containers()[-1] == errands


class TestAddItem:
    def test_append_keys(self, sqlite_backend: SqliteBackend) -> None:
        first = sqlite_backend.add_item("one", "Q1")
        second = sqlite_backend.add_item("two", "Q1")
        assert (first.order, second.order) == (1000, 2000)

    def test_quadrant_forces_flags(self, sqlite_backend: SqliteBackend) -> None:
        item = sqlite_backend.add_item("t", "Q3", urgent=False, important=True)
        assert (item.urgent, item.important) == (True, False)
        assert item.weight == 2.5

    def test_routine_prefix(self, sqlite_backend: SqliteBackend) -> None:
        item = sqlite_backend.add_item("stretch", "RTN-TOP", kind=ItemKind.ROUTINE)
        assert item.id == "RTN-0001"
        assert sqlite_backend.load_items()[0].kind == ItemKind.ROUTINE

    def test_unknown_container(self, sqlite_backend: SqliteBackend) -> None:
        with pytest.raises(BackendError):
            sqlite_backend.add_item("t", "Q9")


class TestMoveItem:
    def test_move_persists_and_renumbers(self, sqlite_backend: SqliteBackend) -> None:
        a = sqlite_backend.add_item("a", "Q1")
        sqlite_backend.add_item("b", "Q1")
        d = sqlite_backend.add_item("d", "Q4")
        asyncio.run(sqlite_backend.move_item(d.id, "Q1", 1))
        assert _ids(sqlite_backend, "Q1") == [a.id, d.id, "TASK-0002"]
        moved = next(i for i in sqlite_backend.load_items() if i.id == d.id)
        assert moved.order == 2000
        assert (moved.urgent, moved.important) == (True, True)

    def test_unknown_item(self, sqlite_backend: SqliteBackend) -> None:
        with pytest.raises(BackendError, match="Unknown item"):
            asyncio.run(sqlite_backend.move_item("TASK-0099", "Q1", 0))

    def test_unknown_container(self, sqlite_backend: SqliteBackend) -> None:
        item = sqlite_backend.add_item("a", "Q1")
        with pytest.raises(BackendError, match="Unknown container"):
            asyncio.run(sqlite_backend.move_item(item.id, "LIST-0042", 0))


class TestRenumber:
    def test_renumber_container(self, sqlite_backend: SqliteBackend) -> None:
        for title in ("a", "b", "c"):
            sqlite_backend.add_item(title, "Q2")
        assert sqlite_backend.renumber_container("Q2") == 3
        keys = ContainerOrderingView(sqlite_backend.load_items()).keys_in("Q2")
        assert keys == [1000, 2000, 3000]

    def test_renumber_empty(self, sqlite_backend: SqliteBackend) -> None:
        assert sqlite_backend.renumber_container("Q4") == 0
