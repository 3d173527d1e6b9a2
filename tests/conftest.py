"""Shared pytest fixtures and test helpers for prioctl tests."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from prioctl.domain.containers import ContainerRegistry, default_containers
from prioctl.domain.geometry import Rect, RenderedCard
from prioctl.domain.items import Container, ContainerKind, Item
from prioctl.infrastructure.backend import BackendError, InMemoryBackend
from prioctl.infrastructure.database.backend import SqliteBackend
from prioctl.infrastructure.database.engine import init_database
from prioctl.plugins.hookspecs import hookimpl
from prioctl.services.board import init_board

CUSTOM_LIST = "LIST-A"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def board_root(tmp_path: Path) -> Path:
    """Initialized board directory (database, default containers, prioctl.toml)."""
    result = init_board(tmp_path, name="test-board")
    assert result.ok, result.error
    return tmp_path


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_backend(board_root: Path) -> SqliteBackend:
    backend = SqliteBackend.open(board_root)
    try:
        yield backend
    finally:
        backend.close()


@pytest.fixture
def _isolated_board(board_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to an initialized board so the CLI finds it."""
    monkeypatch.delenv("PRIOCTL_CONFIG", raising=False)
    monkeypatch.chdir(board_root)


@pytest.fixture
def registry() -> ContainerRegistry:
    """Default quadrants and routine sections plus one custom list."""
    return ContainerRegistry(
        [*default_containers(), Container(id=CUSTOM_LIST, name="Errands", kind=ContainerKind.LIST)]
    )


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_item(item_id: str, container_id: str, order: int, **kwargs: Any) -> Item:
    return Item(id=item_id, container_id=container_id, order=order, title=item_id, **kwargs)


def sample_items() -> list[Item]:
    """Q1 holds A/B/C at 1000/2000/3000, Q2 holds D, the custom list holds E."""
    return [
        make_item("A", "Q1", 1000, urgent=True, important=True),
        make_item("B", "Q1", 2000, urgent=True, important=True),
        make_item("C", "Q1", 3000, urgent=True, important=True),
        make_item("D", "Q2", 1000, important=True),
        make_item("E", CUSTOM_LIST, 1000, urgent=True),
    ]


class FakeTimer:
    def __init__(self, delay: float, callback: Callable[[], object]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Records timers instead of running them; tests fire them by hand."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[[], object]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def fire(self) -> None:
        for timer in list(self.timers):
            if not timer.cancelled:
                timer.callback()


class FakeLayout:
    """Two columns side by side; cards are 10px tall, stacked from y=0."""

    def __init__(self, cards: Mapping[str, Sequence[str]]) -> None:
        self.cards = {cid: list(ids) for cid, ids in cards.items()}
        self.bounds = {
            cid: Rect(x=index * 100, y=0, width=100, height=200)
            for index, cid in enumerate(self.cards)
        }

    def container_bounds(self) -> Mapping[str, Rect]:
        return self.bounds

    def rendered_cards(self, container_id: str) -> Sequence[RenderedCard]:
        return [
            RenderedCard(item_id=item_id, rect=Rect.from_span(i * 10, i * 10 + 10, width=100))
            for i, item_id in enumerate(self.cards.get(container_id, []))
        ]


class ScriptedBackend(InMemoryBackend):
    """InMemoryBackend that rejects moves of selected items."""

    def __init__(self, *args: Any, reject: set[str] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.reject = set(reject or ())

    async def move_item(
        self,
        item_id: str,
        destination_container_id: str,
        insertion_index: int,
    ) -> None:
        if item_id in self.reject:
            self.calls.append((item_id, destination_container_id, insertion_index))
            msg = "server said no"
            raise BackendError(msg)
        await super().move_item(item_id, destination_container_id, insertion_index)


class RecorderPlugin:
    """Plugin that records every hook call."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def post_move(self, item_id: str, container_id: str, order: int, insert_at: int) -> None:
        self.events.append(("post_move", {"item_id": item_id, "order": order}))

    @hookimpl
    def post_move_rollback(self, item_id: str, container_id: str, error: str) -> None:
        self.events.append(("post_move_rollback", {"item_id": item_id, "error": error}))

    @hookimpl
    def post_rebalance(self, container_id: str, count: int) -> None:
        self.events.append(("post_rebalance", {"container_id": container_id, "count": count}))
