"""BoardService: board-level operations over the SQLite backend.

Every public method returns a :class:`ServiceResult`. Moves run through the
:class:`OptimisticMoveCoordinator` against a cache loaded from the
database, the same path an interactive client takes.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from prioctl.config.discovery import CONFIG_FILENAME, render_default_config
from prioctl.domain.containers import ContainerRegistry
from prioctl.domain.items import Item, ItemKind
from prioctl.domain.order_keys import DEFAULT_GAP, needs_rebalance
from prioctl.domain.ordering import ContainerOrderingView
from prioctl.infrastructure.backend import BackendError
from prioctl.infrastructure.cache import ItemCache
from prioctl.infrastructure.database.backend import SqliteBackend
from prioctl.infrastructure.database.engine import db_path_for
from prioctl.services.coordinator import MOVE_OP, Notifier, OptimisticMoveCoordinator
from prioctl.services.result import ErrorCode, ServiceResult
from prioctl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from prioctl.config.models import SyncConfig
    from prioctl.domain.items import Container
    from prioctl.plugins.manager import PluginManager

CHECK_UNORDERED = "unordered_keys"
CHECK_NON_POSITIVE = "non_positive_keys"


def _item_payload(item: Item) -> dict[str, Any]:
    return {
        "id": item.id,
        "title": item.title,
        "kind": str(item.kind),
        "order": item.order,
        "urgent": item.urgent,
        "important": item.important,
        "is_long_task": item.is_long_task,
        "completed": item.completed,
        "weight": item.weight,
    }


def _container_payload(container: Container, members: list[Item]) -> dict[str, Any]:
    return {
        "id": container.id,
        "name": container.name,
        "kind": str(container.kind),
        "items": [_item_payload(item) for item in members],
    }


def init_board(board_root: Path, *, name: str, gap: int = DEFAULT_GAP) -> ServiceResult:
    """Create the board database, default containers and a sparse prioctl.toml."""
    board_root.mkdir(parents=True, exist_ok=True)
    config_path = board_root / CONFIG_FILENAME
    wrote_config = not config_path.exists()
    if wrote_config:
        config_path.write_text(render_default_config(name), encoding="utf-8")

    backend = SqliteBackend.open(board_root, gap=gap)
    try:
        created = backend.ensure_default_containers()
    finally:
        backend.close()

    warnings = [] if wrote_config else [f"{CONFIG_FILENAME} already exists; left unchanged"]
    return ServiceResult.success(
        "init",
        {
            "board_root": str(board_root),
            "name": name,
            "created_containers": created,
            "config_written": wrote_config,
        },
        warnings=warnings,
    )


def board_exists(board_root: Path) -> bool:
    return db_path_for(board_root).is_file()


def _unknown_container(op: str, container_id: str) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.NOT_FOUND,
        f"No container with id {container_id}",
        container_id=container_id,
    )


class BoardService:
    """Operations on one board.

    Parameters:
        backend: Storage for containers and items.
        sync: Timeout and refresh behaviour for moves.
        plugins: Optional plugin manager for hook dispatch.
        notifier: Receives user-facing rollback messages.
    """

    def __init__(
        self,
        backend: SqliteBackend,
        *,
        gap: int = DEFAULT_GAP,
        sync: SyncConfig | None = None,
        plugins: PluginManager | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._backend = backend
        self._gap = gap
        self._sync = sync
        self._plugins = plugins
        self._notifier = notifier

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @traced
    def add(
        self,
        title: str,
        container_id: str,
        *,
        kind: ItemKind = ItemKind.TASK,
        urgent: bool = False,
        important: bool = False,
        is_long_task: bool = False,
    ) -> ServiceResult:
        """Append a new item to the end of a container."""
        try:
            item = self._backend.add_item(
                title,
                container_id,
                kind=kind,
                urgent=urgent,
                important=important,
                is_long_task=is_long_task,
            )
        except BackendError as exc:
            return ServiceResult.failure(
                "add", ErrorCode.INVALID_CONTAINER, str(exc), container_id=container_id
            )
        return ServiceResult.success(
            "add", {"container_id": item.container_id, **_item_payload(item)}
        )

    @traced
    def create_list(self, name: str) -> ServiceResult:
        """Create a custom list."""
        container = self._backend.create_list(name)
        return ServiceResult.success(
            "create_list",
            {"id": container.id, "name": container.name, "kind": str(container.kind)},
        )

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @traced
    def show(self, container_id: str | None = None) -> ServiceResult:
        """Every container (or one) with its items in display order."""
        containers = self._backend.list_containers()
        if container_id is not None:
            containers = [c for c in containers if c.id == container_id]
            if not containers:
                return _unknown_container("show", container_id)

        view = ContainerOrderingView(self._backend.load_items())
        payload = [_container_payload(c, view.items_in(c.id)) for c in containers]
        return ServiceResult.success(
            "show",
            {"containers": payload, "count": sum(len(c["items"]) for c in payload)},
        )

    @traced
    def check(self) -> ServiceResult:
        """Report containers whose keys are not strictly increasing and positive."""
        view = ContainerOrderingView(self._backend.load_items())
        issues: list[dict[str, Any]] = []
        with trace_span("order_keys"):
            for container in self._backend.list_containers():
                keys = view.keys_in(container.id)
                if not needs_rebalance(keys):
                    continue
                category = CHECK_NON_POSITIVE if keys[0] < 1 else CHECK_UNORDERED
                issues.append(
                    {
                        "container_id": container.id,
                        "category": category,
                        "message": f"{container.name}: keys need renumbering",
                        "keys": keys,
                    }
                )
        return ServiceResult.success(
            "check", {"issues": issues, "count": len(issues), "healthy": not issues}
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    @traced
    def rebalance(self, container_id: str | None = None) -> ServiceResult:
        """Renumber one container (or all) to evenly spaced keys."""
        containers = self._backend.list_containers()
        if container_id is not None:
            containers = [c for c in containers if c.id == container_id]
            if not containers:
                return _unknown_container("rebalance", container_id)

        counts: dict[str, int] = {}
        warnings: list[str] = []
        for container in containers:
            count = self._backend.renumber_container(container.id)
            counts[container.id] = count
            if self._plugins is None:
                continue
            for name in self._plugins.dispatch(
                "post_rebalance", container_id=container.id, count=count
            ):
                warnings.append(f"Plugin {name} failed in post_rebalance for {container.id}")
        return ServiceResult.success(
            "rebalance", {"containers": counts, "gap": self._gap}, warnings=warnings
        )

    @traced
    async def move(self, item_id: str, container_id: str, insert_at: int) -> ServiceResult:
        """Move an item to gap *insert_at* of *container_id*.

        Missing references are reported as errors up front; the move itself
        goes through the optimistic coordinator.
        """
        registry = ContainerRegistry(self._backend.list_containers())
        items = self._backend.load_items()
        if container_id not in registry:
            return ServiceResult.failure(
                MOVE_OP,
                ErrorCode.INVALID_CONTAINER,
                f"No container with id {container_id}",
                container_id=container_id,
            )
        if not any(item.id == item_id for item in items):
            return ServiceResult.failure(
                MOVE_OP, ErrorCode.NOT_FOUND, f"No item with id {item_id}", item_id=item_id
            )

        cache: ItemCache[Item] = ItemCache(items)
        sync = self._sync
        coordinator = OptimisticMoveCoordinator(
            cache,
            self._backend,
            registry,
            gap=self._gap,
            timeout=sync.move_timeout_s if sync is not None else None,
            refresh_after_move=sync.refresh_after_move if sync is not None else True,
            notifier=self._notifier,
            plugins=self._plugins,
        )
        return await coordinator.move(item_id, container_id, insert_at)
