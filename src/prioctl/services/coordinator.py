"""OptimisticMoveCoordinator: apply a move locally, confirm it remotely.

A move runs in two halves:

- :meth:`OptimisticMoveCoordinator.begin` (synchronous, one event-loop
  turn): compute the new order key, snapshot the cache, and write the
  moved item into the cache so the UI re-renders immediately.
- :meth:`OptimisticMoveCoordinator.settle` (awaited): send the move to
  the backend, then discard the snapshot on success or restore it on
  failure.

Snapshots chain: each ``begin`` snapshots the live cache, which already
contains earlier optimistic moves. Backend calls go out one at a time in
submission order. When a move fails while later moves are still pending,
the cache returns to that move's snapshot and the later moves are
replayed on top of it, so a rollback restores exactly the state before
the failed move and never erases another move.

INVARIANT: Backend failures are converted to a rollback plus a notice.
They never propagate out of ``settle``/``move``. Cancellation also rolls
back, then propagates.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from prioctl.domain.items import Item, place_in_container
from prioctl.domain.order_keys import DEFAULT_GAP, clamp_gap_index, plan_insertion
from prioctl.domain.ordering import ContainerOrderingView
from prioctl.services.result import ErrorCode, MoveOutcome, ServiceResult
from prioctl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from prioctl.domain.containers import ContainerDirectory
    from prioctl.domain.drag import DropIntent
    from prioctl.infrastructure.backend import MoveBackend
    from prioctl.infrastructure.cache import ItemCache
    from prioctl.plugins.manager import PluginManager

log = structlog.get_logger(__name__)

Notifier = Callable[[str], object]

MOVE_OP = "move_item"


class MoveStatus(StrEnum):
    """Lifecycle of one optimistic move."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"
    SKIPPED = "skipped"


@dataclass
class PendingMove:
    """One optimistic move and the snapshot that guards it.

    Attributes:
        move_id: Sequence number, in submission order.
        item_id: Item being moved.
        destination_container_id: Target container.
        requested_at: Gap index as requested by the caller.
        insert_at: Gap index after clamping to the sibling range.
        snapshot: Full collection immediately before this move was applied.
        moved: The item as written to the cache (None when skipped).
        renumbered: Whether the destination had to be renumbered.
        status: Current lifecycle status.
        reason: Why the move was skipped (``"stale"`` or ``"unchanged"``).
    """

    move_id: int
    item_id: str
    destination_container_id: str
    requested_at: int
    insert_at: int
    snapshot: tuple[Item, ...]
    moved: Item | None = None
    renumbered: bool = False
    status: MoveStatus = MoveStatus.PENDING
    reason: str | None = None


@dataclass(frozen=True)
class _Mutation:
    items: tuple[Item, ...]
    moved: Item
    insert_at: int
    renumbered: bool
    unchanged: bool


class OptimisticMoveCoordinator:
    """Moves items between and within containers with optimistic local state.

    Parameters:
        cache: Local item store; the coordinator is its only writer during
            a move.
        backend: Authoritative move/read operations.
        containers: Container metadata (existence and forced attributes).
        gap: Key spacing for seeds, appends and renumbering.
        timeout: Seconds to wait for the backend before treating the move
            as failed. None waits indefinitely.
        refresh_after_move: Refetch from the backend after a confirmed move
            once no other moves are pending.
        notifier: Receives a user-facing message when a move is rolled back.
        plugins: Optional plugin manager for ``post_move`` and
            ``post_move_rollback`` hooks.
    """

    def __init__(
        self,
        cache: ItemCache[Item],
        backend: MoveBackend,
        containers: ContainerDirectory,
        *,
        gap: int = DEFAULT_GAP,
        timeout: float | None = None,
        refresh_after_move: bool = True,
        notifier: Notifier | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self._cache = cache
        self._backend = backend
        self._containers = containers
        self._gap = gap
        self._timeout = timeout
        self._refresh_after_move = refresh_after_move
        self._notifier = notifier
        self._plugins = plugins
        self._send_lock = asyncio.Lock()
        self._pending: list[PendingMove] = []
        self._tasks: set[asyncio.Task[ServiceResult]] = set()
        self._next_move_id = 1

    @property
    def pending(self) -> tuple[PendingMove, ...]:
        """Moves applied locally but not yet settled, in submission order."""
        return tuple(self._pending)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    async def move(
        self,
        item_id: str,
        destination_container_id: str,
        insert_at: int,
    ) -> ServiceResult:
        """Move *item_id* to gap *insert_at* of *destination_container_id*."""
        pending = self.begin(item_id, destination_container_id, insert_at)
        return await self.settle(pending)

    def submit(self, intent: DropIntent) -> asyncio.Task[ServiceResult]:
        """Apply a drop synchronously and settle it in a background task.

        Must be called from inside a running event loop; outside one it
        raises ``RuntimeError`` before touching the cache.
        """
        loop = asyncio.get_running_loop()
        pending = self.begin(
            intent.item_id,
            intent.destination_container_id,
            intent.insert_at,
        )
        task = loop.create_task(self.settle(pending))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> list[ServiceResult]:
        """Wait for every submitted move to settle."""
        if not self._tasks:
            return []
        return list(await asyncio.gather(*self._tasks))

    def begin(
        self,
        item_id: str,
        destination_container_id: str,
        insert_at: int,
    ) -> PendingMove:
        """Apply the move to the local cache. Never suspends.

        A missing item or container, or a move onto the item's current
        position, yields a ``SKIPPED`` move that leaves the cache untouched.
        """
        snapshot = self._cache.items()
        pending = PendingMove(
            move_id=self._claim_move_id(),
            item_id=item_id,
            destination_container_id=destination_container_id,
            requested_at=insert_at,
            insert_at=insert_at,
            snapshot=snapshot,
        )

        mutation = self._plan(snapshot, item_id, destination_container_id, insert_at)
        if mutation is None or mutation.unchanged:
            pending.status = MoveStatus.SKIPPED
            pending.reason = "stale" if mutation is None else "unchanged"
            if mutation is not None:
                pending.insert_at = mutation.insert_at
            log.debug(
                "move.skipped",
                item_id=item_id,
                container_id=destination_container_id,
                reason=pending.reason,
            )
            return pending

        pending.insert_at = mutation.insert_at
        pending.moved = mutation.moved
        pending.renumbered = mutation.renumbered
        self._pending.append(pending)
        self._cache.replace(mutation.items)
        log.debug(
            "move.applied",
            move_id=pending.move_id,
            item_id=item_id,
            container_id=destination_container_id,
            insert_at=pending.insert_at,
            order=mutation.moved.order,
        )
        if mutation.renumbered:
            log.info("keys.renumbered", container_id=destination_container_id)
        return pending

    async def settle(self, pending: PendingMove) -> ServiceResult:
        """Confirm *pending* with the backend, or roll it back."""
        try:
            async with self._send_lock:
                if pending.status == MoveStatus.SKIPPED:
                    self._discard(pending)
                    return self._skipped_result(pending)
                failure = await self._send(pending)
                if failure is not None:
                    return failure
                self._confirm(pending)
        except asyncio.CancelledError:
            if pending in self._pending and pending.status == MoveStatus.PENDING:
                self._fail(pending, ErrorCode.BACKEND_CANCELLED, "Move was cancelled")
            else:
                self._discard(pending)
            raise

        refreshed = False
        if self._refresh_after_move and not self._pending:
            refreshed = await self.refresh()

        assert pending.moved is not None
        order = pending.moved.order
        if refreshed:
            # The backend may have renumbered the destination.
            current = self._cache.get(pending.item_id)
            if current is not None:
                order = current.order
        return ServiceResult.success(
            MOVE_OP,
            {
                "item_id": pending.item_id,
                "container_id": pending.destination_container_id,
                "insert_at": pending.insert_at,
                "order": order,
                "renumbered": pending.renumbered,
                "refreshed": refreshed,
                "status": MoveOutcome.MOVED,
            },
        )

    async def refresh(self) -> bool:
        """Replace the cache with the backend's collection.

        Skipped while optimistic moves are pending, since the backend has
        not seen them yet. Returns whether the cache was replaced.
        """
        try:
            items = await self._backend.list_items()
        except Exception:
            log.warning("refresh.failed", exc_info=True)
            return False
        if self._pending:
            log.debug("refresh.skipped", pending=len(self._pending))
            return False
        self._cache.replace(items)
        return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _claim_move_id(self) -> int:
        move_id = self._next_move_id
        self._next_move_id += 1
        return move_id

    def _plan(
        self,
        items: tuple[Item, ...],
        item_id: str,
        destination_container_id: str,
        insert_at: int,
    ) -> _Mutation | None:
        """Compute the collection after the move, or None for stale references."""
        moving = next((item for item in items if item.id == item_id), None)
        if moving is None:
            return None
        destination = self._containers.get(destination_container_id)
        if destination is None:
            return None

        view = ContainerOrderingView(items)
        siblings = view.items_in(destination_container_id, exclude=item_id)
        index = clamp_gap_index(insert_at, len(siblings))

        if moving.container_id == destination_container_id:
            if view.index_of(item_id) == index:
                return _Mutation(items, moving, index, renumbered=False, unchanged=True)

        plan = plan_insertion([s.order for s in siblings], index, gap=self._gap)
        moved = place_in_container(moving, destination, plan.key)

        replacements: dict[str, Item] = {item_id: moved}
        if plan.renumbered is not None:
            for sibling, key in zip(siblings, plan.renumbered, strict=True):
                replacements[sibling.id] = sibling.model_copy(update={"order": key})

        new_items = tuple(replacements.get(item.id, item) for item in items)
        return _Mutation(
            new_items,
            moved,
            index,
            renumbered=plan.renumbered is not None,
            unchanged=False,
        )

    async def _send(self, pending: PendingMove) -> ServiceResult | None:
        """Call the backend; returns the rollback result on failure."""
        with trace_span("backend.move_item") as span:
            if span is not None:
                span.annotate("item_id", pending.item_id)
            try:
                call = self._backend.move_item(
                    pending.item_id,
                    pending.destination_container_id,
                    pending.insert_at,
                )
                if self._timeout is None:
                    await call
                else:
                    await asyncio.wait_for(call, self._timeout)
            except TimeoutError:
                return self._fail(
                    pending,
                    ErrorCode.BACKEND_TIMEOUT,
                    f"Move timed out after {self._timeout}s",
                )
            except Exception as exc:
                return self._fail(
                    pending, ErrorCode.BACKEND_REJECTED, str(exc) or type(exc).__name__
                )
        return None

    def _confirm(self, pending: PendingMove) -> None:
        self._discard(pending)
        pending.status = MoveStatus.CONFIRMED
        assert pending.moved is not None
        log.info(
            "move.confirmed",
            move_id=pending.move_id,
            item_id=pending.item_id,
            container_id=pending.destination_container_id,
        )
        if self._plugins is not None:
            self._plugins.dispatch(
                "post_move",
                item_id=pending.item_id,
                container_id=pending.destination_container_id,
                order=pending.moved.order,
                insert_at=pending.insert_at,
            )
            if pending.renumbered:
                count = len(ContainerOrderingView(self._cache.items()).items_in(
                    pending.destination_container_id
                ))
                self._plugins.dispatch(
                    "post_rebalance",
                    container_id=pending.destination_container_id,
                    count=count,
                )

    def _fail(self, pending: PendingMove, code: ErrorCode, message: str) -> ServiceResult:
        """Restore the snapshot of *pending* and replay any later moves."""
        index = self._pending.index(pending)
        later = self._pending[index + 1 :]
        del self._pending[index:]
        pending.status = MoveStatus.ROLLED_BACK

        items = pending.snapshot
        for move in later:
            move.snapshot = items
            mutation = self._plan(items, move.item_id, move.destination_container_id, move.requested_at)
            if mutation is None or mutation.unchanged:
                move.status = MoveStatus.SKIPPED
                move.reason = "stale" if mutation is None else "unchanged"
                move.moved = None
                move.renumbered = False
            else:
                # A move skipped by an earlier replay can apply again here.
                items = mutation.items
                move.status = MoveStatus.PENDING
                move.reason = None
                move.moved = mutation.moved
                move.insert_at = mutation.insert_at
                move.renumbered = mutation.renumbered
            self._pending.append(move)
        self._cache.replace(items)

        log.warning(
            "move.rolled_back",
            move_id=pending.move_id,
            item_id=pending.item_id,
            container_id=pending.destination_container_id,
            code=code,
            error=message,
            replayed=len(later),
        )
        self._notify(f"Could not move {pending.item_id}: {message}. The change was reverted.")
        if self._plugins is not None:
            self._plugins.dispatch(
                "post_move_rollback",
                item_id=pending.item_id,
                container_id=pending.destination_container_id,
                error=message,
            )

        return ServiceResult.failure(
            MOVE_OP,
            code,
            message,
            data={"item_id": pending.item_id, "rolled_back": True},
            item_id=pending.item_id,
            container_id=pending.destination_container_id,
            insert_at=pending.insert_at,
        )

    def _discard(self, pending: PendingMove) -> None:
        if pending in self._pending:
            self._pending.remove(pending)

    def _notify(self, message: str) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier(message)
        except Exception:
            log.warning("notifier.failed", exc_info=True)

    @staticmethod
    def _skipped_result(pending: PendingMove) -> ServiceResult:
        return ServiceResult.success(
            MOVE_OP,
            {
                "item_id": pending.item_id,
                "container_id": pending.destination_container_id,
                "insert_at": pending.insert_at,
                "status": MoveOutcome.NOOP,
                "reason": pending.reason,
            },
        )
