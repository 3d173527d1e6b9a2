"""Drag gesture state machine.

One :class:`DragSession` tracks one gesture at a time through explicit
phases::

    idle -> press_started -> dragging -> dropped   -> idle
                         \\            \\-> cancelled -> idle
                          \\-> cancelled -> idle

Touch presses enter ``dragging`` through a long-press timer; moving past
the threshold before the timer fires cancels the gesture instead. Pointer
presses enter ``dragging`` once movement passes the threshold, and native
drag-start enters it immediately.

While dragging, every move event re-resolves the hovered container and gap
index from the host's rendered geometry. A release over a valid target
hands a :class:`DropIntent` to the ``on_drop`` callback.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from prioctl.domain.errors import DragSessionActiveError, InvalidDragTransitionError
from prioctl.domain.geometry import Rect, RenderedCard, container_at, resolve_gap_index

DEFAULT_LONG_PRESS_DELAY = 0.5  # seconds
DEFAULT_MOVE_THRESHOLD = 10.0  # pixels, per axis


class DragPhase(StrEnum):
    """Gesture lifecycle phases."""

    IDLE = "idle"
    PRESS_STARTED = "press_started"
    DRAGGING = "dragging"
    DROPPED = "dropped"
    CANCELLED = "cancelled"


class InputSource(StrEnum):
    """Where a press came from."""

    POINTER = "pointer"
    TOUCH = "touch"


DRAG_TRANSITIONS: dict[str, list[str]] = {
    "idle": ["press_started"],
    "press_started": ["dragging", "cancelled"],
    "dragging": ["dropped", "cancelled"],
    "dropped": ["idle"],
    "cancelled": ["idle"],
}


def is_valid_drag_transition(current: str, target: str) -> bool:
    return target in DRAG_TRANSITIONS.get(current, [])


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback later (``asyncio`` loops qualify)."""

    def call_later(self, delay: float, callback: Callable[[], object]) -> TimerHandle: ...


class LayoutProvider(Protocol):
    """Rendered geometry exposed by the hosting UI layer."""

    def container_bounds(self) -> Mapping[str, Rect]: ...

    def rendered_cards(self, container_id: str) -> Sequence[RenderedCard]: ...


@dataclass(frozen=True)
class DropIntent:
    """A completed gesture: move *item_id* to gap *insert_at* of a container."""

    item_id: str
    origin_container_id: str
    destination_container_id: str
    insert_at: int


@dataclass
class DragState:
    """Mutable per-gesture state. Discarded when the gesture ends."""

    item_id: str
    origin_container_id: str
    origin_order: int
    source: InputSource
    origin_x: float
    origin_y: float
    phase: DragPhase = DragPhase.PRESS_STARTED
    hovered_container_id: str | None = None
    hovered_gap_index: int | None = None

    @property
    def has_target(self) -> bool:
        return self.hovered_container_id is not None and self.hovered_gap_index is not None

    def clear_hover(self) -> None:
        self.hovered_container_id = None
        self.hovered_gap_index = None


class DragSession:
    """Explicit state machine for one drag gesture at a time.

    Parameters:
        layout: Source of container bounds and rendered cards.
        on_drop: Called with the :class:`DropIntent` of a successful drop.
        scheduler: Runs the long-press timer. Defaults to the running
            asyncio loop, looked up on the first touch press.
        long_press_delay: Seconds a touch must be held to start dragging.
        move_threshold: Pixels of movement (per axis) that start a pointer
            drag or cancel a pending long press.
    """

    def __init__(
        self,
        layout: LayoutProvider,
        *,
        on_drop: Callable[[DropIntent], object] | None = None,
        scheduler: Scheduler | None = None,
        long_press_delay: float = DEFAULT_LONG_PRESS_DELAY,
        move_threshold: float = DEFAULT_MOVE_THRESHOLD,
    ) -> None:
        self._layout = layout
        self._on_drop = on_drop
        self._scheduler = scheduler
        self._long_press_delay = long_press_delay
        self._move_threshold = move_threshold
        self._state: DragState | None = None
        self._timer: TimerHandle | None = None
        self.last_outcome: DragPhase | None = None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def phase(self) -> DragPhase:
        return self._state.phase if self._state is not None else DragPhase.IDLE

    @property
    def state(self) -> DragState | None:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is not None

    # ------------------------------------------------------------------
    # Gesture events
    # ------------------------------------------------------------------

    def press(
        self,
        item_id: str,
        container_id: str,
        order: int,
        x: float,
        y: float,
        *,
        source: InputSource = InputSource.TOUCH,
    ) -> None:
        """Begin a gesture on an item.

        Raises:
            DragSessionActiveError: Another gesture has not resolved yet.
        """
        if self._state is not None:
            msg = f"Drag session already active for item {self._state.item_id}"
            raise DragSessionActiveError(msg)
        self._check(DragPhase.IDLE, DragPhase.PRESS_STARTED)
        self._state = DragState(
            item_id=item_id,
            origin_container_id=container_id,
            origin_order=order,
            source=source,
            origin_x=x,
            origin_y=y,
        )
        if source == InputSource.TOUCH:
            scheduler = self._scheduler or asyncio.get_running_loop()
            self._timer = scheduler.call_later(self._long_press_delay, self._on_long_press)

    def start_native_drag(
        self,
        item_id: str,
        container_id: str,
        order: int,
        x: float,
        y: float,
    ) -> None:
        """Pointer drag-start: press and enter ``dragging`` in one step."""
        self.press(item_id, container_id, order, x, y, source=InputSource.POINTER)
        self._begin_dragging(x, y)

    def move(self, x: float, y: float) -> None:
        """Pointer/touch moved to ``(x, y)``."""
        state = self._state
        if state is None:
            return

        if state.phase == DragPhase.PRESS_STARTED:
            dx = abs(x - state.origin_x)
            dy = abs(y - state.origin_y)
            if dx <= self._move_threshold and dy <= self._move_threshold:
                return
            if state.source == InputSource.TOUCH:
                self._cancel_timer()
                self._finish(DragPhase.CANCELLED)
            else:
                self._begin_dragging(x, y)
            return

        if state.phase == DragPhase.DRAGGING:
            self._update_hover(x, y)

    def hover(self, container_id: str, pointer_y: float) -> None:
        """Resolve the gap in a known container (host did its own hit-testing)."""
        state = self._state
        if state is None or state.phase != DragPhase.DRAGGING:
            return
        state.hovered_container_id = container_id
        state.hovered_gap_index = resolve_gap_index(self._sibling_rects(container_id), pointer_y)

    def leave(self, container_id: str, *, into_child: bool = False) -> None:
        """The pointer left *container_id*'s bounds.

        Moving into one of the container's own child elements keeps the
        hover; any other exit clears it so no stale indicator remains.
        """
        state = self._state
        if state is None or into_child:
            return
        if state.hovered_container_id == container_id:
            state.clear_hover()

    def release(self, x: float | None = None, y: float | None = None) -> DropIntent | None:
        """End the gesture. Returns the drop intent if one was delivered."""
        state = self._state
        if state is None:
            return None

        if state.phase == DragPhase.PRESS_STARTED:
            self._cancel_timer()
            self._finish(DragPhase.CANCELLED)
            return None

        if x is not None and y is not None:
            self._update_hover(x, y)

        if not state.has_target:
            self._finish(DragPhase.CANCELLED)
            return None

        assert state.hovered_container_id is not None
        assert state.hovered_gap_index is not None
        intent = DropIntent(
            item_id=state.item_id,
            origin_container_id=state.origin_container_id,
            destination_container_id=state.hovered_container_id,
            insert_at=state.hovered_gap_index,
        )
        self._check(state.phase, DragPhase.DROPPED)
        state.phase = DragPhase.DROPPED
        try:
            if self._on_drop is not None:
                self._on_drop(intent)
        finally:
            self._reset(DragPhase.DROPPED)
        return intent

    def cancel(self) -> None:
        """Abort the gesture without side effects."""
        if self._state is None:
            return
        self._cancel_timer()
        self._finish(DragPhase.CANCELLED)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _on_long_press(self) -> None:
        self._timer = None
        state = self._state
        if state is not None and state.phase == DragPhase.PRESS_STARTED:
            self._begin_dragging(state.origin_x, state.origin_y)

    def _begin_dragging(self, x: float, y: float) -> None:
        state = self._state
        assert state is not None
        self._check(state.phase, DragPhase.DRAGGING)
        state.phase = DragPhase.DRAGGING
        self._update_hover(x, y)

    def _update_hover(self, x: float, y: float) -> None:
        state = self._state
        assert state is not None
        container_id = container_at(self._layout.container_bounds(), x, y)
        if container_id is None:
            state.clear_hover()
            return
        state.hovered_container_id = container_id
        state.hovered_gap_index = resolve_gap_index(self._sibling_rects(container_id), y)

    def _sibling_rects(self, container_id: str) -> list[Rect]:
        # The dragged card is excluded so gap indices count siblings only.
        state = self._state
        assert state is not None
        return [
            card.rect
            for card in self._layout.rendered_cards(container_id)
            if card.item_id != state.item_id
        ]

    def _finish(self, outcome: DragPhase) -> None:
        state = self._state
        assert state is not None
        self._check(state.phase, outcome)
        state.phase = outcome
        self._reset(outcome)

    def _reset(self, outcome: DragPhase) -> None:
        self._check(outcome, DragPhase.IDLE)
        self.last_outcome = outcome
        self._state = None
        self._timer = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @staticmethod
    def _check(current: str, target: str) -> None:
        if not is_valid_drag_transition(current, target):
            raise InvalidDragTransitionError(current, target)
