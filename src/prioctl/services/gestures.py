"""ReorderController: connects drag gestures to optimistic moves.

The host UI forwards raw input events to :attr:`ReorderController.session`.
A completed drop is handed to the coordinator's :meth:`submit`, which
updates the cache in the same event-loop turn and settles the backend
call in a background task.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from prioctl.domain.drag import DragSession, DropIntent, LayoutProvider, Scheduler

if TYPE_CHECKING:
    from prioctl.config.models import GestureConfig
    from prioctl.services.coordinator import OptimisticMoveCoordinator
    from prioctl.services.result import ServiceResult


class ReorderController:
    """Owns one :class:`DragSession` and the move coordinator it feeds."""

    def __init__(
        self,
        coordinator: OptimisticMoveCoordinator,
        layout: LayoutProvider,
        *,
        gesture: GestureConfig | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.coordinator = coordinator
        self.tasks: list[asyncio.Task[ServiceResult]] = []
        options = {}
        if gesture is not None:
            options = {
                "long_press_delay": gesture.long_press_delay,
                "move_threshold": gesture.move_threshold_px,
            }
        self.session = DragSession(
            layout,
            on_drop=self._on_drop,
            scheduler=scheduler,
            **options,
        )

    def _on_drop(self, intent: DropIntent) -> None:
        self.tasks.append(self.coordinator.submit(intent))

    async def wait_idle(self) -> list[ServiceResult]:
        """Wait until every dropped move has settled."""
        tasks, self.tasks = self.tasks, []
        if not tasks:
            return []
        return list(await asyncio.gather(*tasks))
