"""Pluggy hook specifications for prioctl ordering events.

Hooks fire synchronously after the local cache reflects the event.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("prioctl")
hookimpl = pluggy.HookimplMarker("prioctl")


class PrioctlHookSpec:
    """Hook specifications for the prioctl plugin system."""

    @hookspec
    def post_move(
        self,
        item_id: str,
        container_id: str,
        order: int,
        insert_at: int,
    ) -> None:
        """Called after the backend confirmed a move."""

    @hookspec
    def post_move_rollback(
        self,
        item_id: str,
        container_id: str,
        error: str,
    ) -> None:
        """Called after a failed move was rolled back locally."""

    @hookspec
    def post_rebalance(self, container_id: str, count: int) -> None:
        """Called after a container's keys were renumbered."""
