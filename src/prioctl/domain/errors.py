"""Exception hierarchy for ordering-engine defects and rejected gestures."""

from __future__ import annotations


class PrioctlError(Exception):
    """Base class for all prioctl errors."""


class KeySpaceExhaustedError(PrioctlError):
    """No integer key exists strictly between the requested neighbours.

    Raised by :func:`~prioctl.domain.order_keys.compute_order_key`; callers
    recover by renumbering the container.
    """

    def __init__(self, insert_at: int, before: int | None, after: int | None) -> None:
        self.insert_at = insert_at
        self.before = before
        self.after = after
        super().__init__(
            f"No order key available at gap {insert_at} (between {before} and {after})"
        )


class DragSessionActiveError(PrioctlError):
    """A press started while another gesture still owns the session."""


class InvalidDragTransitionError(PrioctlError):
    """A gesture event arrived in a phase that does not accept it."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Illegal drag transition: {current} -> {target}")
