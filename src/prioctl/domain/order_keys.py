"""Sparse integer order keys.

Items inside a container are sorted by an integer key instead of a
contiguous index, so a move rewrites one key rather than renumbering the
whole container. New keys are derived from the neighbouring keys at the
insertion gap:

- empty container: the default gap (seed)
- top: half of the first key
- bottom: last key plus the default gap
- between: integer midpoint, nudged off a colliding neighbour

Repeated bisection eventually leaves no integer between two neighbours.
That case raises :class:`KeySpaceExhaustedError`; :func:`plan_insertion`
answers it by renumbering the container with evenly spaced keys.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from prioctl.domain.errors import KeySpaceExhaustedError

DEFAULT_GAP = 1000
MIN_KEY = 1


@dataclass(frozen=True)
class InsertionPlan:
    """Result of planning an insertion into a container.

    Attributes:
        key: Order key for the inserted item.
        renumbered: New keys for the existing siblings (same order as the
            input) when the container had to be renumbered, else None.
    """

    key: int
    renumbered: tuple[int, ...] | None = None


def clamp_gap_index(insert_at: int, sibling_count: int) -> int:
    """Clamp *insert_at* into ``[0, sibling_count]``."""
    return max(0, min(insert_at, sibling_count))


def compute_order_key(
    sibling_keys: Sequence[int],
    insert_at: int,
    *,
    gap: int = DEFAULT_GAP,
) -> int:
    """Compute the key for an item inserted at gap *insert_at*.

    Args:
        sibling_keys: Keys of the destination container sorted ascending,
            excluding the item being moved.
        insert_at: Gap index in ``[0, len(sibling_keys)]``.
        gap: Seed for empty containers and spacing for appends.

    Raises:
        KeySpaceExhaustedError: No positive key fits at the requested gap.

    Examples:
        >>> compute_order_key([1000, 2000, 3000], 0)
        500
        >>> compute_order_key([1000, 2000, 3000], 3)
        4000
        >>> compute_order_key([1000, 2000, 3000], 1)
        1500
    """
    count = len(sibling_keys)
    if count == 0:
        return gap

    if insert_at <= 0:
        first = sibling_keys[0]
        if first > MIN_KEY:
            return first // 2
        raise KeySpaceExhaustedError(0, None, first)

    if insert_at >= count:
        return sibling_keys[-1] + gap

    before = sibling_keys[insert_at - 1]
    after = sibling_keys[insert_at]
    mid = (before + after) // 2
    if mid in (before, after):
        mid = before + 1
    if not before < mid < after:
        raise KeySpaceExhaustedError(insert_at, before, after)
    return mid


def renumber_keys(count: int, *, gap: int = DEFAULT_GAP) -> tuple[int, ...]:
    """Evenly spaced keys ``gap, 2*gap, ...`` for *count* items."""
    return tuple(gap * (i + 1) for i in range(count))


def needs_rebalance(sorted_keys: Sequence[int]) -> bool:
    """Whether a container's keys are non-positive or not strictly increasing."""
    if sorted_keys and sorted_keys[0] < MIN_KEY:
        return True
    return any(a >= b for a, b in zip(sorted_keys, sorted_keys[1:], strict=False))


def plan_insertion(
    sibling_keys: Sequence[int],
    insert_at: int,
    *,
    gap: int = DEFAULT_GAP,
) -> InsertionPlan:
    """Plan an insertion, renumbering the siblings when the gap is exhausted.

    *insert_at* is clamped to the sibling range first.
    """
    insert_at = clamp_gap_index(insert_at, len(sibling_keys))
    try:
        key = compute_order_key(sibling_keys, insert_at, gap=gap)
    except KeySpaceExhaustedError:
        renumbered = renumber_keys(len(sibling_keys), gap=gap)
        return InsertionPlan(
            key=compute_order_key(renumbered, insert_at, gap=gap),
            renumbered=renumbered,
        )
    return InsertionPlan(key=key)
