"""ItemCache: the explicit local store read by rendering and the coordinator.

The cache holds an immutable tuple that is swapped wholesale on every
write, so any tuple handed out by :meth:`ItemCache.items` doubles as a
snapshot: later writes never mutate it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from operator import attrgetter
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ItemCache(Generic[T]):
    """Copy-on-write collection with change listeners.

    Parameters:
        items: Initial contents.
        key: Extracts the identity of an entry (default: ``.id``).
    """

    def __init__(
        self,
        items: Iterable[T] = (),
        *,
        key: Callable[[T], Any] = attrgetter("id"),
    ) -> None:
        self._items: tuple[T, ...] = tuple(items)
        self._key = key
        self._version = 0
        self._listeners: list[Callable[[tuple[T, ...]], None]] = []

    @property
    def version(self) -> int:
        """Incremented on every write."""
        return self._version

    def items(self) -> tuple[T, ...]:
        return self._items

    def get(self, ident: Any) -> T | None:
        for entry in self._items:
            if self._key(entry) == ident:
                return entry
        return None

    def replace(self, items: Iterable[T]) -> None:
        """Swap in a new collection and notify listeners."""
        self._items = tuple(items)
        self._version += 1
        for listener in list(self._listeners):
            try:
                listener(self._items)
            except Exception:
                logger.warning("Cache listener failed", exc_info=True)

    def subscribe(self, listener: Callable[[tuple[T, ...]], None]) -> Callable[[], None]:
        """Register *listener*; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def __len__(self) -> int:
        return len(self._items)
