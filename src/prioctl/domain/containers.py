"""Container metadata: the default board layout and directory lookups.

The four quadrants follow the Eisenhower matrix: each forces a fixed
``urgent``/``important`` pair onto the tasks placed inside it. Custom lists
and routine sections force nothing.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Protocol

from prioctl.domain.items import Container, ContainerKind, ForcedAttributes

QUADRANT_DO_FIRST = "Q1"
QUADRANT_SCHEDULE = "Q2"
QUADRANT_DELEGATE = "Q3"
QUADRANT_ELIMINATE = "Q4"

ROUTINE_TOP = "RTN-TOP"
ROUTINE_BOTTOM = "RTN-BOTTOM"


class ContainerDirectory(Protocol):
    """Lookup for container metadata by id."""

    def get(self, container_id: str) -> Container | None: ...


def default_quadrants() -> list[Container]:
    """The four Eisenhower quadrants, in display order."""
    return [
        Container(
            id=QUADRANT_DO_FIRST,
            name="Do First",
            kind=ContainerKind.QUADRANT,
            forced=ForcedAttributes(urgent=True, important=True),
        ),
        Container(
            id=QUADRANT_SCHEDULE,
            name="Schedule",
            kind=ContainerKind.QUADRANT,
            forced=ForcedAttributes(urgent=False, important=True),
        ),
        Container(
            id=QUADRANT_DELEGATE,
            name="Delegate",
            kind=ContainerKind.QUADRANT,
            forced=ForcedAttributes(urgent=True, important=False),
        ),
        Container(
            id=QUADRANT_ELIMINATE,
            name="Eliminate",
            kind=ContainerKind.QUADRANT,
            forced=ForcedAttributes(urgent=False, important=False),
        ),
    ]


def default_routine_sections() -> list[Container]:
    """Top and bottom routine sections."""
    return [
        Container(id=ROUTINE_TOP, name="Morning", kind=ContainerKind.ROUTINE_SECTION),
        Container(id=ROUTINE_BOTTOM, name="Evening", kind=ContainerKind.ROUTINE_SECTION),
    ]


def default_containers() -> list[Container]:
    return [*default_quadrants(), *default_routine_sections()]


class ContainerRegistry:
    """In-memory :class:`ContainerDirectory` keyed by container id."""

    def __init__(self, containers: Iterable[Container] = ()) -> None:
        self._containers: dict[str, Container] = {}
        for container in containers:
            self.add(container)

    def add(self, container: Container) -> None:
        self._containers[container.id] = container

    def remove(self, container_id: str) -> None:
        self._containers.pop(container_id, None)

    def get(self, container_id: str) -> Container | None:
        return self._containers.get(container_id)

    def __contains__(self, container_id: object) -> bool:
        return container_id in self._containers

    def __iter__(self) -> Iterator[Container]:
        return iter(self._containers.values())

    def __len__(self) -> int:
        return len(self._containers)
