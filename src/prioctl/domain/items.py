"""Item and container models.

Items are the things being ordered (tasks and routine entries). Each item
lives in exactly one container and carries a sparse integer ``order`` key.
Containers may force the ``urgent``/``important`` flags onto anything
placed inside them (the four Eisenhower quadrants do).
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

# --- Weight formula constants ---

BASE_WEIGHT = 1.0
IMPORTANT_WEIGHT = 2.0
URGENT_WEIGHT = 1.5
LONG_TASK_WEIGHT = 2.0


class ItemKind(StrEnum):
    """What an ordered item represents."""

    TASK = "task"
    ROUTINE = "routine"


class ContainerKind(StrEnum):
    """Containers an item can be placed into."""

    QUADRANT = "quadrant"
    LIST = "list"
    ROUTINE_SECTION = "routine_section"


class ForcedAttributes(BaseModel):
    """Flags a container imposes on items moved into it.

    ``None`` means the container does not force that flag and the item's
    current value is kept.
    """

    model_config = {"frozen": True}

    urgent: bool | None = None
    important: bool | None = None

    @property
    def is_empty(self) -> bool:
        return self.urgent is None and self.important is None


class Container(BaseModel):
    """A quadrant, custom list, or routine section."""

    model_config = {"frozen": True}

    id: str
    name: str
    kind: ContainerKind = ContainerKind.LIST
    forced: ForcedAttributes = Field(default_factory=ForcedAttributes)


class Item(BaseModel):
    """An orderable entity (task or routine entry)."""

    model_config = {"frozen": True}

    id: str
    container_id: str
    order: int
    title: str = ""
    kind: ItemKind = ItemKind.TASK
    urgent: bool = False
    important: bool = False
    is_long_task: bool = False
    completed: bool = False
    weight: float = BASE_WEIGHT


def compute_weight(*, urgent: bool, important: bool, is_long_task: bool) -> float:
    """Scoring weight used by the earnings layer.

    Examples:
        >>> compute_weight(urgent=True, important=True, is_long_task=False)
        4.5
        >>> compute_weight(urgent=False, important=False, is_long_task=True)
        3.0
    """
    weight = BASE_WEIGHT
    if important:
        weight += IMPORTANT_WEIGHT
    if urgent:
        weight += URGENT_WEIGHT
    if is_long_task:
        weight += LONG_TASK_WEIGHT
    return weight


def place_in_container(item: Item, container: Container, order: int) -> Item:
    """Return a copy of *item* placed in *container* at *order*.

    Forced attributes of the destination override the item's flags;
    unforced flags are preserved. Task weights are recomputed from the
    resulting flags. Routine weights are owned by the routine and kept.
    """
    forced = container.forced
    urgent = item.urgent if forced.urgent is None else forced.urgent
    important = item.important if forced.important is None else forced.important

    update: dict[str, object] = {
        "container_id": container.id,
        "order": order,
        "urgent": urgent,
        "important": important,
    }
    if item.kind == ItemKind.TASK:
        update["weight"] = compute_weight(
            urgent=urgent,
            important=important,
            is_long_task=item.is_long_task,
        )
    return item.model_copy(update=update)
