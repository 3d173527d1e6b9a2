"""Tests for default containers and the container registry."""

from prioctl.domain.containers import (
    QUADRANT_DELEGATE,
    QUADRANT_DO_FIRST,
    QUADRANT_ELIMINATE,
    QUADRANT_SCHEDULE,
    ContainerRegistry,
    default_containers,
    default_quadrants,
    default_routine_sections,
)
from prioctl.domain.items import Container, ContainerKind


class TestDefaults:
    def test_quadrant_forcing(self) -> None:
        forced = {c.id: (c.forced.urgent, c.forced.important) for c in default_quadrants()}
        assert forced == {
            QUADRANT_DO_FIRST: (True, True),
            QUADRANT_SCHEDULE: (False, True),
            QUADRANT_DELEGATE: (True, False),
            QUADRANT_ELIMINATE: (False, False),
        }

    def test_routine_sections_force_nothing(self) -> None:
        for section in default_routine_sections():
            assert section.kind == ContainerKind.ROUTINE_SECTION
            assert section.forced.is_empty

    def test_default_containers(self) -> None:
        assert len(default_containers()) == 6


class TestContainerRegistry:
    def test_lookup(self) -> None:
        registry = ContainerRegistry(default_quadrants())
        assert registry.get("Q2").name == "Schedule"
        assert registry.get("nope") is None
        assert "Q1" in registry
        assert len(registry) == 4

    def test_add_and_remove(self) -> None:
        registry = ContainerRegistry()
        registry.add(Container(id="LIST-0001", name="Errands"))
        assert [c.id for c in registry] == ["LIST-0001"]
        registry.remove("LIST-0001")
        assert "LIST-0001" not in registry
