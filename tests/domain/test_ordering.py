"""Tests for the per-container ordering view and authoritative moves."""

from prioctl.domain.containers import ContainerRegistry
from prioctl.domain.ordering import ContainerOrderingView, apply_authoritative_move
from tests.conftest import make_item, sample_items


class TestContainerOrderingView:
    def test_sorted_by_key(self) -> None:
        items = [make_item("B", "Q1", 2000), make_item("A", "Q1", 1000)]
        assert [i.id for i in ContainerOrderingView(items).items_in("Q1")] == ["A", "B"]

    def test_ties_break_on_id(self) -> None:
        items = [make_item("Z", "Q1", 1000), make_item("M", "Q1", 1000)]
        assert [i.id for i in ContainerOrderingView(items).items_in("Q1")] == ["M", "Z"]

    def test_exclude(self) -> None:
        view = ContainerOrderingView(sample_items())
        assert view.keys_in("Q1", exclude="B") == [1000, 3000]

    def test_index_of(self) -> None:
        view = ContainerOrderingView(sample_items())
        assert view.index_of("C") == 2
        assert view.index_of("missing") is None

    def test_empty_container(self) -> None:
        assert ContainerOrderingView(sample_items()).items_in("Q4") == []


class TestApplyAuthoritativeMove:
    def test_cross_container_move_renumbers_destination(self, registry: ContainerRegistry) -> None:
        after = apply_authoritative_move(sample_items(), "D", registry.get("Q1"), 1)
        view = ContainerOrderingView(after)
        assert [i.id for i in view.items_in("Q1")] == ["A", "D", "B", "C"]
        assert view.keys_in("Q1") == [1000, 2000, 3000, 4000]
        moved = next(i for i in after if i.id == "D")
        assert moved.urgent is True

    def test_same_container_reorder(self, registry: ContainerRegistry) -> None:
        after = apply_authoritative_move(sample_items(), "C", registry.get("Q1"), 0)
        assert [i.id for i in ContainerOrderingView(after).items_in("Q1")] == ["C", "A", "B"]

    def test_unknown_item_is_noop(self, registry: ContainerRegistry) -> None:
        items = tuple(sample_items())
        assert apply_authoritative_move(items, "nope", registry.get("Q1"), 0) == items
