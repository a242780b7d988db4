"""Tests for delivery_tool.models.collection module."""

from __future__ import annotations

from unittest.mock import Mock

from delivery_tool.models.collection import CollectionEvent, ObservableCollection


class TestObservableCollection:
    """Test ObservableCollection."""

    def test_items_kept_sorted(self) -> None:
        collection = ObservableCollection([3, 1])
        collection.add(2)

        assert collection.to_list() == [1, 2, 3]
        assert collection[0] == 1

    def test_duplicate_rejected(self) -> None:
        listener = Mock()
        collection = ObservableCollection([1])
        collection.add_listener(listener)

        assert collection.add(1) is False
        listener.assert_not_called()
        assert len(collection) == 1

    def test_listener_notified(self) -> None:
        listener = Mock()
        collection = ObservableCollection()
        collection.add_listener(listener)

        collection.add(5)
        collection.remove(5)
        collection.clear()

        assert [c.args for c in listener.call_args_list] == [
            (CollectionEvent.ADDED, 5),
            (CollectionEvent.REMOVED, 5),
            (CollectionEvent.CLEARED, None),
        ]

    def test_removed_listener_not_notified(self) -> None:
        listener = Mock()
        collection = ObservableCollection()
        collection.add_listener(listener)
        collection.remove_listener(listener)

        collection.add(1)

        listener.assert_not_called()

    def test_remove_absent(self) -> None:
        collection = ObservableCollection([1])
        assert collection.remove(2) is False

    def test_get_by_name(self, make_delivery) -> None:
        collection = ObservableCollection([make_delivery("1.0"), make_delivery("1.1", minutes=5)])

        assert collection.get("1.1").name == "1.1"
        assert collection.get("2.0") is None
        assert [d.name for d in collection] == ["1.1", "1.0"]

    def test_truthiness(self) -> None:
        assert not ObservableCollection()
        assert ObservableCollection([1])
