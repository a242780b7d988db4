"""Observable sorted collection"""

import bisect
import logging
from enum import Enum
from typing import Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar('T')


class CollectionEvent(Enum):
    """Kinds of change reported to listeners"""
    ADDED = "added"
    REMOVED = "removed"
    CLEARED = "cleared"


Listener = Callable[[CollectionEvent, Optional[T]], None]


class ObservableCollection(Generic[T]):
    """Sorted set that notifies listeners about changes

    Items are kept in their natural order and compared by equality for
    membership. Listeners are called synchronously and only after a
    change actually happened.
    """

    def __init__(self, items: Iterable[T] = ()):
        self._items: List[T] = []
        self._listeners: List[Listener] = []
        self.logger = logging.getLogger(self.__class__.__name__)
        for item in items:
            self._insert(item)

    def add_listener(self, listener: Listener) -> None:
        """Register a change listener"""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Unregister a change listener"""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: CollectionEvent, item: Optional[T]) -> None:
        for listener in list(self._listeners):
            listener(event, item)

    def _insert(self, item: T) -> bool:
        if item in self._items:
            return False
        bisect.insort(self._items, item)
        return True

    def add(self, item: T) -> bool:
        """
        Add an item

        Returns:
            False if an equal item is already present
        """
        if not self._insert(item):
            return False
        self.logger.debug(f"Added {item}")
        self._notify(CollectionEvent.ADDED, item)
        return True

    def remove(self, item: T) -> bool:
        """
        Remove an item

        Returns:
            False if the item is not present
        """
        if item not in self._items:
            return False
        self._items.remove(item)
        self.logger.debug(f"Removed {item}")
        self._notify(CollectionEvent.REMOVED, item)
        return True

    def clear(self) -> None:
        """Remove all items"""
        self._items.clear()
        self._notify(CollectionEvent.CLEARED, None)

    def resort(self) -> None:
        """Restore order after a sort-relevant attribute changed"""
        self._items.sort()

    def get(self, name: str) -> Optional[T]:
        """Item whose ``name`` attribute equals ``name``"""
        for item in self._items:
            if getattr(item, "name", None) == name:
                return item
        return None

    def to_list(self) -> List[T]:
        return list(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)
