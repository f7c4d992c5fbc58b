"""In-memory item store.

One coarse-grained ``threading.Lock`` guards the sequence. Critical sections
are synchronous, so the lock is never held across an ``await`` and works the
same from the event loop or the threadpool.

Python locks do not poison: if a critical section raises, the ``with`` block
releases the lock and the store stays usable.
"""

import logging
import threading
from collections.abc import Iterable

from devserver.models.item import Item

logger = logging.getLogger(__name__)

SEED_ITEMS = (
    Item(id=1, name="Example Item", description="This is an example item"),
)


class ItemStore:
    """Ordered, append-only collection of items with monotonic ids."""

    def __init__(self, items: Iterable[Item] = SEED_ITEMS) -> None:
        self._items: list[Item] = list(items)
        self._lock = threading.Lock()

    def list(self) -> list[Item]:
        """Return a snapshot of the current items."""
        with self._lock:
            return list(self._items)

    def create(self, name: str, description: str) -> Item:
        """Append a new item with id ``max(existing ids) + 1`` and return it."""
        with self._lock:
            new_id = max((item.id for item in self._items), default=0) + 1
            item = Item(id=new_id, name=name, description=description)
            self._items.append(item)

        logger.info("Created new item with id: %d", new_id)
        return item

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
