"""
Catalog for the library lending engine.

The catalog owns item metadata and per-item copy counts:

1. **Metadata**: items keyed by their catalog key, in insertion order
2. **Availability**: copies on the shelf, changed only by checkout/return
3. **Totals**: copies ever added, used for inventory reporting
4. **Search**: case-insensitive substring search over item text fields

Copy counts never go negative and never exceed the copies added. Adding
copies to a known key never touches its metadata; only ``update`` does.
"""

import logging
from threading import RLock

from pydantic import BaseModel, ConfigDict

from .events import EventLog
from .exceptions import InvalidArgumentError, NotFoundError
from .models.events import EventType
from .models.item import LibraryItem

logger = logging.getLogger(__name__)

# Field names accepted by search_by_field. "creator" covers the author,
# director or publisher of any kind of item.
SEARCHABLE_FIELDS = frozenset({"title", "author", "genre", "director", "publisher", "creator"})


class InventoryLine(BaseModel):
    """One row of an inventory snapshot."""

    item: LibraryItem
    total_copies: int
    available_copies: int

    model_config = ConfigDict(frozen=True)

    @property
    def checked_out_copies(self) -> int:
        return self.total_copies - self.available_copies


class Catalog:
    """
    Key-value store of items with copy counts and text search.

    All mutations run under a single re-entrant lock so checkout/return pairs
    on the same key are atomic with respect to each other.
    """

    def __init__(self, events: EventLog | None = None) -> None:
        self.events = events if events is not None else EventLog()
        self._items: dict[str, LibraryItem] = {}
        self._available: dict[str, int] = {}
        self._total: dict[str, int] = {}
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def add(self, item: LibraryItem, copies: int = 1) -> None:
        """
        Add ``copies`` of ``item``.

        If the key already exists the copies are summed into the existing
        entry and the stored metadata is kept.

        Raises:
            InvalidArgumentError: If copies is not a positive integer
        """
        if isinstance(copies, bool) or not isinstance(copies, int) or copies <= 0:
            raise InvalidArgumentError(f"copies must be > 0, got {copies!r}")

        with self._lock:
            is_new = item.key not in self._items
            if is_new:
                self._items[item.key] = item
            self._available[item.key] = self._available.get(item.key, 0) + copies
            self._total[item.key] = self._total.get(item.key, 0) + copies
            available = self._available[item.key]

        logger.info("Added %s copies=%d available=%d", item, copies, available)
        self.events.emit(
            EventType.ITEM_ADDED,
            item_key=item.key,
            copies=copies,
            new_item=is_new,
        )

    def update(self, item: LibraryItem) -> None:
        """
        Replace the stored metadata for ``item.key``, keeping copy counts.

        Raises:
            NotFoundError: If the key is not in the catalog
        """
        with self._lock:
            if item.key not in self._items:
                raise NotFoundError(f"Item {item.key} not found")
            self._items[item.key] = item

        logger.info("Updated %s", item)
        self.events.emit(EventType.ITEM_UPDATED, item_key=item.key)

    def remove(self, key: str) -> None:
        """Remove an item and its counts. Unknown keys are ignored."""
        with self._lock:
            existed = self._items.pop(key, None) is not None
            self._available.pop(key, None)
            self._total.pop(key, None)

        if existed:
            logger.info("Removed item %s", key)
            self.events.emit(EventType.ITEM_REMOVED, item_key=key)

    def find(self, key: str) -> LibraryItem | None:
        return self._items.get(key)

    def items(self) -> list[LibraryItem]:
        """All items in insertion order."""
        with self._lock:
            return list(self._items.values())

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search_by_field(self, field: str, substring: str) -> list[LibraryItem]:
        """
        Case-insensitive substring match over one text field.

        Items that do not carry ``field`` never match. Results follow catalog
        insertion order.

        Raises:
            InvalidArgumentError: If ``field`` is not searchable
        """
        if field not in SEARCHABLE_FIELDS:
            raise InvalidArgumentError(
                f"Cannot search by {field!r}; expected one of {sorted(SEARCHABLE_FIELDS)}"
            )
        needle = substring.lower()

        def value_of(item: LibraryItem) -> str | None:
            if field == "creator":
                return item.creator
            return item.text_fields().get(field)

        matches = []
        for item in self.items():
            value = value_of(item)
            if value is not None and needle in value.lower():
                matches.append(item)
        return matches

    def search(self, text: str) -> list[LibraryItem]:
        """Free-text search across every text field and the key."""
        needle = text.lower().strip()
        return [
            item
            for item in self.items()
            if needle in item.key.lower()
            or any(needle in value.lower() for value in item.text_fields().values())
        ]

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------

    def checkout_copy(self, key: str) -> bool:
        """Take one copy off the shelf. Returns False, changing nothing, if none is left."""
        with self._lock:
            available = self._available.get(key, 0)
            if available <= 0:
                return False
            self._available[key] = available - 1

        logger.info("Checked out one copy of %s, remaining=%d", key, available - 1)
        return True

    def return_copy(self, key: str) -> None:
        """
        Put one copy back on the shelf.

        A key with no counter starts at 1; removed metadata is not restored.
        A known item already holding all of its copies stays at its total.
        """
        with self._lock:
            if key not in self._available:
                logger.warning("Return of %s which has no copy counter; starting at 1", key)
            elif key in self._total and self._available[key] >= self._total[key]:
                logger.warning(
                    "Return of %s but all %d copies are on the shelf", key, self._total[key]
                )
                return
            self._available[key] = self._available.get(key, 0) + 1
            available = self._available[key]

        logger.info("Returned one copy of %s, now=%d", key, available)

    def available_copies(self, key: str) -> int:
        return self._available.get(key, 0)

    def total_copies(self, key: str) -> int:
        """Copies ever added for ``key``; 0 if unknown."""
        return self._total.get(key, 0)

    def inventory(self) -> list[InventoryLine]:
        """Snapshot of every item with its total and available copies."""
        with self._lock:
            return [
                InventoryLine(
                    item=item,
                    total_copies=self._total.get(key, 0),
                    available_copies=self._available.get(key, 0),
                )
                for key, item in self._items.items()
            ]

    def __str__(self) -> str:
        return "\n".join(
            f"{line.item} copiesAvailable={line.available_copies}" for line in self.inventory()
        )
