from collections.abc import Callable
from datetime import datetime

from .catalog import Catalog, InventoryLine
from .config import LendingConfig, get_config
from .events import EventLog
from .exceptions import NotFoundError
from .lending import LendingEngine
from .models.circulation import CheckoutOutcome, ReturnReceipt
from .models.item import LibraryItem
from .models.patron import Patron
from .recommendation import RecommendationEngine, RecommendationStrategy, get_strategy
from .waitlist import WaitlistRegistry


class Library:
    """
    A simple facade that wires the components and offers a compact API.

    All components share one EventLog, exposed as ``events``.
    """

    def __init__(
        self,
        config: LendingConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config or get_config()

        self.events = EventLog(retain=self.config.record_events)
        self.catalog = Catalog(self.events)
        self.waitlist = WaitlistRegistry(self.events)
        self.lending = LendingEngine(self.catalog, self.waitlist, self.events, clock=clock)
        self.recommender = RecommendationEngine(
            get_strategy(self.config.recommendation_strategy),
            limit=self.config.recommendation_limit,
        )

    # ---- catalog
    def add_item(self, item: LibraryItem, copies: int = 1) -> LibraryItem:
        self.catalog.add(item, copies)
        return item

    def update_item(self, item: LibraryItem) -> None:
        self.catalog.update(item)

    def remove_item(self, key: str) -> None:
        self.catalog.remove(key)

    def find_item(self, key: str) -> LibraryItem | None:
        return self.catalog.find(key)

    def search(self, text: str) -> list[LibraryItem]:
        return self.catalog.search(text)

    def search_by_field(self, field: str, substring: str) -> list[LibraryItem]:
        return self.catalog.search_by_field(field, substring)

    def inventory(self) -> list[InventoryLine]:
        return self.catalog.inventory()

    # ---- patrons
    def register_patron(self, patron: Patron) -> Patron:
        """Register ``patron`` for lending and for waitlist notifications."""
        self.lending.register_patron(patron)
        self.waitlist.register_listener(patron.id, patron.notify_available)
        return patron

    def get_patron(self, patron_id: str) -> Patron:
        return self.lending.get_patron(patron_id)

    # ---- circulation
    def checkout(self, patron_id: str, key: str) -> CheckoutOutcome:
        return self.lending.checkout(patron_id, key)

    def return_item(self, patron_id: str, key: str) -> ReturnReceipt:
        return self.lending.return_item(patron_id, key)

    def reserve(self, patron_id: str, key: str) -> int:
        """
        Join the waitlist for ``key``; returns the queue position.

        Raises:
            NotFoundError: If the patron or the item is unknown
        """
        self.lending.get_patron(patron_id)
        if key not in self.catalog:
            raise NotFoundError(f"Item {key} not found")
        return self.waitlist.reserve(patron_id, key)

    def cancel_reservation(self, patron_id: str, key: str) -> bool:
        return self.waitlist.cancel(patron_id, key)

    # ---- recommendations
    def recommend(self, patron_id: str) -> list[LibraryItem]:
        return self.recommender.recommend(self.get_patron(patron_id), self.catalog)

    def use_strategy(self, strategy: RecommendationStrategy | str) -> None:
        """Swap the recommendation strategy, by instance or registered name."""
        if isinstance(strategy, str):
            strategy = get_strategy(strategy)
        self.recommender.strategy = strategy
