"""
Lending engine: checkout and return orchestration.

Per (patron, item) pair there are two states, available-to-borrow and
borrowed, moved by ``checkout`` and ``return_item``:

1. **Checkout**: look the item up, take a copy off the shelf, open a borrow
   record in the patron's ledger
2. **Return**: put the copy back, close the newest open record, then hand the
   copy to the next patron on the waitlist

Checkout failures are CheckoutOutcome values. Returns always succeed so the
shelf count matches the physical copies; a return without a matching borrow
record is logged as an anomaly. The engine never reserves on its own; callers
reserve explicitly after a NO_COPIES outcome.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from threading import RLock

from .catalog import Catalog
from .events import EventLog
from .exceptions import NotFoundError
from .models.circulation import CheckoutOutcome, ReturnReceipt
from .models.events import EventType
from .models.patron import BorrowRecord, Patron
from .waitlist import WaitlistRegistry

logger = logging.getLogger(__name__)


class LendingEngine:
    """Moves copies between the catalog and patron ledgers."""

    def __init__(
        self,
        catalog: Catalog,
        waitlist: WaitlistRegistry,
        events: EventLog | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.catalog = catalog
        self.waitlist = waitlist
        self.events = events if events is not None else catalog.events
        self.clock = clock
        self._patrons: dict[str, Patron] = {}
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Patron directory
    # ------------------------------------------------------------------

    def register_patron(self, patron: Patron) -> None:
        """Add ``patron`` to the directory. Re-registering the same id replaces it."""
        with self._lock:
            self._patrons[patron.id] = patron
        logger.info("Registered patron %s", patron)

    def get_patron(self, patron_id: str) -> Patron:
        """
        Raises:
            NotFoundError: If no patron is registered under ``patron_id``
        """
        patron = self._patrons.get(patron_id)
        if patron is None:
            raise NotFoundError(f"Patron {patron_id} not found")
        return patron

    def patrons(self) -> list[Patron]:
        with self._lock:
            return list(self._patrons.values())

    # ------------------------------------------------------------------
    # Circulation
    # ------------------------------------------------------------------

    def checkout(self, patron_id: str, item_key: str) -> CheckoutOutcome:
        """
        Lend one copy of ``item_key`` to ``patron_id``.

        Returns:
            ITEM_NOT_FOUND if the catalog has no such item, ALREADY_BORROWED
            if the patron still holds a copy, NO_COPIES if the shelf is
            empty, SUCCESS otherwise.

        Raises:
            NotFoundError: If the patron is not registered
        """
        patron = self.get_patron(patron_id)

        with self._lock:
            if self.catalog.find(item_key) is None:
                logger.warning("Checkout by %s failed: item %s not found", patron_id, item_key)
                outcome = CheckoutOutcome.ITEM_NOT_FOUND
            elif patron.open_record(item_key) is not None:
                logger.warning("Patron %s already has %s checked out", patron_id, item_key)
                outcome = CheckoutOutcome.ALREADY_BORROWED
            elif not self.catalog.checkout_copy(item_key):
                logger.info("No copies available for %s. Consider reserving.", item_key)
                outcome = CheckoutOutcome.NO_COPIES
            else:
                patron.record_checkout(BorrowRecord(item_key=item_key, checkout_date=self.clock()))
                logger.info("Patron %s checked out %s", patron_id, item_key)
                outcome = CheckoutOutcome.SUCCESS

        self.events.emit(
            EventType.CHECKOUT,
            item_key=item_key,
            patron_id=patron_id,
            outcome=outcome.value,
        )
        return outcome

    def return_item(self, patron_id: str, item_key: str) -> ReturnReceipt:
        """
        Take back one copy of ``item_key`` from ``patron_id``.

        The copy goes back to the shelf and the waitlist is always asked for
        the next patron, even when the patron had no open record.

        Raises:
            NotFoundError: If the patron is not registered
        """
        patron = self.get_patron(patron_id)

        with self._lock:
            if not patron.is_holding(item_key):
                logger.warning("Patron %s did not have %s borrowed", patron_id, item_key)
            self.catalog.return_copy(item_key)
            closed = patron.record_return(item_key, self.clock())
            available = self.catalog.available_copies(item_key)

        logger.info("Patron %s returned %s", patron_id, item_key)
        self.events.emit(
            EventType.RETURN,
            item_key=item_key,
            patron_id=patron_id,
            matched_record=closed is not None,
        )

        next_patron_id = self.waitlist.notify_next(item_key)
        return ReturnReceipt(
            patron_id=patron_id,
            item_key=item_key,
            available_copies=available,
            closed_record=closed,
            next_patron_id=next_patron_id,
        )
