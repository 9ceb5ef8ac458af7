"""
Patron model for the library lending engine.

Each patron owns its own borrowing ledger:

- an ordered, append-only history of BorrowRecords
- the set of item keys currently held, derived from open records
- an inbox of availability notifications delivered by the waitlist

The ledger lives in private attributes and is only changed through
``record_checkout`` and ``record_return``, which the lending engine calls.
The engine, not the record, guarantees at most one open record per
(patron, item key).
"""

import logging
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PrivateAttr

logger = logging.getLogger(__name__)


class BorrowRecord(BaseModel):
    """One checkout/return lifecycle of an item for a patron."""

    item_key: str = Field(
        ...,
        description="Catalog key of the borrowed item",
        min_length=1,
    )

    checkout_date: datetime = Field(
        default_factory=datetime.now,
        description="When the item was checked out",
    )

    return_date: datetime | None = Field(
        None,
        description="When the item was returned; None while still borrowed",
    )

    model_config = ConfigDict(validate_assignment=True)

    @property
    def is_open(self) -> bool:
        """Check if the item has not been returned yet."""
        return self.return_date is None

    def close(self, when: datetime | None = None) -> None:
        """
        Stamp the return date.

        Raises:
            ValueError: If the record was already closed
        """
        if not self.is_open:
            raise ValueError(f"Borrow record for {self.item_key} is already closed")
        when = when or datetime.now()
        if when < self.checkout_date:
            raise ValueError("Return date cannot be before checkout date")
        self.return_date = when


class Patron(BaseModel):
    """
    A library member who borrows items and waits for reserved ones.

    Patrons are created at registration and live for the whole session.
    """

    id: str = Field(
        ...,
        description="Unique identifier for the patron",
        min_length=1,
        frozen=True,
        examples=["P001", "patron_smith001"],
    )

    name: str = Field(
        ...,
        description="Display name of the patron",
        min_length=1,
        max_length=200,
        examples=["Alice", "Bob"],
    )

    email: EmailStr | None = Field(
        None,
        description="Address for availability notifications",
        examples=["alice@example.com"],
    )

    _history: list[BorrowRecord] = PrivateAttr(default_factory=list)
    _held: set[str] = PrivateAttr(default_factory=set)
    _notifications: list[str] = PrivateAttr(default_factory=list)

    model_config = ConfigDict(
        validate_assignment=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    @property
    def borrowing_history(self) -> tuple[BorrowRecord, ...]:
        """All borrow records, oldest first."""
        return tuple(self._history)

    @property
    def held_keys(self) -> frozenset[str]:
        """Keys of the items currently checked out by this patron."""
        return frozenset(self._held)

    @property
    def notifications(self) -> tuple[str, ...]:
        """Item keys this patron has been told are available, oldest first."""
        return tuple(self._notifications)

    def is_holding(self, item_key: str) -> bool:
        return item_key in self._held

    def open_record(self, item_key: str) -> BorrowRecord | None:
        """Most recent open record for ``item_key``, if any."""
        for record in reversed(self._history):
            if record.item_key == item_key and record.is_open:
                return record
        return None

    def record_checkout(self, record: BorrowRecord) -> None:
        """Append an open record and mark its item as held."""
        if not record.is_open:
            raise ValueError("Only open borrow records can be checked out")
        self._history.append(record)
        self._held.add(record.item_key)

    def record_return(self, item_key: str, when: datetime | None = None) -> BorrowRecord | None:
        """
        Close the most recent open record for ``item_key``.

        A return time earlier than the checkout (clock stepped back) is
        stamped with the checkout time instead.

        Returns:
            The closed record, or None when no open record existed (the
            ledger is left untouched apart from the held set).
        """
        record = self.open_record(item_key)
        if record is not None:
            when = when or datetime.now()
            if when < record.checkout_date:
                logger.warning(
                    "Return of %s by %s at %s precedes checkout at %s; using checkout time",
                    item_key,
                    self.id,
                    when,
                    record.checkout_date,
                )
                when = record.checkout_date
            record.close(when)
        self._held.discard(item_key)
        return record

    def notify_available(self, item_key: str) -> None:
        """Receive an availability notification from the waitlist."""
        self._notifications.append(item_key)
        logger.info("Patron %s notified: %s is now available", self.id, item_key)

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"
