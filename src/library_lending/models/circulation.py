"""
Circulation outcome models for the library lending engine.

Checkout failures that a caller is expected to handle (no copies left,
unknown item) are ordinary return values, never exceptions. A return always
succeeds and produces a ReturnReceipt describing what happened.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .patron import BorrowRecord


class CheckoutOutcome(str, Enum):
    """Result of a checkout attempt."""

    SUCCESS = "success"
    NO_COPIES = "no_copies"
    ITEM_NOT_FOUND = "item_not_found"
    ALREADY_BORROWED = "already_borrowed"

    @property
    def succeeded(self) -> bool:
        return self is CheckoutOutcome.SUCCESS


class ReturnReceipt(BaseModel):
    """
    Summary of a processed return.

    The copy is always put back on the shelf; ``closed_record`` is None when
    the patron had no open borrow record for the item.
    """

    patron_id: str = Field(..., description="Patron who returned the item")
    item_key: str = Field(..., description="Catalog key of the returned item")
    available_copies: int = Field(
        ...,
        description="Copies available right after the return",
        ge=0,
    )
    closed_record: BorrowRecord | None = Field(
        None,
        description="Borrow record closed by this return",
    )
    next_patron_id: str | None = Field(
        None,
        description="Patron popped from the waitlist, whether or not a listener was reached",
    )

    model_config = ConfigDict(frozen=True)

    @property
    def was_borrowed(self) -> bool:
        """Check if the return matched an open borrow record."""
        return self.closed_record is not None
