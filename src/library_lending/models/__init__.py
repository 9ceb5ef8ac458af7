"""
Library lending models.

Pydantic models for the entities the lending engine works with:
- Item variants: Book, DVD, Magazine
- Patron and its BorrowRecord ledger
- Circulation outcomes: CheckoutOutcome, ReturnReceipt
- LibraryEvent records emitted by every component
"""

from .circulation import CheckoutOutcome, ReturnReceipt
from .events import EventType, LibraryEvent
from .item import DVD, Book, Item, LibraryItem, Magazine, item_genre, parse_item
from .patron import BorrowRecord, Patron

__all__ = [
    "DVD",
    "Book",
    "BorrowRecord",
    "CheckoutOutcome",
    "EventType",
    "Item",
    "LibraryEvent",
    "LibraryItem",
    "Magazine",
    "Patron",
    "ReturnReceipt",
    "item_genre",
    "parse_item",
]
