"""
Structured lending events.

Components describe what they did as plain data; formatting and destination
are left to whoever subscribes to the event log.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Kinds of events emitted by the lending engine."""

    ITEM_ADDED = "item_added"
    ITEM_UPDATED = "item_updated"
    ITEM_REMOVED = "item_removed"
    CHECKOUT = "checkout"
    RETURN = "return"
    RESERVATION = "reservation"
    RESERVATION_CANCELLED = "reservation_cancelled"
    NOTIFICATION_DELIVERED = "notification_delivered"
    NOTIFICATION_DROPPED = "notification_dropped"


class LibraryEvent(BaseModel):
    type: EventType
    item_key: str | None = None
    patron_id: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(frozen=True)
