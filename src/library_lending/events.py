"""In-memory event log shared by the lending components."""

import logging
from collections.abc import Callable
from threading import RLock
from typing import Any

from .models.events import EventType, LibraryEvent

logger = logging.getLogger(__name__)

EventSubscriber = Callable[[LibraryEvent], None]


class EventLog:
    """
    Collects LibraryEvents and fans them out to subscribers.

    With ``retain=False`` events are still logged and forwarded but not kept.
    """

    def __init__(self, retain: bool = True) -> None:
        self.retain = retain
        self._events: list[LibraryEvent] = []
        self._subscribers: list[EventSubscriber] = []
        self._lock = RLock()

    def subscribe(self, subscriber: EventSubscriber) -> None:
        with self._lock:
            self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: EventSubscriber) -> None:
        with self._lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

    def emit(
        self,
        event_type: EventType,
        *,
        item_key: str | None = None,
        patron_id: str | None = None,
        **details: Any,
    ) -> LibraryEvent:
        """Record an event and hand it to every subscriber."""
        event = LibraryEvent(
            type=event_type,
            item_key=item_key,
            patron_id=patron_id,
            details=details,
        )
        with self._lock:
            if self.retain:
                self._events.append(event)
            subscribers = list(self._subscribers)

        logger.debug(
            "event=%s item=%s patron=%s details=%s",
            event.type.value,
            item_key,
            patron_id,
            details,
        )
        for subscriber in subscribers:
            subscriber(event)
        return event

    @property
    def events(self) -> tuple[LibraryEvent, ...]:
        with self._lock:
            return tuple(self._events)

    def of_type(self, event_type: EventType) -> list[LibraryEvent]:
        """Retained events of a single type, oldest first."""
        return [e for e in self.events if e.type == event_type]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
