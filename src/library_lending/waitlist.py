"""
Waitlist registry: fair, per-item FIFO notification of waiting patrons.

The registry keeps two independent structures:

1. **Queues**: item key -> FIFO of patron ids awaiting the next copy
2. **Directory**: patron id -> notification callback

Queues and listeners are decoupled. Unregistering a listener leaves the
patron queued; when its turn comes the slot is forfeited. Bound-method
callbacks are held weakly so the registry never keeps a patron alive.

Reserving an item twice while still queued is a no-op: the patron keeps
its original place.
"""

import logging
import weakref
from collections import deque
from collections.abc import Callable
from threading import RLock
from typing import Protocol, runtime_checkable

from .events import EventLog
from .models.events import EventType

logger = logging.getLogger(__name__)

NotificationCallback = Callable[[str], None]


@runtime_checkable
class Notifiable(Protocol):
    """Anything that can be told an item is available again."""

    def notify_available(self, item_key: str) -> None: ...


class WaitlistRegistry:
    """Per-item reservation queues plus a directory of notifiable listeners."""

    def __init__(self, events: EventLog | None = None) -> None:
        self.events = events if events is not None else EventLog()
        self._queues: dict[str, deque[str]] = {}
        self._listeners: dict[str, Callable[[], NotificationCallback | None]] = {}
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Directory
    # ------------------------------------------------------------------

    def register_listener(
        self, patron_id: str, listener: NotificationCallback | Notifiable
    ) -> None:
        """
        Register how ``patron_id`` is notified.

        ``listener`` may be a callable taking the item key or an object with
        ``notify_available``. Re-registering replaces the previous listener.
        """
        if isinstance(listener, Notifiable) and not callable(listener):
            listener = listener.notify_available

        ref: Callable[[], NotificationCallback | None]
        try:
            ref = weakref.WeakMethod(listener)  # type: ignore[arg-type]
        except TypeError:
            # Plain functions, lambdas and callables that cannot be weakly
            # referenced are held strongly.
            ref = lambda cb=listener: cb  # noqa: E731

        with self._lock:
            self._listeners[patron_id] = ref
        logger.debug("Registered listener for patron %s", patron_id)

    def unregister_listener(self, patron_id: str) -> None:
        """Drop the listener; any queued reservations stay in place."""
        with self._lock:
            self._listeners.pop(patron_id, None)
        logger.debug("Unregistered listener for patron %s", patron_id)

    def has_listener(self, patron_id: str) -> bool:
        return self._resolve(patron_id) is not None

    def _resolve(self, patron_id: str) -> NotificationCallback | None:
        with self._lock:
            ref = self._listeners.get(patron_id)
        return ref() if ref is not None else None

    # ------------------------------------------------------------------
    # Queues
    # ------------------------------------------------------------------

    def reserve(self, patron_id: str, item_key: str) -> int:
        """
        Queue ``patron_id`` for the next copy of ``item_key``.

        Returns:
            The patron's 1-based position in the queue. A duplicate
            reservation returns the existing position and changes nothing.
        """
        with self._lock:
            queue = self._queues.setdefault(item_key, deque())
            if patron_id in queue:
                position = queue.index(patron_id) + 1
                logger.info(
                    "Patron %s already waiting for %s at position %d",
                    patron_id,
                    item_key,
                    position,
                )
                return position
            queue.append(patron_id)
            position = len(queue)

        logger.info("Patron %s reserved %s (position %d)", patron_id, item_key, position)
        self.events.emit(
            EventType.RESERVATION,
            item_key=item_key,
            patron_id=patron_id,
            position=position,
        )
        return position

    def cancel(self, patron_id: str, item_key: str) -> bool:
        """Withdraw a queued reservation. Returns False if there was none."""
        with self._lock:
            queue = self._queues.get(item_key)
            if not queue or patron_id not in queue:
                return False
            queue.remove(patron_id)
            if not queue:
                del self._queues[item_key]

        logger.info("Patron %s cancelled reservation for %s", patron_id, item_key)
        self.events.emit(
            EventType.RESERVATION_CANCELLED, item_key=item_key, patron_id=patron_id
        )
        return True

    def notify_next(self, item_key: str) -> str | None:
        """
        Pop the head of the queue for ``item_key`` and notify that patron.

        The head is popped whether or not a listener is registered; a missing
        listener forfeits the slot. Delivery is synchronous and happens at
        most once per pop.

        Returns:
            The popped patron id, or None if nobody was waiting.
        """
        with self._lock:
            queue = self._queues.get(item_key)
            if not queue:
                return None
            patron_id = queue.popleft()
            if not queue:
                del self._queues[item_key]
            callback = self._resolve(patron_id)

        if callback is None:
            logger.warning(
                "No listener for patron %s; reservation slot for %s forfeited",
                patron_id,
                item_key,
            )
            self.events.emit(
                EventType.NOTIFICATION_DROPPED, item_key=item_key, patron_id=patron_id
            )
            return patron_id

        callback(item_key)
        logger.info("Notified patron %s about availability of %s", patron_id, item_key)
        self.events.emit(
            EventType.NOTIFICATION_DELIVERED, item_key=item_key, patron_id=patron_id
        )
        return patron_id

    def queue(self, item_key: str) -> tuple[str, ...]:
        """Patron ids waiting for ``item_key``, head first."""
        with self._lock:
            return tuple(self._queues.get(item_key, ()))

    def position(self, patron_id: str, item_key: str) -> int | None:
        waiting = self.queue(item_key)
        if patron_id not in waiting:
            return None
        return waiting.index(patron_id) + 1

    def pending_count(self, item_key: str) -> int:
        with self._lock:
            return len(self._queues.get(item_key, ()))
