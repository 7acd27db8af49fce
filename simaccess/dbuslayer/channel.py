"""Closeable push channels for bus signals.

A :class:`SignalChannel` is filled from the GLib main-loop thread by signal
handlers and drained by the caller on its own schedule.  Closing is explicit
through :meth:`SignalChannel.cancel`, which is idempotent; once closed, the
consumer receives whatever was queued before the close and then stops.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

from simaccess.core.log import get_logger

__all__ = [
    "PropertyChanged",
    "ObjectManagerEvent",
    "SignalChannel",
    "INTERFACES_ADDED",
    "INTERFACES_REMOVED",
]

logger = get_logger(__name__)

INTERFACES_ADDED = "added"
INTERFACES_REMOVED = "removed"

# Marks the end of the stream inside the queue; never handed to consumers.
_CLOSED = object()


@dataclass
class PropertyChanged:
    """One property of one object changed (``value`` is None when invalidated)."""

    interface: str
    path: str
    name: str
    value: Any


@dataclass
class ObjectManagerEvent:
    """An object appeared on or vanished from the bus.

    ``interfaces`` maps interface name to its properties for
    ``INTERFACES_ADDED``; for ``INTERFACES_REMOVED`` the values are empty.
    """

    kind: str
    path: str
    interfaces: Dict[str, Dict[str, Any]] = field(default_factory=dict)


class SignalChannel:
    """Single-consumer, unbounded stream of signal events."""

    def __init__(self, name: str = ""):
        self.name = name
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._closed = False
        self._lock = threading.Lock()
        self._on_cancel: List[Callable[[], None]] = []

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<SignalChannel {self.name!r} {state}>"

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, event: Any) -> bool:
        """Queue *event* for the consumer; returns False once closed."""
        with self._lock:
            if self._closed:
                return False
            self._queue.put(event)
            return True

    def get(self, block: bool = True, timeout: Optional[float] = None) -> Any:
        """Return the next event, or None once the channel is closed.

        Raises :class:`queue.Empty` when *timeout* expires (or immediately
        with ``block=False``) and nothing is queued.
        """
        item = self._queue.get(block, timeout)
        if item is _CLOSED:
            # Leave the marker for any later get() call.
            self._queue.put(_CLOSED)
            return None
        return item

    def __iter__(self) -> Iterator[Any]:
        while True:
            item = self.get()
            if item is None:
                return
            yield item

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Run *callback* once when the channel is cancelled."""
        with self._lock:
            if not self._closed:
                self._on_cancel.append(callback)
                return
        callback()

    def cancel(self) -> bool:
        """Close the channel.  Returns False if it was already closed."""
        with self._lock:
            if self._closed:
                return False
            self._closed = True
            self._queue.put(_CLOSED)
            callbacks, self._on_cancel = self._on_cancel, []

        for callback in callbacks:
            try:
                callback()
            except Exception as exc:
                logger.warning(f"Channel {self.name} cancel hook failed: {exc}")
        return True
