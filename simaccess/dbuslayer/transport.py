"""Transport abstraction consumed by :class:`RemoteObjectProxy`.

A :class:`Transport` hands out :class:`Connection` objects bound to one
remote object.  Connections perform blocking single round-trip calls and
register signal subscriptions that feed :class:`SignalChannel` instances.
The dbus-python implementation lives in :mod:`simaccess.dbuslayer.system_bus`;
tests substitute an in-memory one.

Implementations raise :class:`simaccess.core.errors.SimAccessError`
subclasses only; bus library exceptions never escape a connection.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from simaccess.dbuslayer.channel import SignalChannel

__all__ = ["RawSignal", "SignalTransform", "Connection", "Transport"]


@dataclass
class RawSignal:
    path: str
    interface: str
    member: str
    args: Tuple[Any, ...]


# Turns one raw signal into the events pushed to a channel (possibly none).
SignalTransform = Callable[[RawSignal], Iterable[Any]]


class Connection(ABC):
    """Bus connection bound to ``(service, path)``."""

    def __init__(self, service: str, path: str):
        self.service = service
        self.path = path

    @abstractmethod
    def call_method(self, interface: str, method: str, *args: Any) -> Any:
        ...

    @abstractmethod
    def get_property(self, interface: str, name: str) -> Any:
        ...

    @abstractmethod
    def get_all_properties(self, interface: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    def set_property(self, interface: str, name: str, value: Any) -> None:
        ...

    @abstractmethod
    def subscribe_signals(
        self,
        path: str,
        interface: str,
        member: Optional[str] = None,
        transform: Optional[SignalTransform] = None,
    ) -> SignalChannel:
        """Register for *interface* signals emitted by *path*.

        Cancelling the returned channel unregisters it.
        """

    @abstractmethod
    def unsubscribe(self, channel: SignalChannel) -> None:
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Drop every subscription and release the connection.  Never raises."""


class Transport(ABC):
    """Factory for connections on one bus.

    Also owns the :class:`ObjectManager` instances shared by every proxy
    created on this transport.
    """

    bus_name = ""

    def __init__(self):
        self._object_managers: Dict[str, Any] = {}
        self._om_lock = threading.Lock()

    @abstractmethod
    def connect(self, service: str, path: str) -> Connection:
        ...

    def object_manager(self, service: str):
        from simaccess.dbuslayer.object_manager import ObjectManager

        with self._om_lock:
            manager = self._object_managers.get(service)
            if manager is None:
                manager = ObjectManager(self, service)
                self._object_managers[service] = manager
            return manager
