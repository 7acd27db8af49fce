"""Shared subscription to ``org.freedesktop.DBus.ObjectManager`` signals.

One :class:`ObjectManager` exists per (transport, service).  It opens its bus
connection when the first channel registers and releases it when the last
registered channel leaves, so any number of proxies can watch objects
appear and vanish without each keeping a connection of its own.
"""

from __future__ import annotations

import threading
from typing import Iterator, List, Optional, Set

from simaccess.bt_ref.constants import (
    BLUEZ_OM_PATH,
    DBUS_OM_IFACE,
    INTERFACES_ADDED_SIGNAL,
    INTERFACES_REMOVED_SIGNAL,
)
from simaccess.core.log import print_and_log, LOG__DEBUG
from simaccess.dbuslayer.channel import (
    INTERFACES_ADDED,
    INTERFACES_REMOVED,
    ObjectManagerEvent,
    SignalChannel,
)
from simaccess.dbuslayer.transport import Connection, RawSignal

__all__ = ["ObjectManager", "object_manager_events"]


def object_manager_events(signal: RawSignal) -> Iterator[ObjectManagerEvent]:
    """Translate InterfacesAdded/InterfacesRemoved into events."""
    if signal.member == INTERFACES_ADDED_SIGNAL and len(signal.args) >= 2:
        path, interfaces = signal.args[0], signal.args[1]
        yield ObjectManagerEvent(INTERFACES_ADDED, str(path), dict(interfaces))
    elif signal.member == INTERFACES_REMOVED_SIGNAL and len(signal.args) >= 2:
        path, names = signal.args[0], signal.args[1]
        yield ObjectManagerEvent(INTERFACES_REMOVED, str(path), {n: {} for n in names})


class ObjectManager:
    def __init__(self, transport, service: str, path: str = BLUEZ_OM_PATH):
        self._transport = transport
        self.service = service
        self.path = path
        self._connection: Optional[Connection] = None
        self._channels: Set[SignalChannel] = set()
        self._lock = threading.Lock()

    @property
    def holders(self) -> int:
        return len(self._channels)

    @property
    def active(self) -> bool:
        return self._connection is not None

    def register(self) -> SignalChannel:
        """Return a new channel of :class:`ObjectManagerEvent`.

        Raises :class:`TransportError` when the connection cannot be opened
        or the subscription is refused.
        """
        with self._lock:
            opened = False
            if self._connection is None:
                self._connection = self._transport.connect(self.service, self.path)
                opened = True
                print_and_log(
                    f"[*] ObjectManager connection opened for {self.service}", LOG__DEBUG
                )
            try:
                channel = self._connection.subscribe_signals(
                    self.path, DBUS_OM_IFACE, transform=object_manager_events
                )
            except Exception:
                if opened and not self._channels:
                    self._connection.disconnect()
                    self._connection = None
                raise
            self._channels.add(channel)

        channel.on_cancel(lambda: self.unregister(channel))
        return channel

    def unregister(self, channel: SignalChannel) -> bool:
        """Drop *channel*.  Unknown or already dropped channels are ignored."""
        with self._lock:
            if channel not in self._channels:
                return False
            self._channels.discard(channel)
            connection: Optional[Connection] = None
            if not self._channels:
                connection, self._connection = self._connection, None

        channel.cancel()
        if connection is not None:
            connection.disconnect()
            print_and_log(
                f"[*] ObjectManager connection released for {self.service}", LOG__DEBUG
            )
        return True

    def close(self) -> None:
        """Cancel every registered channel."""
        with self._lock:
            channels: List[SignalChannel] = list(self._channels)
        for channel in channels:
            self.unregister(channel)
