"""dbus-python transport.

Signals are dispatched by the GLib main loop; callers that want property
change or ObjectManager events delivered must run ``GLib.MainLoop()`` (the
CLI ``monitor`` command does).  Channels themselves are thread-safe, so the
loop may run in a background thread while another thread drains them.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Optional

import dbus
import dbus.exceptions
import dbus.mainloop.glib

from simaccess.bt_ref.constants import DBUS_PROPERTIES
from simaccess.bt_ref.utils import dbus_to_python
from simaccess.core.errors import map_dbus_error
from simaccess.core.log import print_and_log, LOG__DEBUG
from simaccess.dbuslayer.channel import SignalChannel
from simaccess.dbuslayer.transport import (
    Connection,
    RawSignal,
    SignalTransform,
    Transport,
)

# Initialize GLib mainloop for signal dispatch if not already done
dbus.mainloop.glib.DBusGMainLoop(set_as_default=True)

__all__ = ["SystemBusTransport", "DBusConnection", "default_transport", "to_dbus"]


def to_dbus(value: Any) -> Any:
    """Wrap plain Python values whose bus type would otherwise be guessed wrong."""
    if isinstance(value, bool):
        return dbus.Boolean(value)
    if isinstance(value, (bytes, bytearray)):
        return dbus.Array([dbus.Byte(b) for b in value], signature="y")
    return value


class DBusConnection(Connection):
    def __init__(self, bus: dbus.Bus, service: str, path: str, owns_bus: bool = False):
        super().__init__(service, path)
        self._bus = bus
        self._owns_bus = owns_bus
        self._matches: Dict[SignalChannel, Any] = {}
        self._lock = threading.Lock()
        try:
            self._object = bus.get_object(service, path, introspect=False)
            self._properties = dbus.Interface(self._object, DBUS_PROPERTIES)
        except dbus.exceptions.DBusException as e:
            raise map_dbus_error(e, f"Connect {service} {path}")

    def call_method(self, interface: str, method: str, *args: Any) -> Any:
        print_and_log(f"[DEBUG] {self.path} {interface}.{method}{args}", LOG__DEBUG)
        try:
            result = self._object.get_dbus_method(method, interface)(
                *[to_dbus(a) for a in args]
            )
        except dbus.exceptions.DBusException as e:
            raise map_dbus_error(e, f"{interface}.{method}", method_call=True)
        return dbus_to_python(result)

    def get_property(self, interface: str, name: str) -> Any:
        try:
            value = self._properties.Get(interface, name)
        except dbus.exceptions.DBusException as e:
            raise map_dbus_error(e, f"Get {interface}.{name}")
        return dbus_to_python(value)

    def get_all_properties(self, interface: str) -> Dict[str, Any]:
        try:
            props = self._properties.GetAll(interface)
        except dbus.exceptions.DBusException as e:
            raise map_dbus_error(e, f"GetAll {interface}")
        return dbus_to_python(props)

    def set_property(self, interface: str, name: str, value: Any) -> None:
        try:
            self._properties.Set(interface, name, to_dbus(value))
        except dbus.exceptions.DBusException as e:
            raise map_dbus_error(e, f"Set {interface}.{name}")

    def subscribe_signals(
        self,
        path: str,
        interface: str,
        member: Optional[str] = None,
        transform: Optional[SignalTransform] = None,
    ) -> SignalChannel:
        channel = SignalChannel(f"{path} {interface}")

        def _handler(*args, **kwargs):
            raw = RawSignal(
                path=str(kwargs.get("path", path)),
                interface=str(kwargs.get("interface", interface)),
                member=str(kwargs.get("member", member or "")),
                args=tuple(dbus_to_python(a) for a in args),
            )
            events = transform(raw) if transform else (raw,)
            for event in events:
                channel.push(event)

        try:
            match = self._bus.add_signal_receiver(
                _handler,
                signal_name=member,
                dbus_interface=interface,
                bus_name=self.service,
                path=path,
                path_keyword="path",
                member_keyword="member",
                interface_keyword="interface",
            )
        except dbus.exceptions.DBusException as e:
            raise map_dbus_error(e, f"Subscribe {interface} on {path}")

        with self._lock:
            self._matches[channel] = match
        channel.on_cancel(lambda: self.unsubscribe(channel))
        print_and_log(f"[DEBUG] Subscribed {interface} signals on {path}", LOG__DEBUG)
        return channel

    def unsubscribe(self, channel: SignalChannel) -> None:
        with self._lock:
            match = self._matches.pop(channel, None)
        if match is not None:
            try:
                match.remove()
            except Exception as e:
                print_and_log(f"[-] Removing signal match failed: {e}", LOG__DEBUG)
        channel.cancel()

    def disconnect(self) -> None:
        with self._lock:
            channels = list(self._matches)
        for channel in channels:
            self.unsubscribe(channel)
        if self._owns_bus:
            try:
                self._bus.close()
            except Exception as e:
                print_and_log(f"[-] Error closing D-Bus connection: {e}", LOG__DEBUG)


class SystemBusTransport(Transport):
    """Transport over the system bus (or any bus *bus_factory* returns).

    With ``private=True`` (the default) every connection gets its own bus
    connection, closed again by :meth:`DBusConnection.disconnect`.
    """

    bus_name = "system"

    def __init__(
        self,
        bus_factory: Optional[Callable[..., dbus.Bus]] = None,
        private: bool = True,
    ):
        super().__init__()
        self._bus_factory = bus_factory or dbus.SystemBus
        self._private = private
        if bus_factory is dbus.SessionBus:
            self.bus_name = "session"

    def connect(self, service: str, path: str) -> DBusConnection:
        try:
            bus = self._bus_factory(private=True) if self._private else self._bus_factory()
        except dbus.exceptions.DBusException as e:
            raise map_dbus_error(e, f"Connect to {self.bus_name} bus")
        try:
            return DBusConnection(bus, service, path, owns_bus=self._private)
        except Exception:
            if self._private:
                bus.close()
            raise


_default_transport: Optional[SystemBusTransport] = None
_default_lock = threading.Lock()


def default_transport() -> SystemBusTransport:
    """Return the process-wide system bus transport, creating it on first use."""
    global _default_transport
    with _default_lock:
        if _default_transport is None:
            _default_transport = SystemBusTransport()
        return _default_transport
