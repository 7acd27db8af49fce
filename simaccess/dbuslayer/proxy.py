"""Generic proxy for one interface of one remote bus object.

:class:`RemoteObjectProxy` binds ``(service, interface, path)`` to a typed
property snapshot and forwards property access and method calls through a
:class:`~simaccess.dbuslayer.transport.Transport`.  Interface bindings such
as :class:`~simaccess.dbuslayer.sim_access.SimAccess` subclass it and set
``INTERFACE`` and ``properties_class``.

The snapshot is only rebuilt by :meth:`RemoteObjectProxy.refresh_properties`.
Writes and property change signals leave it untouched; callers that need
fresh values refresh explicitly.
"""

from __future__ import annotations

import copy
import dataclasses
import enum
import threading
import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Type, TypeVar

from simaccess.bt_ref.constants import (
    BLUEZ_SERVICE_NAME,
    DBUS_PROPERTIES,
    PROPERTIES_CHANGED_SIGNAL,
)
from simaccess.core.errors import ClosedError
from simaccess.core.log import get_logger, print_and_log, LOG__DEBUG
from simaccess.core.rwlock import RWLock
from simaccess.dbuslayer.channel import PropertyChanged, SignalChannel
from simaccess.dbuslayer.transport import Connection, RawSignal, Transport
from simaccess.dbuslayer.variant import Variant, expect_type

__all__ = [
    "ObjectIdentity",
    "ProxyState",
    "Properties",
    "RemoteObjectProxy",
]

logger = get_logger(__name__)

P = TypeVar("P", bound="Properties")


@dataclass(frozen=True)
class ObjectIdentity:
    service: str
    interface: str
    path: str


class ProxyState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CLOSED = "closed"


@dataclass
class Properties:
    """Base class for typed property snapshots.

    Subclasses are dataclasses whose field names are the remote property
    names and whose annotations are the expected Python types.  Parameterized
    hints such as ``List[str]``, ``Dict[str, Any]`` and ``Optional[int]`` are
    checked element by element.
    """

    @classmethod
    def _field_types(cls) -> Dict[str, Any]:
        hints = typing.get_type_hints(cls)
        return {f.name: hints[f.name] for f in dataclasses.fields(cls)}

    @classmethod
    def from_map(cls: Type[P], props: Mapping[str, Any]) -> P:
        """Build a snapshot from a name -> value mapping.

        Unknown names are ignored, missing names keep their defaults and a
        value of the wrong type raises :class:`TypeMismatchError`.
        """
        values = {}
        for name, expected in cls._field_types().items():
            if name in props:
                values[name] = expect_type(name, props[name], expected)
        return cls(**values)

    @classmethod
    def from_dbus_map(cls: Type[P], props: Mapping[str, Any]) -> P:
        """Like :meth:`from_map` but accepts raw bus values or Variants."""
        from simaccess.bt_ref.utils import dbus_to_python

        plain = {}
        for name, value in props.items():
            if isinstance(value, Variant):
                value = value.value
            plain[str(name)] = dbus_to_python(value)
        return cls.from_map(plain)

    def to_map(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


class RemoteObjectProxy:
    """Typed, lock-guarded access to one remote object interface."""

    SERVICE = BLUEZ_SERVICE_NAME
    INTERFACE = ""
    properties_class: Type[Properties] = Properties

    def __init__(
        self,
        object_path: str,
        transport: Optional[Transport] = None,
        service: Optional[str] = None,
        interface: Optional[str] = None,
    ):
        self._identity = ObjectIdentity(
            service or self.SERVICE, interface or self.INTERFACE, str(object_path)
        )
        self._state = ProxyState.UNINITIALIZED
        self._state_lock = threading.Lock()
        self._props_lock = RWLock()
        self._signal_lock = threading.Lock()
        self._properties_signal: Optional[SignalChannel] = None
        self._object_manager_signal: Optional[SignalChannel] = None

        if transport is None:
            from simaccess.dbuslayer.system_bus import default_transport

            transport = default_transport()
        self._transport = transport
        self._properties = self.properties_class()

        self._client: Connection = transport.connect(
            self._identity.service, self._identity.path
        )
        try:
            self._fetch_properties()
        except Exception:
            self._client.disconnect()
            raise
        self._state = ProxyState.READY
        print_and_log(
            f"[*] Proxy ready for {self._identity.interface} at {self._identity.path}",
            LOG__DEBUG,
        )

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} {self._identity.interface} "
            f"{self._identity.path} {self._state.value}>"
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Identity & state
    # ------------------------------------------------------------------
    @property
    def identity(self) -> ObjectIdentity:
        return self._identity

    @property
    def path(self) -> str:
        return self._identity.path

    @property
    def interface(self) -> str:
        return self._identity.interface

    @property
    def state(self) -> ProxyState:
        return self._state

    @property
    def client(self) -> Connection:
        return self._client

    def _check_open(self, operation: str) -> None:
        if self._state is ProxyState.CLOSED:
            raise ClosedError(self._identity.path, operation)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    def _fetch_properties(self) -> Properties:
        with self._props_lock.write():
            props = self._client.get_all_properties(self._identity.interface)
            self._properties = self.properties_class.from_map(props)
            return copy.copy(self._properties)

    def refresh_properties(self) -> Properties:
        """Reload every property with one GetAll call and return the snapshot.

        On failure the previous snapshot stays cached and the error is raised.
        """
        self._check_open("refresh_properties")
        return self._fetch_properties()

    def read_properties(self) -> Properties:
        """Return a copy of the cached snapshot."""
        self._check_open("read_properties")
        with self._props_lock.read():
            return copy.copy(self._properties)

    @property
    def properties(self) -> Properties:
        return self.read_properties()

    def to_props(self) -> Properties:
        """Return the cached snapshot object itself, not a copy.

        Changes made to it show up in later reads until the next refresh
        replaces it.
        """
        self._check_open("to_props")
        with self._props_lock.read():
            return self._properties

    def get_property(self, name: str) -> Variant:
        self._check_open("get_property")
        return Variant(self._client.get_property(self._identity.interface, name), name)

    def set_property(self, name: str, value: Any) -> None:
        """Write one remote property.  The cached snapshot is not updated."""
        self._check_open("set_property")
        self._client.set_property(self._identity.interface, name, value)

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------
    def call(self, method: str, *args: Any) -> Any:
        self._check_open(method)
        return self._client.call_method(self._identity.interface, method, *args)

    # ------------------------------------------------------------------
    # Property change signals
    # ------------------------------------------------------------------
    def _property_events(self, signal: RawSignal) -> Iterator[PropertyChanged]:
        if len(signal.args) < 2 or signal.args[0] != self._identity.interface:
            return
        changed = signal.args[1] or {}
        invalidated = signal.args[2] if len(signal.args) > 2 else []
        for name, value in changed.items():
            yield PropertyChanged(signal.args[0], signal.path, name, value)
        for name in invalidated or []:
            yield PropertyChanged(signal.args[0], signal.path, name, None)

    def subscribe(self) -> SignalChannel:
        """Return the channel of :class:`PropertyChanged` events for this object.

        Repeated calls return the same channel until it is unsubscribed.
        """
        self._check_open("subscribe")
        with self._signal_lock:
            if self._properties_signal is None or self._properties_signal.closed:
                self._properties_signal = self._client.subscribe_signals(
                    self._identity.path,
                    DBUS_PROPERTIES,
                    PROPERTIES_CHANGED_SIGNAL,
                    transform=self._property_events,
                )
            return self._properties_signal

    def unsubscribe(self) -> None:
        with self._signal_lock:
            channel, self._properties_signal = self._properties_signal, None
        if channel is None:
            return
        try:
            self._client.unsubscribe(channel)
        except Exception as e:
            logger.warning(f"Unsubscribe from {self._identity.path} failed: {e}")
        channel.cancel()

    # ------------------------------------------------------------------
    # ObjectManager signals
    # ------------------------------------------------------------------
    def subscribe_object_manager(self) -> Tuple[SignalChannel, Callable[[], None]]:
        """Return ``(channel, cancel)`` for InterfacesAdded/Removed events.

        The underlying connection is shared with every other proxy on the
        same transport.  ``cancel`` drops this proxy's interest only and may
        be called any number of times.
        """
        self._check_open("subscribe_object_manager")
        manager = self._transport.object_manager(self._identity.service)
        with self._signal_lock:
            if self._object_manager_signal is None or self._object_manager_signal.closed:
                self._object_manager_signal = manager.register()
            channel = self._object_manager_signal

        def cancel() -> None:
            with self._signal_lock:
                if self._object_manager_signal is channel:
                    self._object_manager_signal = None
            manager.unregister(channel)

        return channel, cancel

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Drop subscriptions and release the connection.  Never raises."""
        with self._state_lock:
            if self._state is ProxyState.CLOSED:
                return
            self._state = ProxyState.CLOSED

        self.unsubscribe()
        with self._signal_lock:
            om_channel, self._object_manager_signal = self._object_manager_signal, None
        if om_channel is not None:
            try:
                self._transport.object_manager(self._identity.service).unregister(om_channel)
            except Exception as e:
                logger.warning(f"ObjectManager unregister failed: {e}")
        try:
            self._client.disconnect()
        except Exception as e:
            logger.warning(f"Disconnect from {self._identity.path} failed: {e}")
        print_and_log(f"[*] Proxy closed for {self._identity.path}", LOG__DEBUG)
