"""
D-Bus layer for simaccess.

The dbus-python transport (:mod:`simaccess.dbuslayer.system_bus`) is not
imported here so the proxy classes can be used with other transports
without dbus-python / GLib loaded.
"""

from .channel import ObjectManagerEvent, PropertyChanged, SignalChannel
from .proxy import ObjectIdentity, Properties, ProxyState, RemoteObjectProxy
from .sim_access import SimAccess, SimAccessProperties
from .transport import Connection, RawSignal, Transport
from .variant import Variant

__all__ = [
    "Connection",
    "ObjectIdentity",
    "ObjectManagerEvent",
    "Properties",
    "PropertyChanged",
    "ProxyState",
    "RawSignal",
    "RemoteObjectProxy",
    "SignalChannel",
    "SimAccess",
    "SimAccessProperties",
    "Transport",
    "Variant",
]
