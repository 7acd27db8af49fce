"""Wrapper for the org.bluez.SimAccess1 interface.

BlueZ exposes the Sim Access Profile server state on the adapter object
(``/org/bluez/hci0``).  The interface has one property, ``Connected``, telling
whether a SAP client is attached, and one method, ``Disconnect``, which
drops that client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from simaccess.bt_ref.constants import (
    ADAPTER_NAME,
    BLUEZ_NAMESPACE,
    SIM_ACCESS_INTERFACE,
)
from simaccess.core.log import print_and_log, LOG__DEBUG, LOG__GENERAL
from simaccess.dbuslayer.proxy import Properties, RemoteObjectProxy
from simaccess.dbuslayer.transport import Transport

__all__ = ["SimAccess", "SimAccessProperties"]


@dataclass
class SimAccessProperties(Properties):
    # Indicates if SAP client is connected to the server.
    Connected: bool = False


class SimAccess(RemoteObjectProxy):
    """Sim Access Profile hierarchy."""

    INTERFACE = SIM_ACCESS_INTERFACE
    properties_class = SimAccessProperties

    @classmethod
    def for_adapter(
        cls, adapter: str = ADAPTER_NAME, transport: Optional[Transport] = None
    ) -> "SimAccess":
        """Bind to *adapter* given as a name (``hci0``) or a full object path."""
        path = adapter if adapter.startswith("/") else f"{BLUEZ_NAMESPACE}{adapter}"
        return cls(path, transport=transport)

    def get_connected(self) -> bool:
        """Read ``Connected`` from the remote object (not from the snapshot)."""
        return self.get_property("Connected").as_bool()

    def disconnect(self) -> None:
        """Disconnect the SAP client from the server.

        Raises :class:`OperationFailed` on ``org.bluez.Error.Failed``.
        """
        print_and_log(f"[DEBUG] SimAccess1.Disconnect on {self.path}", LOG__DEBUG)
        self.call("Disconnect")
        print_and_log(f"[+] SAP client disconnected on {self.path}", LOG__GENERAL)
