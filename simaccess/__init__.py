"""
simaccess - typed access to the BlueZ Sim Access Profile client over D-Bus
"""

__version__ = "0.3.0"

# ---------------------------------------------------------------------------
# Initialise logging on *package import* so every code path (even when the
# CLI is not used) writes to the same log files.
# ---------------------------------------------------------------------------
import importlib as _importlib

_importlib.import_module("simaccess.core.log")  # noqa: F401 – side-effect import


# Lazy-load the proxy classes so importing the package does not pull in
# dbus-python / GLib.
def __getattr__(name):
    if name == "SimAccess":
        from .dbuslayer.sim_access import SimAccess
        return SimAccess
    if name == "RemoteObjectProxy":
        from .dbuslayer.proxy import RemoteObjectProxy
        return RemoteObjectProxy
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
