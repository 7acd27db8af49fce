"""
Pytest configuration and fixtures.

The fixtures build a SimAccess proxy on the in-memory bus from fakes.py, so
no BlueZ daemon or system bus is needed.
"""

import os
import sys
import tempfile

# Keep log/config files out of the user's home before simaccess is imported.
_TMP_ROOT = tempfile.mkdtemp(prefix="simaccess-tests-")
os.environ.setdefault("SIMACCESS_DATA_DIR", os.path.join(_TMP_ROOT, "data"))
os.environ.setdefault("SIMACCESS_CONFIG_DIR", os.path.join(_TMP_ROOT, "config"))

_HERE = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.dirname(_HERE))
sys.path.insert(0, _HERE)

import pytest

from simaccess.bt_ref.constants import DBUS_OM_IFACE, SIM_ACCESS_INTERFACE

from fakes import ADAPTER_PATH, FakeBus, FakeTransport


@pytest.fixture
def bus():
    fake = FakeBus()
    fake.add_object(ADAPTER_PATH, SIM_ACCESS_INTERFACE, {"Connected": True})
    fake.methods[(ADAPTER_PATH, SIM_ACCESS_INTERFACE, "Disconnect")] = lambda: None
    fake.add_object("/", DBUS_OM_IFACE, {})
    return fake


@pytest.fixture
def transport(bus):
    return FakeTransport(bus)


@pytest.fixture
def sap(transport):
    from simaccess.dbuslayer.sim_access import SimAccess

    proxy = SimAccess(ADAPTER_PATH, transport=transport)
    yield proxy
    proxy.close()
