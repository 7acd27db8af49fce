"""Tests for the shared ObjectManager subscription."""

import pytest

from simaccess.bt_ref.constants import (
    DBUS_OM_IFACE,
    INTERFACES_ADDED_SIGNAL,
    INTERFACES_REMOVED_SIGNAL,
    SIM_ACCESS_INTERFACE,
)
from simaccess.core.errors import TransportError
from simaccess.dbuslayer.channel import (
    INTERFACES_ADDED,
    INTERFACES_REMOVED,
    ObjectManagerEvent,
)
from simaccess.dbuslayer.object_manager import ObjectManager
from simaccess.dbuslayer.sim_access import SimAccess

from fakes import ADAPTER_PATH


@pytest.fixture
def second(transport):
    proxy = SimAccess(ADAPTER_PATH, transport=transport)
    yield proxy
    proxy.close()


def test_subscribe_returns_same_channel_until_cancelled(sap):
    channel, cancel = sap.subscribe_object_manager()
    again, _ = sap.subscribe_object_manager()
    assert again is channel
    cancel()
    assert channel.closed


def test_events_are_delivered(bus, sap):
    channel, cancel = sap.subscribe_object_manager()

    bus.emit(
        "/", DBUS_OM_IFACE, INTERFACES_ADDED_SIGNAL,
        "/org/bluez/hci1", {SIM_ACCESS_INTERFACE: {"Connected": False}},
    )
    bus.emit("/", DBUS_OM_IFACE, INTERFACES_REMOVED_SIGNAL, "/org/bluez/hci1", [SIM_ACCESS_INTERFACE])

    assert channel.get(timeout=1) == ObjectManagerEvent(
        INTERFACES_ADDED, "/org/bluez/hci1", {SIM_ACCESS_INTERFACE: {"Connected": False}}
    )
    assert channel.get(timeout=1) == ObjectManagerEvent(
        INTERFACES_REMOVED, "/org/bluez/hci1", {SIM_ACCESS_INTERFACE: {}}
    )
    cancel()


def test_proxies_share_one_connection(transport, sap, second):
    manager = transport.object_manager("org.bluez")
    first_channel, cancel_first = sap.subscribe_object_manager()
    second_channel, cancel_second = second.subscribe_object_manager()

    assert first_channel is not second_channel
    assert manager.holders == 2
    om_connections = [c for c in transport.connections if c.path == "/"]
    assert len(om_connections) == 1

    cancel_first()
    assert manager.active
    assert not second_channel.closed

    cancel_second()
    assert not manager.active
    assert om_connections[0].disconnected


def test_cancel_twice_is_harmless(transport, sap):
    channel, cancel = sap.subscribe_object_manager()
    cancel()
    cancel()
    assert transport.object_manager("org.bluez").holders == 0


def test_cancel_after_close_is_harmless(transport, sap):
    _, cancel = sap.subscribe_object_manager()
    sap.close()
    cancel()
    assert not transport.object_manager("org.bluez").active


def test_cancelling_channel_directly_unregisters(transport, sap):
    channel, _ = sap.subscribe_object_manager()
    channel.cancel()
    assert transport.object_manager("org.bluez").holders == 0
    fresh, cancel = sap.subscribe_object_manager()
    assert fresh is not channel
    cancel()


def test_manager_is_reused_per_service(transport):
    assert transport.object_manager("org.bluez") is transport.object_manager("org.bluez")
    assert transport.object_manager("org.bluez") is not transport.object_manager("org.other")


def test_register_failure_leaves_manager_inactive(transport):
    transport.fail_connect = True
    manager = ObjectManager(transport, "org.bluez")
    with pytest.raises(TransportError):
        manager.register()
    assert not manager.active
