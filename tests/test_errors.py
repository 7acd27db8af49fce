"""Tests for D-Bus error mapping."""

import pytest

from simaccess.bt_ref.constants import (
    RESULT_ERR_ACCESS_DENIED,
    RESULT_ERR_METHOD_CALL_FAIL,
    RESULT_ERR_UNKNOWN_OBJECT,
    RESULT_ERR_UNKNOWN_SERVCE,
)
from simaccess.core.errors import (
    ClosedError,
    OperationFailed,
    SimAccessError,
    TransportError,
    map_dbus_error,
)


class _FakeDBusException(Exception):
    def __init__(self, name, message=""):
        super().__init__(message)
        self._name = name
        self._message = message

    def get_dbus_name(self):
        return self._name

    def get_dbus_message(self):
        return self._message


@pytest.mark.parametrize(
    "name, code",
    [
        ("org.freedesktop.DBus.Error.UnknownObject", RESULT_ERR_UNKNOWN_OBJECT),
        ("org.freedesktop.DBus.Error.ServiceUnknown", RESULT_ERR_UNKNOWN_SERVCE),
        ("org.freedesktop.DBus.Error.AccessDenied", RESULT_ERR_ACCESS_DENIED),
        ("org.example.Error.Strange", RESULT_ERR_METHOD_CALL_FAIL),
    ],
)
def test_transport_errors(name, code):
    err = map_dbus_error(_FakeDBusException(name, "details"), "GetAll")
    assert isinstance(err, TransportError)
    assert err.code == code
    assert err.dbus_name == name
    assert "details" in str(err)


def test_failed_method_call_is_operation_failed():
    err = map_dbus_error(
        _FakeDBusException("org.bluez.Error.Failed", "Not connected"),
        "org.bluez.SimAccess1.Disconnect",
        method_call=True,
    )
    assert isinstance(err, OperationFailed)
    assert err.reason == "Not connected"


def test_failed_property_read_is_transport_error():
    err = map_dbus_error(_FakeDBusException("org.bluez.Error.Failed", "x"), "Get")
    assert isinstance(err, TransportError)


def test_all_errors_share_base():
    assert issubclass(ClosedError, SimAccessError)
    assert ClosedError("/org/bluez/hci0", "get_property").path == "/org/bluez/hci0"
