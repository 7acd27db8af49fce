"""Core error classes for simaccess."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from simaccess.bt_ref.constants import (
    RESULT_ERR,
    RESULT_ERR_ACCESS_DENIED,
    RESULT_ERR_BAD_ARGS,
    RESULT_ERR_CLOSED,
    RESULT_ERR_METHOD_CALL_FAIL,
    RESULT_ERR_NO_REPLY,
    RESULT_ERR_NOT_CONNECTED,
    RESULT_ERR_NOT_SUPPORTED,
    RESULT_ERR_TYPE_MISMATCH,
    RESULT_ERR_UNKNOWN_OBJECT,
    RESULT_ERR_UNKNOWN_SERVCE,
)

if TYPE_CHECKING:  # pragma: no cover
    import dbus.exceptions


class SimAccessError(Exception):
    """Base exception for everything simaccess raises.

    The `.code` attribute carries one of the ``RESULT_*`` values from
    :mod:`simaccess.bt_ref.constants`.
    """

    def __init__(self, message: str, code: int = RESULT_ERR):
        super().__init__(message)
        self.code = code


class TransportError(SimAccessError):
    """The bus call could not complete (unreachable, unknown object, denied)."""

    def __init__(
        self,
        operation: str,
        reason: Optional[str] = None,
        code: int = RESULT_ERR_METHOD_CALL_FAIL,
        dbus_name: Optional[str] = None,
    ):
        msg = f"{operation} failed"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, code)
        self.operation = operation
        self.reason = reason
        self.dbus_name = dbus_name


class TypeMismatchError(SimAccessError):
    """A remote value does not have the type a typed accessor expects."""

    def __init__(self, name: str, expected: str, actual: object):
        super().__init__(
            f"Property {name}: expected {expected}, got {type(actual).__name__} ({actual!r})",
            RESULT_ERR_TYPE_MISMATCH,
        )
        self.name = name
        self.expected = expected
        self.actual = actual


class OperationFailed(SimAccessError):
    """The remote side reported org.bluez.Error.Failed for a method call."""

    def __init__(self, method: str, reason: Optional[str] = None):
        msg = f"{method} failed on remote side"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, RESULT_ERR)
        self.method = method
        self.reason = reason


class ClosedError(SimAccessError):
    """Operation attempted on a proxy after close()."""

    def __init__(self, path: str, operation: str):
        super().__init__(f"{operation} on closed proxy {path}", RESULT_ERR_CLOSED)
        self.path = path
        self.operation = operation


# D-Bus error names -> result codes
DBUS_ERROR_CODES = {
    "org.freedesktop.DBus.Error.AccessDenied": RESULT_ERR_ACCESS_DENIED,
    "org.freedesktop.DBus.Error.InvalidArgs": RESULT_ERR_BAD_ARGS,
    "org.freedesktop.DBus.Error.NoReply": RESULT_ERR_NO_REPLY,
    "org.freedesktop.DBus.Error.Timeout": RESULT_ERR_NO_REPLY,
    "org.freedesktop.DBus.Error.ServiceUnknown": RESULT_ERR_UNKNOWN_SERVCE,
    "org.freedesktop.DBus.Error.NameHasNoOwner": RESULT_ERR_UNKNOWN_SERVCE,
    "org.freedesktop.DBus.Error.UnknownObject": RESULT_ERR_UNKNOWN_OBJECT,
    "org.freedesktop.DBus.Error.UnknownInterface": RESULT_ERR_UNKNOWN_OBJECT,
    "org.freedesktop.DBus.Error.UnknownMethod": RESULT_ERR_NOT_SUPPORTED,
    "org.freedesktop.DBus.Error.UnknownProperty": RESULT_ERR_BAD_ARGS,
    "org.freedesktop.DBus.Error.PropertyReadOnly": RESULT_ERR_ACCESS_DENIED,
    "org.freedesktop.DBus.Error.NoServer": RESULT_ERR_NOT_CONNECTED,
    "org.freedesktop.DBus.Error.Disconnected": RESULT_ERR_NOT_CONNECTED,
    "org.bluez.Error.NotSupported": RESULT_ERR_NOT_SUPPORTED,
    "org.bluez.Error.NotPermitted": RESULT_ERR_ACCESS_DENIED,
    "org.bluez.Error.NotAuthorized": RESULT_ERR_ACCESS_DENIED,
    "org.bluez.Error.InvalidArguments": RESULT_ERR_BAD_ARGS,
}

BLUEZ_FAILED = "org.bluez.Error.Failed"


def map_dbus_error(
    exc: "dbus.exceptions.DBusException", operation: str, method_call: bool = False
) -> SimAccessError:
    """Return the SimAccessError matching a D-Bus exception.

    For a *method_call*, ``org.bluez.Error.Failed`` is reported as a domain
    failure (:class:`OperationFailed`).  Every other case is a
    :class:`TransportError`.
    """
    name = exc.get_dbus_name() or ""
    msg = exc.get_dbus_message() or str(exc)

    if method_call and name == BLUEZ_FAILED:
        return OperationFailed(operation, msg)
    return TransportError(
        operation,
        f"{name}: {msg}" if name else msg,
        DBUS_ERROR_CODES.get(name, RESULT_ERR_METHOD_CALL_FAIL),
        dbus_name=name or None,
    )


__all__ = [
    "SimAccessError",
    "TransportError",
    "TypeMismatchError",
    "OperationFailed",
    "ClosedError",
    "DBUS_ERROR_CODES",
    "map_dbus_error",
]
