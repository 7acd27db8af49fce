"""
Bus value helpers.
"""

import dbus

__all__ = [
    "dbus_to_python",
]


def dbus_to_python(data):
    if isinstance(data, (dbus.String, dbus.ObjectPath, dbus.Signature)):
        data = str(data)
    elif isinstance(data, dbus.Boolean):
        data = bool(data)
    elif isinstance(
        data,
        (
            dbus.Int64,
            dbus.Int32,
            dbus.Int16,
            dbus.UInt64,
            dbus.UInt32,
            dbus.UInt16,
            dbus.Byte,
        ),
    ):
        data = int(data)
    elif isinstance(data, dbus.Double):
        data = float(data)
    elif isinstance(data, dbus.ByteArray):
        data = bytes(data)
    elif isinstance(data, (dbus.Array, dbus.Struct)):
        data = [dbus_to_python(value) for value in data]
    elif isinstance(data, dbus.Dictionary):
        new_data = dict()
        for key in data.keys():
            new_data[dbus_to_python(key)] = dbus_to_python(data[key])
        data = new_data
    return data
