"""
Bus and BlueZ constants for simaccess.

Interface names, signal names and the integer result codes carried by
:class:`simaccess.core.errors.SimAccessError`.
"""

# D-Bus Core Constants
DBUS_PROPERTIES = "org.freedesktop.DBus.Properties"
DBUS_OM_IFACE = "org.freedesktop.DBus.ObjectManager"

PROPERTIES_CHANGED_SIGNAL = "PropertiesChanged"
INTERFACES_ADDED_SIGNAL = "InterfacesAdded"
INTERFACES_REMOVED_SIGNAL = "InterfacesRemoved"

# BlueZ Core Constants
ADAPTER_NAME = "hci0"
BLUEZ_SERVICE_NAME = "org.bluez"
BLUEZ_NAMESPACE = "/org/bluez/"
BLUEZ_OM_PATH = "/"

# Sim Access Profile
SIM_ACCESS_INTERFACE = BLUEZ_SERVICE_NAME + ".SimAccess1"

# Result/Error Codes
RESULT_OK = 0
RESULT_ERR = 1
RESULT_ERR_NOT_CONNECTED = 2
RESULT_ERR_NOT_SUPPORTED = 3
RESULT_ERR_WRONG_STATE = 5
RESULT_ERR_ACCESS_DENIED = 6
RESULT_EXCEPTION = 7
RESULT_ERR_BAD_ARGS = 8
RESULT_ERR_NOT_FOUND = 9
RESULT_ERR_NO_REPLY = 14
RESULT_ERR_UNKNOWN_SERVCE = 17
RESULT_ERR_UNKNOWN_OBJECT = 18
RESULT_ERR_METHOD_CALL_FAIL = 21
RESULT_ERR_TYPE_MISMATCH = 27
RESULT_ERR_CLOSED = 28
