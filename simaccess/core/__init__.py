"""
Core package initialisation for simaccess.

Kept lightweight: only the error taxonomy is re-exported here.
"""

from simaccess.core.errors import (
    SimAccessError,
    TransportError,
    TypeMismatchError,
    OperationFailed,
    ClosedError,
)

__all__ = [
    "SimAccessError",
    "TransportError",
    "TypeMismatchError",
    "OperationFailed",
    "ClosedError",
]
