"""Checked wrapper for dynamically typed property values."""

from __future__ import annotations

import types
import typing
from typing import Any, Dict, List, Union

from simaccess.core.errors import TypeMismatchError

__all__ = ["Variant", "expect_type", "kind_of"]

# PEP 604 unions (``X | None``), Python 3.10+
_UnionType = getattr(types, "UnionType", None)

_KINDS = (
    (bool, "bool"),
    (int, "int"),
    (float, "float"),
    (str, "str"),
    ((bytes, bytearray), "bytes"),
    ((list, tuple), "list"),
    (dict, "dict"),
)


def kind_of(value: Any) -> str:
    if value is None:
        return "none"
    # bool before int: bool is an int subclass
    for candidates, kind in _KINDS:
        if isinstance(value, candidates):
            return kind
    return type(value).__name__


def _type_name(expected: Any) -> str:
    if isinstance(expected, type):
        return expected.__name__
    return str(expected).replace("typing.", "")


def _is_union(origin: Any) -> bool:
    return origin is Union or (_UnionType is not None and origin is _UnionType)


def expect_type(name: str, value: Any, expected: Any) -> Any:
    """Return *value* if it matches the *expected* type hint, else raise.

    ``bool`` never satisfies ``int`` and ``int`` is accepted for ``float``.
    ``Optional``/``Union`` try each member in turn; ``List[X]`` and
    ``Dict[K, V]`` check the container and then every element.
    """
    if expected is Any:
        return value
    origin = typing.get_origin(expected)
    if _is_union(origin):
        for member in typing.get_args(expected):
            if member is type(None):
                if value is None:
                    return None
                continue
            try:
                return expect_type(name, value, member)
            except TypeMismatchError:
                continue
        raise TypeMismatchError(name, _type_name(expected), value)
    if origin is not None:
        return _expect_container(name, value, expected, origin)

    if expected is int and isinstance(value, bool):
        raise TypeMismatchError(name, "int", value)
    if expected is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, expected):
        raise TypeMismatchError(name, _type_name(expected), value)
    return value


def _expect_container(name: str, value: Any, expected: Any, origin: Any) -> Any:
    args = typing.get_args(expected)
    if origin is list:
        # bus arrays may arrive as tuples
        if not isinstance(value, (list, tuple)):
            raise TypeMismatchError(name, _type_name(expected), value)
        if not args:
            return list(value)
        return [expect_type(f"{name}[{i}]", item, args[0]) for i, item in enumerate(value)]
    if origin is dict:
        if not isinstance(value, dict):
            raise TypeMismatchError(name, _type_name(expected), value)
        if not args:
            return dict(value)
        key_type, value_type = args
        return {
            expect_type(f"{name} key", k, key_type): expect_type(f"{name}[{k!r}]", v, value_type)
            for k, v in value.items()
        }
    if isinstance(origin, type) and not isinstance(value, origin):
        raise TypeMismatchError(name, _type_name(expected), value)
    return value


class Variant:
    """A property value tagged with its kind.

    The ``as_*`` accessors return the value when the kind matches and raise
    :class:`TypeMismatchError` otherwise; they never coerce (no ``bool("no")``).
    """

    __slots__ = ("name", "value", "kind")

    def __init__(self, value: Any, name: str = ""):
        self.name = name
        self.value = value
        self.kind = kind_of(value)

    def __repr__(self) -> str:
        return f"Variant({self.name!r}, {self.kind}, {self.value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Variant):
            return self.kind == other.kind and self.value == other.value
        return NotImplemented

    def __hash__(self):
        return hash((self.kind, repr(self.value)))

    def as_type(self, expected: type) -> Any:
        return expect_type(self.name, self.value, expected)

    def as_bool(self) -> bool:
        return self.as_type(bool)

    def as_int(self) -> int:
        return self.as_type(int)

    def as_float(self) -> float:
        return self.as_type(float)

    def as_str(self) -> str:
        return self.as_type(str)

    def as_bytes(self) -> bytes:
        if self.kind != "bytes":
            raise TypeMismatchError(self.name, "bytes", self.value)
        return bytes(self.value)

    def as_list(self) -> List[Any]:
        if self.kind != "list":
            raise TypeMismatchError(self.name, "list", self.value)
        return list(self.value)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.as_type(dict))
