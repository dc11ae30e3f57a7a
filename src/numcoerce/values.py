"""
Runtime value wrappers for the coercion engine.

Values wrap Python objects with a kind tag so the engine can dispatch on
the kind without inspecting Python types at coercion time.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Union
from enum import Enum

from .resources import ResourceHandle

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class Kind(Enum):
    """All value kinds the engine understands."""
    INT = "int"
    FLOAT = "float"
    NULL = "null"
    BOOL = "bool"
    STRING = "string"
    LIST = "list"
    OBJECT = "object"
    RESOURCE = "resource"


@dataclass(frozen=True)
class ObjectRef:
    """Opaque object identity. Carries a class name and nothing numeric."""
    class_name: str = "stdClass"
    object_id: int = 1

    def __str__(self) -> str:
        return f"{self.class_name}#{self.object_id}"


@dataclass(frozen=True)
class Value:
    """
    A runtime value with a kind tag.

    The `data` field holds the payload (int, float, bytes, tuple of Values,
    ObjectRef or ResourceHandle). The `kind` field never changes after
    construction.
    """
    data: Any
    kind: Kind

    def __repr__(self) -> str:
        return f"Value({self.data!r}, {self.kind.value})"

    @property
    def is_scalar(self) -> bool:
        return self.kind in (Kind.INT, Kind.FLOAT, Kind.NULL, Kind.BOOL, Kind.STRING)


# Convenience constructors

def int_val(n: int) -> Value:
    """Create an integer value. Must fit a signed 64-bit integer."""
    n = int(n)
    if n < INT64_MIN or n > INT64_MAX:
        raise ValueError(f"integer {n} out of 64-bit range")
    return Value(n, Kind.INT)


def float_val(x: float) -> Value:
    """Create a float value."""
    return Value(float(x), Kind.FLOAT)


def null_val() -> Value:
    """Create the null value."""
    return Value(None, Kind.NULL)


def bool_val(b: bool) -> Value:
    """Create a boolean value."""
    return Value(bool(b), Kind.BOOL)


def string_val(s: Union[str, bytes]) -> Value:
    """Create a string value. Text is stored as UTF-8 bytes."""
    if isinstance(s, str):
        s = s.encode("utf-8")
    return Value(bytes(s), Kind.STRING)


def list_val(items: Iterable[Value] = ()) -> Value:
    """Create a list value from Values."""
    items = tuple(items)
    for item in items:
        if not isinstance(item, Value):
            raise TypeError(f"list items must be Values, got {type(item).__name__}")
    return Value(items, Kind.LIST)


def object_val(class_name: str = "stdClass", object_id: int = 1) -> Value:
    """Create an opaque object value."""
    return Value(ObjectRef(class_name, object_id), Kind.OBJECT)


def resource_val(handle: Any) -> Value:
    """Create a resource value from a handle exposing an integer `id`."""
    if not isinstance(getattr(handle, "id", None), int):
        raise TypeError("resource handles must expose an integer 'id'")
    return Value(handle, Kind.RESOURCE)


def from_python(obj: Any) -> Value:
    """
    Classify a native Python object as a Value.

    Anything without a direct counterpart becomes an opaque object named
    after its class.
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return null_val()
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return bool_val(obj)
    if isinstance(obj, int):
        return int_val(obj)
    if isinstance(obj, float):
        return float_val(obj)
    if isinstance(obj, (str, bytes)):
        return string_val(obj)
    if isinstance(obj, (list, tuple)):
        return list_val(from_python(item) for item in obj)
    if isinstance(obj, ResourceHandle):
        return resource_val(obj)
    return object_val(type(obj).__name__, id(obj))
