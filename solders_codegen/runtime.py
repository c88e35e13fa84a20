"""
Runtime helpers used by generated methods.

Generated code imports this module lazily (inside each method body) so that
everything emitted for a class stays inside the class. The JSON helpers
compose recursively over field types: primitives, bytes, containers,
optionals and unions, literals, enums, and any class exposing
``to_json_value`` / ``from_json_value``.
"""

from __future__ import annotations

import enum
import json
import struct
import types
import typing
from collections.abc import Mapping, Sequence
from typing import Any


class DecodeError(ValueError):
    """Raised when JSON or binary data cannot be decoded into a type."""


def dumps(value: Any) -> str:
    """Serialize a JSON-compatible value, preserving key order."""
    return json.dumps(value, separators=(",", ":"))


def loads(raw: str | bytes, type_name: str) -> Any:
    """Parse JSON text, raising DecodeError on invalid input."""
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise DecodeError(f"{type_name}: invalid JSON: {e}") from e


def encode_json_value(value: Any) -> Any:
    """
    Convert a field value to a JSON-compatible value.

    Args:
        value: The value of a field

    Returns:
        A value made of dicts, lists, strings, numbers, booleans and None

    Raises:
        TypeError: If the value has no JSON representation
    """
    to_json_value = getattr(value, "to_json_value", None)
    if callable(to_json_value):
        return to_json_value()
    if isinstance(value, enum.Enum):
        return value.name
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, Mapping):
        return {str(k): encode_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_json_value(v) for v in value]
    raise TypeError(f"Object of type {type(value).__name__} has no JSON representation")


def decode_json_value(raw: Any, tp: Any, path: str) -> Any:
    """
    Convert a JSON value back into a value of the given type.

    Args:
        raw: The JSON value
        tp: The field type (a class or a typing construct)
        path: Location used in error messages (e.g. "Pubkey.raw")

    Returns:
        The decoded value

    Raises:
        DecodeError: If the value does not match the type
    """
    if tp is Any or tp is object:
        return raw
    if tp is None or tp is type(None):
        if raw is not None:
            raise DecodeError(f"{path}: expected null, got {_describe(raw)}")
        return None

    origin = typing.get_origin(tp)
    if origin is not None:
        return _decode_generic(raw, tp, origin, path)

    if tp is bool:
        if not isinstance(raw, bool):
            raise DecodeError(f"{path}: expected a boolean, got {_describe(raw)}")
        return raw
    if tp is int:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise DecodeError(f"{path}: expected an integer, got {_describe(raw)}")
        return raw
    if tp is float:
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise DecodeError(f"{path}: expected a number, got {_describe(raw)}")
        return float(raw)
    if tp is str:
        if not isinstance(raw, str):
            raise DecodeError(f"{path}: expected a string, got {_describe(raw)}")
        return raw
    if tp is bytes:
        if not isinstance(raw, list) or not all(isinstance(b, int) and not isinstance(b, bool) and 0 <= b < 256 for b in raw):
            raise DecodeError(f"{path}: expected a list of bytes, got {_describe(raw)}")
        return bytes(raw)

    if isinstance(tp, type):
        from_json_value = getattr(tp, "from_json_value", None)
        if callable(from_json_value):
            return from_json_value(raw)
        if issubclass(tp, enum.Enum):
            if isinstance(raw, str) and raw in tp.__members__:
                return tp[raw]
            raise DecodeError(f"{path}: unknown {tp.__name__} variant {raw!r}")
        if tp is list or tp is tuple or tp is dict:
            return _decode_generic(raw, tp, tp, path)

    raise DecodeError(f"{path}: cannot decode values of type {tp!r}")


def _decode_generic(raw: Any, tp: Any, origin: Any, path: str) -> Any:
    args = typing.get_args(tp)

    if origin is typing.Union or origin is types.UnionType:
        errors = []
        for option in args:
            try:
                return decode_json_value(raw, option, path)
            except DecodeError as e:
                errors.append(str(e))
        raise DecodeError(f"{path}: no union member matches {_describe(raw)} ({'; '.join(errors)})")

    if origin is typing.Literal:
        if any(a == raw and type(a) is type(raw) for a in args):
            return raw
        raise DecodeError(f"{path}: expected one of {args!r}, got {raw!r}")

    if origin in (list, Sequence, set, frozenset):
        if not isinstance(raw, list):
            raise DecodeError(f"{path}: expected an array, got {_describe(raw)}")
        item_type = args[0] if args else Any
        items = [decode_json_value(v, item_type, f"{path}[{i}]") for i, v in enumerate(raw)]
        return origin(items) if origin in (set, frozenset) else items

    if origin is tuple:
        if not isinstance(raw, list):
            raise DecodeError(f"{path}: expected an array, got {_describe(raw)}")
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            item_type = args[0] if args else Any
            return tuple(decode_json_value(v, item_type, f"{path}[{i}]") for i, v in enumerate(raw))
        if len(raw) != len(args):
            raise DecodeError(f"{path}: expected {len(args)} items, got {len(raw)}")
        return tuple(decode_json_value(v, t, f"{path}[{i}]") for i, (v, t) in enumerate(zip(raw, args)))

    if origin in (dict, Mapping):
        if not isinstance(raw, dict):
            raise DecodeError(f"{path}: expected an object, got {_describe(raw)}")
        value_type = args[1] if len(args) == 2 else Any
        return {k: decode_json_value(v, value_type, f"{path}.{k}") for k, v in raw.items()}

    raise DecodeError(f"{path}: cannot decode values of type {tp!r}")


def expect_object(value: Any, type_name: str) -> dict:
    """Check that a JSON value is an object."""
    if not isinstance(value, dict):
        raise DecodeError(f"{type_name}: expected an object, got {_describe(value)}")
    return value


def decode_field(obj: dict, key: str, tp: Any, type_name: str) -> Any:
    """Decode a required field of a JSON object."""
    if key not in obj:
        raise DecodeError(f"{type_name}: missing required field '{key}'")
    return decode_json_value(obj[key], tp, f"{type_name}.{key}")


def decode_variant(cls: type[enum.Enum], value: Any, names: Sequence[str], type_name: str) -> Any:
    """Decode a variant from its JSON tag (the variant name)."""
    if not isinstance(value, str) or value not in names:
        raise DecodeError(f"{type_name}: unknown variant tag {value!r}")
    return cls[value]


def ordering_key(*values: Any) -> tuple:
    """Comparison key of a field tuple; None sorts before any other value."""
    return tuple((value is not None, value) for value in values)


def pack_layout(layout: str, *values: Any) -> bytes:
    """Encode values with a struct layout."""
    try:
        return struct.pack(layout, *values)
    except struct.error as e:
        raise ValueError(f"cannot encode {values!r} with layout {layout!r}: {e}") from e


def unpack_layout(data: bytes, layout: str, type_name: str) -> tuple:
    """Decode a fixed-size struct layout, raising DecodeError on a length mismatch."""
    expected = struct.calcsize(layout)
    if len(data) != expected:
        raise DecodeError(f"{type_name}: expected {expected} bytes, got {len(data)}")
    return struct.unpack(layout, data)


def variant_at(cls: type[enum.Enum], names: Sequence[str], index: int, type_name: str) -> Any:
    """Look up a variant by its declaration index."""
    if not 0 <= index < len(names):
        raise DecodeError(f"{type_name}: unknown variant index {index}")
    return cls[names[index]]


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "a boolean"
    if isinstance(value, (int, float)):
        return "a number"
    if isinstance(value, str):
        return "a string"
    if isinstance(value, list):
        return "an array"
    if isinstance(value, dict):
        return "an object"
    return type(value).__name__
