# core/values.py
"""Firestore typed values.

A ``Value`` holds exactly one kind of payload. Containers (arrays and maps)
hold other ``Value`` objects and can be grown in place with ``Value.add``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from firebase_rest.core.errors import InvalidValueError, TypeMismatchError

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ValueKind(Enum):
    NULL = "nullValue"
    BOOLEAN = "booleanValue"
    INTEGER = "integerValue"
    DOUBLE = "doubleValue"
    TIMESTAMP = "timestampValue"
    STRING = "stringValue"
    BYTES = "bytesValue"
    REFERENCE = "referenceValue"
    GEO_POINT = "geoPointValue"
    ARRAY = "arrayValue"
    MAP = "mapValue"

    @property
    def wire_key(self) -> str:
        return self.value


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def __post_init__(self):
        for name, limit in (("latitude", 90), ("longitude", 180)):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                raise InvalidValueError(f"GeoPoint {name} must be a number, got {v!r}")
            if not -limit <= v <= limit:
                raise InvalidValueError(f"GeoPoint {name} out of range: {v}")
            object.__setattr__(self, name, float(v))


# ============================================
# PAYLOAD CHECKS (one per kind)
# ============================================

def _check_null(payload):
    if payload is not None:
        raise InvalidValueError(f"Entered non-null value for a null type value: {payload!r}")
    return None


def _check_boolean(payload):
    if not isinstance(payload, bool):
        raise InvalidValueError(f"Entered non-boolean value for a boolean type value: {payload!r}")
    return payload


def _check_integer(payload):
    if isinstance(payload, bool):
        raise InvalidValueError("Entered boolean value for an integer type value")
    if isinstance(payload, str):
        try:
            payload = int(payload.strip(), 10)
        except ValueError:
            raise InvalidValueError(
                f"Entered non-integer value for an integer type value: {payload!r}"
            ) from None
    if not isinstance(payload, int):
        raise InvalidValueError(f"Entered non-integer value for an integer type value: {payload!r}")
    if not INT64_MIN <= payload <= INT64_MAX:
        raise InvalidValueError(f"Integer out of 64-bit range: {payload}")
    return payload


def _check_double(payload):
    if isinstance(payload, bool):
        raise InvalidValueError("Entered boolean value for a double type value")
    if isinstance(payload, str):
        try:
            return float(payload)
        except ValueError:
            raise InvalidValueError(
                f"Entered non-double value for a double type value: {payload!r}"
            ) from None
    if not isinstance(payload, (int, float)):
        raise InvalidValueError(f"Entered non-double value for a double type value: {payload!r}")
    return float(payload)


def _check_timestamp(payload):
    if not isinstance(payload, datetime):
        raise InvalidValueError(f"Entered non-timestamp value for a timestamp type value: {payload!r}")
    # naive datetimes are taken as UTC
    if payload.tzinfo is None:
        return payload.replace(tzinfo=timezone.utc)
    try:
        return payload.astimezone(timezone.utc)
    except OverflowError as e:
        raise InvalidValueError(f"Timestamp out of range in UTC: {payload!r}") from e


def _check_string(payload):
    if not isinstance(payload, str):
        raise InvalidValueError(f"Entered non-string value for a string type value: {payload!r}")
    return payload


def _check_bytes(payload):
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise InvalidValueError(f"Entered non-bytes value for a bytes type value: {payload!r}")
    return bytes(payload)


def _check_reference(payload):
    if not isinstance(payload, str) or not payload:
        raise InvalidValueError(f"Entered invalid value for a reference type value: {payload!r}")
    return payload


def _check_geo_point(payload):
    if isinstance(payload, GeoPoint):
        return payload
    if isinstance(payload, (tuple, list)) and len(payload) == 2:
        return GeoPoint(*payload)
    raise InvalidValueError(f"Entered non-geo-point value for a geo-point type value: {payload!r}")


def _check_array(payload):
    if not isinstance(payload, list):
        raise InvalidValueError(f"Entered non-array value for an array type value: {payload!r}")
    for item in payload:
        if not isinstance(item, Value):
            raise InvalidValueError(f"Array items must be Value objects, got {type(item).__name__}")
    return payload


def _check_map(payload):
    if not isinstance(payload, dict):
        raise InvalidValueError(f"Entered non-map value for a map type value: {payload!r}")
    for key, item in payload.items():
        if not isinstance(key, str):
            raise InvalidValueError(f"Map keys must be strings, got {key!r}")
        if not isinstance(item, Value):
            raise InvalidValueError(f"Map values must be Value objects, got {type(item).__name__}")
    return payload


_CHECKS = {
    ValueKind.NULL: _check_null,
    ValueKind.BOOLEAN: _check_boolean,
    ValueKind.INTEGER: _check_integer,
    ValueKind.DOUBLE: _check_double,
    ValueKind.TIMESTAMP: _check_timestamp,
    ValueKind.STRING: _check_string,
    ValueKind.BYTES: _check_bytes,
    ValueKind.REFERENCE: _check_reference,
    ValueKind.GEO_POINT: _check_geo_point,
    ValueKind.ARRAY: _check_array,
    ValueKind.MAP: _check_map,
}


# ============================================
# VALUE
# ============================================

class Value:
    """One Firestore field value: a kind plus a payload that matches it."""

    __slots__ = ("_kind", "_payload")

    def __init__(self, kind: ValueKind, payload: Any = None):
        if not isinstance(kind, ValueKind):
            raise InvalidValueError(f"Unknown value kind: {kind!r}")
        self._kind = kind
        self._payload = _CHECKS[kind](payload)

    @property
    def kind(self) -> ValueKind:
        return self._kind

    @property
    def payload(self) -> Any:
        return self._payload

    # ---- constructors ----

    @classmethod
    def null(cls):
        return cls(ValueKind.NULL)

    @classmethod
    def boolean(cls, v):
        return cls(ValueKind.BOOLEAN, v)

    @classmethod
    def integer(cls, v):
        return cls(ValueKind.INTEGER, v)

    @classmethod
    def double(cls, v):
        return cls(ValueKind.DOUBLE, v)

    @classmethod
    def timestamp(cls, v):
        return cls(ValueKind.TIMESTAMP, v)

    @classmethod
    def string(cls, v):
        return cls(ValueKind.STRING, v)

    @classmethod
    def bytes_(cls, v):
        return cls(ValueKind.BYTES, v)

    @classmethod
    def reference(cls, v):
        return cls(ValueKind.REFERENCE, v)

    @classmethod
    def geo_point(cls, latitude, longitude):
        return cls(ValueKind.GEO_POINT, GeoPoint(latitude, longitude))

    @classmethod
    def array(cls, values=None):
        return cls(ValueKind.ARRAY, list(values) if values is not None else [])

    @classmethod
    def map(cls, fields=None):
        return cls(ValueKind.MAP, dict(fields) if fields is not None else {})

    # ---- containers ----

    def add(self, child: "Value", key: str | None = None) -> "Value":
        """Append ``child`` to an array, or set ``key`` on a map. Returns self."""
        if self._kind is ValueKind.ARRAY:
            if not isinstance(child, Value):
                raise InvalidValueError(f"Array items must be Value objects, got {type(child).__name__}")
            self._payload.append(child)
        elif self._kind is ValueKind.MAP:
            if not isinstance(key, str):
                raise InvalidValueError("Adding to a map value needs a string key")
            if not isinstance(child, Value):
                raise InvalidValueError(f"Map values must be Value objects, got {type(child).__name__}")
            self._payload[key] = child
        else:
            raise TypeMismatchError(f"Type of this value is {self._kind.name}, neither array nor map")
        return self

    # ---- native python ----

    @classmethod
    def from_python(cls, obj):
        """Recursively wrap a native Python object."""
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return cls.null()
        # bool first: bool is a subclass of int
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.double(obj)
        if isinstance(obj, datetime):
            return cls.timestamp(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls.bytes_(obj)
        if isinstance(obj, GeoPoint):
            return cls(ValueKind.GEO_POINT, obj)
        if isinstance(obj, (list, tuple)):
            return cls.array([cls.from_python(v) for v in obj])
        if isinstance(obj, dict):
            return cls.map({str(k): cls.from_python(v) for k, v in obj.items()})
        raise InvalidValueError(f"Unsupported Firestore value type: {type(obj).__name__}")

    def to_python(self):
        if self._kind is ValueKind.ARRAY:
            return [v.to_python() for v in self._payload]
        if self._kind is ValueKind.MAP:
            return {k: v.to_python() for k, v in self._payload.items()}
        return self._payload

    # ---- dunder ----

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self._kind is other._kind and self._payload == other._payload

    __hash__ = None

    def __repr__(self):
        return f"Value({self._kind.name}, {self._payload!r})"

    def __str__(self):
        return f"{self._kind.name}: {self._payload}"


def is_finite_double(value: Value) -> bool:
    return value.kind is ValueKind.DOUBLE and math.isfinite(value.payload)
