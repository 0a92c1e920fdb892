# core/codec.py
"""Convert between ``Value`` objects and Firestore REST JSON."""
from __future__ import annotations

import base64
import math
import re
from datetime import datetime, timezone

from firebase_rest.core.errors import DecodeError, InvalidValueError
from firebase_rest.core.values import GeoPoint, Value, ValueKind, is_finite_double

_WIRE_KEYS = {kind.wire_key: kind for kind in ValueKind}

_TIMESTAMP_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|z|[+-]\d{2}:\d{2})$"
)

_SPECIAL_DOUBLES = {"NaN": math.nan, "Infinity": math.inf, "-Infinity": -math.inf}


# ============================================
# TIMESTAMPS (RFC3339)
# ============================================

def format_timestamp(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    # strftime does not zero-pad years below 1000
    return f"{dt.year:04d}-{dt:%m-%dT%H:%M:%S.%f}Z"


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC3339 string; fractions past microseconds are truncated."""
    m = _TIMESTAMP_RE.match(text) if isinstance(text, str) else None
    if not m:
        raise DecodeError(f"Invalid timestamp: {text!r}")

    date_part, time_part, fraction, offset = m.groups()
    fraction = (fraction or "0")[:6].ljust(6, "0")
    if offset in ("Z", "z"):
        offset = "+00:00"

    try:
        dt = datetime.fromisoformat(f"{date_part}T{time_part}.{fraction}{offset}")
    except ValueError as e:
        raise DecodeError(f"Invalid timestamp: {text!r}") from e
    return dt.astimezone(timezone.utc)


# ============================================
# ENCODE
# ============================================

def encode_value(value: Value) -> dict:
    """Encode one Value as ``{"<kind>Value": payload}``."""
    if not isinstance(value, Value):
        raise InvalidValueError(f"Expected a Value, got {type(value).__name__}")

    kind, payload = value.kind, value.payload

    if kind is ValueKind.INTEGER:
        out = str(payload)
    elif kind is ValueKind.DOUBLE:
        if is_finite_double(value):
            out = payload
        elif math.isnan(payload):
            out = "NaN"
        else:
            out = "Infinity" if payload > 0 else "-Infinity"
    elif kind is ValueKind.TIMESTAMP:
        out = format_timestamp(payload)
    elif kind is ValueKind.BYTES:
        out = base64.standard_b64encode(payload).decode("ascii")
    elif kind is ValueKind.GEO_POINT:
        out = {"latitude": payload.latitude, "longitude": payload.longitude}
    elif kind is ValueKind.ARRAY:
        out = {"values": [encode_value(v) for v in payload]} if payload else {}
    elif kind is ValueKind.MAP:
        out = {"fields": encode_fields(payload)} if payload else {}
    else:
        # null, boolean, string and reference go out as-is
        out = payload

    return {kind.wire_key: out}


def encode_fields(fields: dict) -> dict:
    return {k: encode_value(v) for k, v in (fields or {}).items()}


# ============================================
# DECODE
# ============================================

def decode_value(obj: dict) -> Value:
    """Rebuild a Value from its wire JSON; exactly one kind key must be set."""
    if not isinstance(obj, dict):
        raise DecodeError(f"Expected a JSON object, got {type(obj).__name__}")

    present = [k for k in obj if k in _WIRE_KEYS]
    if not present:
        raise DecodeError(f"No value kind found in {sorted(obj)}")
    if len(present) > 1:
        raise DecodeError(f"More than one value kind found: {sorted(present)}")

    kind = _WIRE_KEYS[present[0]]
    raw = obj[present[0]]

    try:
        return _decode_payload(kind, raw)
    except InvalidValueError as e:
        raise DecodeError(f"Malformed {kind.wire_key}: {e}") from e


def _decode_payload(kind: ValueKind, raw) -> Value:
    if kind is ValueKind.INTEGER:
        # ints arrive as decimal strings, but tolerate plain JSON numbers
        if isinstance(raw, float) or not isinstance(raw, (str, int)):
            raise DecodeError(f"integerValue must be a decimal string, got {raw!r}")
        return Value(kind, raw)

    if kind is ValueKind.DOUBLE:
        if isinstance(raw, str):
            if raw not in _SPECIAL_DOUBLES:
                raise DecodeError(f"doubleValue must be a number, got {raw!r}")
            raw = _SPECIAL_DOUBLES[raw]
        return Value(kind, raw)

    if kind is ValueKind.TIMESTAMP:
        return Value(kind, parse_timestamp(raw))

    if kind is ValueKind.BYTES:
        if not isinstance(raw, str):
            raise DecodeError(f"bytesValue must be a base64 string, got {raw!r}")
        try:
            return Value(kind, base64.b64decode(raw, validate=True))
        except ValueError as e:
            raise DecodeError(f"Invalid base64 in bytesValue: {raw!r}") from e

    if kind is ValueKind.GEO_POINT:
        if not isinstance(raw, dict):
            raise DecodeError(f"geoPointValue must be an object, got {raw!r}")
        # proto3 JSON drops zero fields
        return Value(kind, GeoPoint(raw.get("latitude", 0.0), raw.get("longitude", 0.0)))

    if kind is ValueKind.ARRAY:
        if not isinstance(raw, dict):
            raise DecodeError(f"arrayValue must be an object, got {raw!r}")
        return Value(kind, [decode_value(v) for v in raw.get("values") or []])

    if kind is ValueKind.MAP:
        if not isinstance(raw, dict):
            raise DecodeError(f"mapValue must be an object, got {raw!r}")
        return Value(kind, decode_fields(raw.get("fields")))

    return Value(kind, raw)


def decode_fields(fields: dict | None) -> dict:
    if fields is None:
        return {}
    if not isinstance(fields, dict):
        raise DecodeError(f"Expected a fields object, got {type(fields).__name__}")
    return {k: decode_value(v) for k, v in fields.items()}
