"""Versioned binary envelope for cached entries.

Every payload starts with a fixed four byte header so that a reader can tell
a foreign or outdated payload apart from a damaged one:

    +-------+---------+--------+----------------+
    | magic | version | format | body ...       |
    | "DC"  | 1 byte  | 1 byte | format encoded |
    +-------+---------+--------+----------------+

The body is a mapping ``{"value": ..., "expires_at": ...}`` encoded with the
serializer named by the format tag.
"""

import json
import pickle
import struct
from typing import Any

from dynamo_cache.core.exceptions import SerializationError
from dynamo_cache.core.models import Entry, SerializerFormat

MAGIC = b"DC"
VERSION = 1
HEADER = struct.Struct(">2sBB")

FORMAT_PICKLE = 1
FORMAT_JSON = 2

FORMAT_TAGS: dict[str, int] = {
    "pickle": FORMAT_PICKLE,
    "json": FORMAT_JSON,
}

# Fixed so payloads stay readable across interpreter upgrades.
PICKLE_PROTOCOL = 4


def _encode_body(body: dict[str, Any], tag: int) -> bytes:
    if tag == FORMAT_PICKLE:
        return pickle.dumps(body, protocol=PICKLE_PROTOCOL)
    return json.dumps(body, separators=(",", ":"), allow_nan=False).encode("utf-8")


def _decode_body(data: bytes, tag: int) -> Any:
    if tag == FORMAT_PICKLE:
        return pickle.loads(data)  # noqa: S301
    return json.loads(data.decode("utf-8"))


def dump_entry(entry: Entry, format: SerializerFormat = "pickle") -> bytes:
    """Encode an entry's value and expiry into an envelope.

    Args:
        entry: Entry to encode
        format: Body serializer ("pickle" or "json")

    Returns:
        Envelope bytes

    Raises:
        SerializationError: If the format is unknown, the value cannot be encoded,
            or a JSON encoding would not decode back to an equal value
    """
    tag = FORMAT_TAGS.get(format)
    if tag is None:
        raise SerializationError(f"Unknown serializer format '{format}'", backend="envelope")

    body = {"value": entry.value, "expires_at": entry.expires_at}
    try:
        encoded = _encode_body(body, tag)
    except (TypeError, ValueError, AttributeError, pickle.PicklingError) as e:
        raise SerializationError(
            f"Cannot encode value for key '{entry.key}' as {format}: {e}", backend="envelope"
        ) from e

    # JSON turns tuples into lists and non-string keys into strings.
    if tag == FORMAT_JSON and json.loads(encoded) != body:
        raise SerializationError(
            f"Value for key '{entry.key}' does not round-trip through json", backend="envelope"
        )

    return HEADER.pack(MAGIC, VERSION, tag) + encoded


def load_entry(data: bytes, key: str) -> Entry:
    """Decode an envelope back into an entry.

    Args:
        data: Envelope bytes as stored
        key: Cache key the payload was stored under

    Returns:
        Decoded entry

    Raises:
        SerializationError: If the payload is truncated, foreign, from an
            unsupported version, or its body fails to decode
    """
    if len(data) < HEADER.size:
        raise SerializationError("Payload shorter than envelope header", backend="envelope")

    magic, version, tag = HEADER.unpack_from(data)
    if magic != MAGIC:
        raise SerializationError(f"Unrecognized payload magic {magic!r}", backend="envelope")
    if version != VERSION:
        raise SerializationError(f"Unsupported envelope version {version}", backend="envelope")
    if tag not in FORMAT_TAGS.values():
        raise SerializationError(f"Unknown format tag {tag}", backend="envelope")

    try:
        body = _decode_body(data[HEADER.size :], tag)
    except Exception as e:
        # Unpickling can fail with nearly any exception type.
        raise SerializationError(f"Cannot decode payload body: {e}", backend="envelope") from e

    if not isinstance(body, dict) or "value" not in body:
        raise SerializationError("Payload body is not an entry mapping", backend="envelope")

    expires_at = body.get("expires_at")
    if expires_at is not None and not isinstance(expires_at, (int, float)):
        raise SerializationError(f"Invalid expires_at {expires_at!r}", backend="envelope")

    return Entry(key=key, value=body["value"], expires_at=expires_at)
