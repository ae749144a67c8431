"""Tests for the entry envelope."""

import json
import pickle
from datetime import datetime

import pytest

from dynamo_cache.core import Entry, SerializationError, dump_entry, load_entry
from dynamo_cache.core.serialization import FORMAT_JSON, FORMAT_PICKLE, HEADER, MAGIC, VERSION


def test_header_layout():
    """Test the envelope header bytes."""
    data = dump_entry(Entry(key="k", value="v"), "json")

    assert data[:2] == MAGIC
    assert data[2] == VERSION
    assert data[3] == FORMAT_JSON
    assert json.loads(data[HEADER.size :]) == {"value": "v", "expires_at": None}


def test_pickle_preserves_python_types():
    """Test pickle bodies keep non-JSON values."""
    value = {"when": datetime(2024, 1, 2, 3, 4, 5), "ids": {1, 2}}
    data = dump_entry(Entry(key="k", value=value, expires_at=123.5))

    assert data[3] == FORMAT_PICKLE
    entry = load_entry(data, "k")
    assert entry.value == value
    assert entry.expires_at == 123.5
    assert entry.key == "k"


def test_json_rejects_unencodable_value():
    """Test JSON encoding failures raise SerializationError."""
    with pytest.raises(SerializationError):
        dump_entry(Entry(key="k", value=object()), "json")


def test_pickle_rejects_unencodable_value():
    """Test pickle encoding failures raise SerializationError."""
    with pytest.raises(SerializationError):
        dump_entry(Entry(key="k", value=lambda: None), "pickle")


def test_unknown_format():
    """Test an unknown serializer name is refused."""
    with pytest.raises(SerializationError):
        dump_entry(Entry(key="k", value=1), "xml")


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"DC",
        b"XX\x01\x01" + pickle.dumps({"value": 1}),
        b"DC\x02\x01" + pickle.dumps({"value": 1}),
        b"DC\x01\x09{}",
        b"DC\x01\x01not a pickle",
        b"DC\x01\x02{not json",
        b"DC\x01\x02\xff\xfe",
        b"DC\x01\x02[1, 2]",
        b'DC\x01\x02{"other": 1}',
        b'DC\x01\x02{"value": 1, "expires_at": "soon"}',
    ],
    ids=[
        "empty",
        "short",
        "bad-magic",
        "future-version",
        "unknown-format",
        "bad-pickle",
        "bad-json",
        "bad-utf8",
        "not-a-mapping",
        "missing-value",
        "bad-expiry",
    ],
)
def test_load_rejects_malformed_payloads(data):
    """Test malformed payloads raise SerializationError."""
    with pytest.raises(SerializationError):
        load_entry(data, "k")


def test_foreign_pickle_without_envelope():
    """Test a bare pickle from another writer is rejected."""
    with pytest.raises(SerializationError):
        load_entry(pickle.dumps("raw value"), "k")


@pytest.mark.parametrize(
    "value",
    [
        {1: (1, 2)},
        (1, 2),
        {"nested": {"ids": (3, 4)}},
        float("nan"),
    ],
    ids=["int-keys", "tuple", "nested-tuple", "nan"],
)
def test_json_rejects_lossy_values(value):
    """Test JSON encoding refuses values that would not read back equal."""
    with pytest.raises(SerializationError):
        dump_entry(Entry(key="k", value=value), "json")


def test_json_accepts_faithful_values():
    """Test plain JSON values still encode and decode."""
    value = {"a": [1, 2.5, None, True], "b": {"c": "d"}}

    data = dump_entry(Entry(key="k", value=value, expires_at=10.0), "json")

    assert load_entry(data, "k").value == value
