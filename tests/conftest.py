"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from dynamo_cache.backends import DynamoStore


class FakeDynamoClient:
    """In-memory stand-in for a boto3 DynamoDB client.

    Items are kept in their typed wire form, keyed by table and hash key
    value, so tests can inspect exactly what would have been sent.
    """

    def __init__(self, hash_key_attribute: str = "CacheKey") -> None:
        self.hash_key_attribute = hash_key_attribute
        self.tables: dict[str, dict[str, dict[str, Any]]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _hash(self, key: dict[str, Any]) -> str:
        return key[self.hash_key_attribute]["S"]

    def get_item(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(("get_item", kwargs))
        item = self.tables.get(kwargs["TableName"], {}).get(self._hash(kwargs["Key"]))
        return {"Item": item} if item is not None else {}

    def put_item(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(("put_item", kwargs))
        item = kwargs["Item"]
        self.tables.setdefault(kwargs["TableName"], {})[self._hash(item)] = item
        return {}

    def delete_item(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(("delete_item", kwargs))
        self.tables.get(kwargs["TableName"], {}).pop(self._hash(kwargs["Key"]), None)
        return {}

    def stored(self, table: str, key: str) -> dict[str, Any] | None:
        return self.tables.get(table, {}).get(key)


@pytest.fixture
def fake_client():
    """In-memory DynamoDB client."""
    return FakeDynamoClient()


@pytest.fixture
def store(fake_client):
    """DynamoStore over the in-memory client."""
    return DynamoStore(table_name="CacheTable", client=fake_client)
