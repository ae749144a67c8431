"""Tests for the async CacheBackend adapter."""

import pytest

from dynamo_cache.backends import DynamoCacheBackend
from dynamo_cache.core import CacheBackend


@pytest.mark.asyncio
async def test_set_get_delete(store):
    """Test async operations reach the store."""
    backend = DynamoCacheBackend(store)
    assert isinstance(backend, CacheBackend)

    assert await backend.get("k") is None

    await backend.set("k", {"results": [1, 2]}, ttl=3600)
    assert await backend.get("k") == {"results": [1, 2]}

    await backend.delete("k")
    assert await backend.get("k") is None


@pytest.mark.asyncio
async def test_set_ttl_writes_ttl_attribute(store, fake_client, mocker):
    """Test ttl seconds become the item's TTL attribute."""
    mocker.patch("dynamo_cache.core.store.time.time", return_value=1000.0)
    backend = DynamoCacheBackend(store)

    await backend.set("k", "v", ttl=60)

    assert fake_client.stored("CacheTable", "k")["TTL"] == {"N": "1060"}


@pytest.mark.asyncio
async def test_set_without_ttl(store, fake_client):
    """Test no TTL attribute without ttl or store default."""
    backend = DynamoCacheBackend(store)

    await backend.set("k", "v")

    assert "TTL" not in fake_client.stored("CacheTable", "k")


@pytest.mark.asyncio
@pytest.mark.parametrize("ttl", [0, -30])
async def test_set_rejects_non_positive_ttl(store, fake_client, ttl):
    """Test ttl must be positive, as for the store default."""
    backend = DynamoCacheBackend(store)

    with pytest.raises(ValueError):
        await backend.set("k", "v", ttl=ttl)

    assert fake_client.stored("CacheTable", "k") is None
