"""Async cache backend over a blocking store."""

import asyncio
from typing import Any, Optional

from dynamo_cache.core.cache import CacheBackend
from dynamo_cache.core.store import Store


class DynamoCacheBackend(CacheBackend):
    """Expose a store through the async CacheBackend interface.

    Store operations block on network I/O, so each call runs in the default
    thread pool executor.

    Example:
        ```python
        backend = DynamoCacheBackend(create_dynamo_store("CacheTable"))
        await backend.set("query:abc", {"results": []}, ttl=86400)
        cached = await backend.get("query:abc")
        ```
    """

    def __init__(self, store: Store) -> None:
        """Initialize backend.

        Args:
            store: Store that performs the blocking operations
        """
        self.store = store

    async def get(self, key: str) -> Optional[Any]:
        """Retrieve value from the store in a worker thread."""
        return await asyncio.to_thread(self.store.read, key)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store value in a worker thread, expiring after ttl seconds.

        Raises:
            ValueError: If ttl is not positive
        """
        await asyncio.to_thread(self.store.write, key, value, ttl)

    async def delete(self, key: str) -> None:
        """Delete value in a worker thread."""
        await asyncio.to_thread(self.store.delete, key)
