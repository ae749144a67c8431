"""Cache store backend implementations."""

from dynamo_cache.backends.async_backend import DynamoCacheBackend
from dynamo_cache.backends.dynamo_store import (
    CONTENT_KEY,
    DynamoStore,
    create_dynamo_client,
    create_dynamo_store,
)

__all__ = [
    "DynamoStore",  # Table-backed cache store
    "DynamoCacheBackend",  # Async CacheBackend adapter
    "create_dynamo_client",
    "create_dynamo_store",
    "CONTENT_KEY",
]
