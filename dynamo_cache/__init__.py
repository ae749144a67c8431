"""Dynamo Cache - DynamoDB-backed cache store."""

from dynamo_cache.backends import (
    DynamoCacheBackend,
    DynamoStore,
    create_dynamo_client,
    create_dynamo_store,
)
from dynamo_cache.core import (
    CacheBackend,
    CacheError,
    CacheStats,
    ConfigurationError,
    CorruptEntryError,
    DynamoStoreConfig,
    Entry,
    SerializationError,
    Store,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Store",
    "CacheBackend",
    "Entry",
    "CacheStats",
    "DynamoStoreConfig",
    # Exceptions
    "CacheError",
    "ConfigurationError",
    "SerializationError",
    "CorruptEntryError",
    # Backends
    "DynamoStore",
    "DynamoCacheBackend",
    "create_dynamo_client",
    "create_dynamo_store",
]
