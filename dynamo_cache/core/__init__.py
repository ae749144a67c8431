"""Core abstractions and models."""

from dynamo_cache.core.cache import CacheBackend
from dynamo_cache.core.exceptions import (
    CacheError,
    ConfigurationError,
    CorruptEntryError,
    SerializationError,
)
from dynamo_cache.core.models import (
    DEFAULT_HASH_KEY,
    DEFAULT_TTL_KEY,
    CacheStats,
    DynamoStoreConfig,
    Entry,
)
from dynamo_cache.core.serialization import dump_entry, load_entry
from dynamo_cache.core.store import Store

__all__ = [
    # Interfaces
    "CacheBackend",
    "Store",
    # Exceptions
    "CacheError",
    "ConfigurationError",
    "SerializationError",
    "CorruptEntryError",
    # Models
    "Entry",
    "CacheStats",
    "DynamoStoreConfig",
    "DEFAULT_HASH_KEY",
    "DEFAULT_TTL_KEY",
    # Serialization
    "dump_entry",
    "load_entry",
]
