"""Core data models for the cache store."""

import time
from typing import Any, Literal

from pydantic import BaseModel, Field

DEFAULT_HASH_KEY = "CacheKey"
DEFAULT_TTL_KEY = "TTL"

SerializerFormat = Literal["pickle", "json"]
CorruptEntryPolicy = Literal["miss", "raise"]


class Entry(BaseModel):
    """Single cache entry as seen by the store."""

    key: str
    value: Any = None
    expires_at: float | None = None

    def expired(self, now: float | None = None) -> bool:
        """Check whether the entry has passed its expiration time.

        Args:
            now: Current epoch seconds (defaults to time.time())

        Returns:
            True if expires_at is set and has elapsed
        """
        if self.expires_at is None:
            return False
        if now is None:
            now = time.time()
        return now >= self.expires_at


class DynamoStoreConfig(BaseModel):
    """Configuration for a DynamoDB-backed cache store."""

    table_name: str
    hash_key_attribute: str = DEFAULT_HASH_KEY
    ttl_attribute: str = DEFAULT_TTL_KEY
    consistent_read: bool = False

    # Store behaviour
    namespace: str | None = None
    expires_in: float | None = Field(default=None, gt=0)
    serializer: SerializerFormat = "pickle"
    corrupt_entry_policy: CorruptEntryPolicy = "miss"

    # Default client construction
    region_name: str | None = None
    endpoint_url: str | None = None


class CacheStats(BaseModel):
    """Counters for store operations."""

    reads: int = 0
    hits: int = 0
    misses: int = 0
    corrupt_entries: int = 0
    expired_entries: int = 0
    writes: int = 0
    deletes: int = 0

    @property
    def hit_rate(self) -> float:
        """Fraction of reads that returned a value."""
        return self.hits / self.reads if self.reads > 0 else 0.0
