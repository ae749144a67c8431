"""Generic cache store that backends plug into."""

import logging
import math
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, get_args

from dynamo_cache.core.exceptions import ConfigurationError, CorruptEntryError
from dynamo_cache.core.models import (
    CacheStats,
    CorruptEntryPolicy,
    Entry,
    SerializerFormat,
)

logger = logging.getLogger(__name__)


class Store(ABC):
    """Abstract base class for cache stores.

    The store owns everything that is independent of where entries live:
    key namespacing, expiry computation, read-through fetching, the policy
    for entries that cannot be decoded, and operation counters. Backends
    only implement the three primitives ``read_entry``, ``write_entry`` and
    ``delete_entry``.

    Example:
        >>> class DictStore(Store):
        ...     def __init__(self, **options):
        ...         super().__init__(**options)
        ...         self.data = {}
        ...     def read_entry(self, key):
        ...         return self.data.get(key)
        ...     def write_entry(self, key, entry):
        ...         self.data[key] = entry
        ...         return True
        ...     def delete_entry(self, key):
        ...         self.data.pop(key, None)
        ...         return True
        ...
        >>> store = DictStore(namespace="app")
        >>> store.write("greeting", "hello", expires_in=60)
        True
        >>> store.read("greeting")
        'hello'
    """

    backend_name = "store"

    def __init__(
        self,
        namespace: Optional[str] = None,
        expires_in: Optional[float] = None,
        serializer: SerializerFormat = "pickle",
        corrupt_entry_policy: CorruptEntryPolicy = "miss",
    ) -> None:
        """Initialize store options.

        Args:
            namespace: Prefix prepended to every key as "namespace:key"
            expires_in: Default lifetime in seconds for written entries
            serializer: Payload body format for backends that serialize
            corrupt_entry_policy: "miss" to treat undecodable entries as
                absent, "raise" to propagate CorruptEntryError

        Raises:
            ConfigurationError: If an option value is not supported
        """
        if serializer not in get_args(SerializerFormat):
            raise ConfigurationError(f"Unknown serializer '{serializer}'", self.backend_name)
        if corrupt_entry_policy not in get_args(CorruptEntryPolicy):
            raise ConfigurationError(
                f"Unknown corrupt entry policy '{corrupt_entry_policy}'", self.backend_name
            )
        if expires_in is not None and not (expires_in > 0 and math.isfinite(expires_in)):
            raise ConfigurationError("expires_in must be positive and finite", self.backend_name)

        self.namespace = namespace
        self.expires_in = expires_in
        self.serializer = serializer
        self.corrupt_entry_policy = corrupt_entry_policy
        self._stats = CacheStats()
        self._stats_lock = threading.Lock()

    @abstractmethod
    def read_entry(self, key: str) -> Optional[Entry]:
        """Fetch the stored entry for a namespaced key.

        Args:
            key: Namespaced cache key

        Returns:
            The entry, or None if nothing is stored

        Raises:
            CorruptEntryError: If a payload exists but cannot be decoded
        """
        pass

    @abstractmethod
    def write_entry(self, key: str, entry: Entry) -> bool:
        """Store an entry, overwriting any existing one.

        Args:
            key: Namespaced cache key
            entry: Entry to store

        Returns:
            True on success
        """
        pass

    @abstractmethod
    def delete_entry(self, key: str) -> bool:
        """Remove the entry for a key. Must succeed for unknown keys.

        Args:
            key: Namespaced cache key

        Returns:
            True on success
        """
        pass

    def read(self, name: str) -> Any:
        """Read a cached value.

        Args:
            name: Cache key (namespace is applied)

        Returns:
            The cached value, or None on a miss
        """
        entry = self._lookup(self.normalize_key(name))
        return entry.value if entry is not None else None

    def write(
        self,
        name: str,
        value: Any,
        expires_in: Optional[float] = None,
        expires_at: Optional[float] = None,
    ) -> bool:
        """Write a value to the cache.

        Args:
            name: Cache key (namespace is applied)
            value: Value to store
            expires_in: Lifetime in seconds (overrides the store default)
            expires_at: Absolute expiry in epoch seconds (overrides expires_in)

        Returns:
            True on success

        Raises:
            ValueError: If expires_in is not positive or the expiry is not finite
        """
        key = self.normalize_key(name)
        entry = Entry(
            key=key,
            value=value,
            expires_at=self._expiry_for(expires_in, expires_at),
        )
        result = self.write_entry(key, entry)
        self._count("writes")
        logger.debug(f"Cache write: {key} (expires_at={entry.expires_at})")
        return result

    def delete(self, name: str) -> bool:
        """Delete a cached value. Succeeds even if the key was never written.

        Args:
            name: Cache key (namespace is applied)

        Returns:
            True on success
        """
        key = self.normalize_key(name)
        result = self.delete_entry(key)
        self._count("deletes")
        logger.debug(f"Cache delete: {key}")
        return result

    def exist(self, name: str) -> bool:
        """Check whether a live entry exists for a key.

        Args:
            name: Cache key (namespace is applied)

        Returns:
            True if a decodable, unexpired entry is stored
        """
        return self._read_live_entry(self.normalize_key(name)) is not None

    def fetch(
        self,
        name: str,
        compute: Optional[Callable[[], Any]] = None,
        force: bool = False,
        expires_in: Optional[float] = None,
    ) -> Any:
        """Read a value, computing and writing it on a miss.

        A stored None is a hit and is returned without calling compute.

        Args:
            name: Cache key (namespace is applied)
            compute: Zero-argument callable producing the value on a miss
            force: Skip the read and always recompute
            expires_in: Lifetime in seconds for a computed value

        Returns:
            The cached or freshly computed value (None on a miss without compute)
        """
        if not force:
            entry = self._lookup(self.normalize_key(name))
            if entry is not None:
                return entry.value

        if compute is None:
            return None

        value = compute()
        self.write(name, value, expires_in=expires_in)
        return value

    def normalize_key(self, name: str) -> str:
        """Apply the store namespace to a key.

        Args:
            name: Cache key as given by the caller

        Returns:
            Namespaced key
        """
        if not name:
            raise ValueError("Cache key must be a non-empty string")
        if self.namespace:
            return f"{self.namespace}:{name}"
        return name

    def get_cache_stats(self) -> dict[str, Any]:
        """Get operation statistics.

        Returns:
            Counters plus hit rate
        """
        with self._stats_lock:
            stats = self._stats.model_dump()
            stats["hit_rate"] = round(self._stats.hit_rate, 3)
        return stats

    def reset_stats(self) -> None:
        """Reset operation statistics."""
        with self._stats_lock:
            self._stats = CacheStats()

    def _count(self, *fields: str) -> None:
        # Store calls may run concurrently in worker threads.
        with self._stats_lock:
            for field in fields:
                setattr(self._stats, field, getattr(self._stats, field) + 1)

    def _lookup(self, key: str) -> Optional[Entry]:
        entry = self._read_live_entry(key)
        if entry is None:
            self._count("reads", "misses")
            logger.debug(f"Cache read miss: {key}")
            return None

        self._count("reads", "hits")
        logger.debug(f"Cache read hit: {key}")
        return entry

    def _read_live_entry(self, key: str) -> Optional[Entry]:
        try:
            entry = self.read_entry(key)
        except CorruptEntryError as e:
            self._count("corrupt_entries")
            if self.corrupt_entry_policy == "raise":
                raise
            logger.warning(f"Treating corrupt cache entry as a miss: {e}")
            return None

        if entry is None:
            return None

        # Removal is left to the backend's own expiry (DynamoDB TTL sweep).
        if entry.expired():
            self._count("expired_entries")
            logger.debug(f"Cache entry expired: {key}")
            return None

        return entry

    def _expiry_for(
        self, expires_in: Optional[float], expires_at: Optional[float]
    ) -> Optional[float]:
        if expires_at is not None:
            if not math.isfinite(expires_at):
                raise ValueError(f"expires_at must be a finite timestamp, got {expires_at!r}")
            return float(expires_at)
        if expires_in is not None and not expires_in > 0:
            raise ValueError(f"expires_in must be positive, got {expires_in!r}")
        lifetime = expires_in if expires_in is not None else self.expires_in
        if lifetime is None:
            return None
        if not math.isfinite(lifetime):
            raise ValueError(f"expires_in must be finite, got {lifetime!r}")
        return time.time() + lifetime
