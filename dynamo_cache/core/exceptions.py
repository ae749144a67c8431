"""Custom exceptions for the cache store."""


class CacheError(Exception):
    """Base exception for cache errors."""

    def __init__(self, message: str, backend: str = "unknown") -> None:
        """Initialize error.

        Args:
            message: Error message
            backend: Backend name
        """
        self.backend = backend
        super().__init__(f"[{backend}] {message}")


class ConfigurationError(CacheError):
    """Raised when store options are invalid."""

    pass


class SerializationError(CacheError):
    """Raised when a value cannot be encoded into or decoded from a payload."""

    pass


class CorruptEntryError(SerializationError):
    """Raised when a stored payload exists but cannot be decoded."""

    def __init__(self, key: str, reason: str, backend: str = "unknown") -> None:
        """Initialize error.

        Args:
            key: Cache key whose payload failed to decode
            reason: Why decoding failed
            backend: Backend name
        """
        self.key = key
        self.reason = reason
        super().__init__(f"Corrupt entry for key '{key}': {reason}", backend=backend)
