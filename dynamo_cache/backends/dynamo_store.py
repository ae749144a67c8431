"""DynamoDB-backed cache store.

Each cache key maps to one item in a DynamoDB table. The item holds the key
under the hash key attribute, the encoded entry in a single binary attribute,
and, when the entry expires, the expiry in epoch seconds under the TTL
attribute so that DynamoDB's Time to Live feature can remove it.
"""

import logging
import math
from typing import Any, Optional

import boto3
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from dynamo_cache.core.exceptions import CorruptEntryError, SerializationError
from dynamo_cache.core.models import (
    DEFAULT_HASH_KEY,
    DEFAULT_TTL_KEY,
    CorruptEntryPolicy,
    DynamoStoreConfig,
    Entry,
    SerializerFormat,
)
from dynamo_cache.core.serialization import dump_entry, load_entry
from dynamo_cache.core.store import Store

logger = logging.getLogger(__name__)

CONTENT_KEY = "b_item_value"


class DynamoStore(Store):
    """Cache store persisting entries in a DynamoDB table.

    Every operation is one blocking request against the injected client:
    reads use ``get_item``, writes use an unconditional ``put_item`` and
    deletes use ``delete_item``. Nothing is cached in-process and errors
    raised by the client (throttling, access denied, missing table)
    propagate to the caller unchanged.

    Example:
        ```python
        from dynamo_cache.backends import DynamoStore, create_dynamo_client

        store = DynamoStore(
            table_name="CacheTable",
            client=create_dynamo_client(region_name="eu-west-1"),
            hash_key_attribute="name",
            ttl_attribute="key_ttl",
            consistent_read=True,
        )

        store.write("user:42", {"name": "Ann"}, expires_in=300)
        store.read("user:42")  # {"name": "Ann"}
        ```

    Args:
        table_name: Name of the DynamoDB table
        client: DynamoDB client (``boto3.client("dynamodb")`` or compatible)
        hash_key_attribute: Name of the table's hash key attribute (default: "CacheKey")
        ttl_attribute: Name of the table's TTL attribute (default: "TTL")
        consistent_read: Request strongly consistent reads (default: False)
        namespace: Prefix applied to every key (default: None)
        expires_in: Default entry lifetime in seconds (default: None, no expiry)
        serializer: Payload body format, "pickle" or "json" (default: "pickle")
        corrupt_entry_policy: "miss" or "raise" for undecodable items (default: "miss")
    """

    backend_name = "dynamodb"

    def __init__(
        self,
        table_name: str,
        client: Any,
        hash_key_attribute: str = DEFAULT_HASH_KEY,
        ttl_attribute: str = DEFAULT_TTL_KEY,
        consistent_read: bool = False,
        namespace: Optional[str] = None,
        expires_in: Optional[float] = None,
        serializer: SerializerFormat = "pickle",
        corrupt_entry_policy: CorruptEntryPolicy = "miss",
    ) -> None:
        """Initialize the DynamoDB store."""
        super().__init__(
            namespace=namespace,
            expires_in=expires_in,
            serializer=serializer,
            corrupt_entry_policy=corrupt_entry_policy,
        )
        if client is None:
            raise ValueError("client is required; use create_dynamo_store() for a default client")

        self.table_name = table_name
        self.client = client
        self.hash_key_attribute = hash_key_attribute
        self.ttl_attribute = ttl_attribute
        self.consistent_read = consistent_read
        self._serializer = TypeSerializer()

    @classmethod
    def from_config(cls, config: DynamoStoreConfig, client: Any) -> "DynamoStore":
        """Build a store from a configuration model.

        Args:
            config: Store configuration
            client: DynamoDB client

        Returns:
            Configured DynamoStore
        """
        return cls(
            table_name=config.table_name,
            client=client,
            hash_key_attribute=config.hash_key_attribute,
            ttl_attribute=config.ttl_attribute,
            consistent_read=config.consistent_read,
            namespace=config.namespace,
            expires_in=config.expires_in,
            serializer=config.serializer,
            corrupt_entry_policy=config.corrupt_entry_policy,
        )

    def read_entry(self, key: str) -> Optional[Entry]:
        """Fetch and decode the item stored for a key.

        Args:
            key: Namespaced cache key

        Returns:
            Decoded entry, or None if there is no item or it has no content

        Raises:
            CorruptEntryError: If the content attribute cannot be decoded
        """
        response = self.client.get_item(
            TableName=self.table_name,
            Key=self._key(key),
            ConsistentRead=self.consistent_read,
        )

        item = response.get("Item")
        if not item or CONTENT_KEY not in item:
            return None

        payload = item[CONTENT_KEY].get("B")
        if payload is None:
            raise CorruptEntryError(key, "content attribute is not binary", self.backend_name)

        try:
            return load_entry(bytes(payload), key)
        except SerializationError as e:
            raise CorruptEntryError(key, str(e), self.backend_name) from e

    def write_entry(self, key: str, entry: Entry) -> bool:
        """Put the encoded entry, overwriting any existing item.

        Args:
            key: Namespaced cache key
            entry: Entry to store

        Returns:
            True once the put succeeds
        """
        item = {
            self.hash_key_attribute: key,
            CONTENT_KEY: dump_entry(entry, self.serializer),
        }
        if entry.expires_at is not None:
            item[self.ttl_attribute] = math.floor(entry.expires_at)

        self.client.put_item(
            TableName=self.table_name,
            Item={name: self._serializer.serialize(value) for name, value in item.items()},
        )
        return True

    def delete_entry(self, key: str) -> bool:
        """Delete the item for a key. Missing items are not an error.

        Args:
            key: Namespaced cache key

        Returns:
            True once the delete succeeds
        """
        self.client.delete_item(TableName=self.table_name, Key=self._key(key))
        return True

    def health_check(self) -> bool:
        """Check that the table exists and is reachable.

        Returns:
            True if the table can be described and is active
        """
        try:
            response = self.client.describe_table(TableName=self.table_name)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"DynamoDB health check failed for table {self.table_name}: {e}")
            return False
        return response.get("Table", {}).get("TableStatus") == "ACTIVE"

    def _key(self, key: str) -> dict[str, Any]:
        return {self.hash_key_attribute: self._serializer.serialize(key)}

    def __repr__(self) -> str:
        return (
            f"DynamoStore(table_name={self.table_name!r}, "
            f"hash_key_attribute={self.hash_key_attribute!r}, "
            f"ttl_attribute={self.ttl_attribute!r}, "
            f"consistent_read={self.consistent_read!r})"
        )


def create_dynamo_client(
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    **kwargs: Any,
) -> Any:
    """Create a DynamoDB client using boto3's default credential chain.

    Args:
        region_name: AWS region (default: resolved by boto3)
        endpoint_url: Custom endpoint, e.g. DynamoDB Local
        **kwargs: Additional arguments passed to ``boto3.client``

    Returns:
        A boto3 DynamoDB client
    """
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
    return boto3.client("dynamodb", region_name=region_name, **kwargs)


def create_dynamo_store(
    table_name: str,
    client: Optional[Any] = None,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    **kwargs: Any,
) -> DynamoStore:
    """Factory function to create a DynamoStore instance.

    A default client is built with ``create_dynamo_client`` when none is
    given.

    Args:
        table_name: DynamoDB table name
        client: DynamoDB client (optional)
        region_name: Region for the default client
        endpoint_url: Endpoint for the default client
        **kwargs: Additional arguments passed to DynamoStore

    Returns:
        Configured DynamoStore instance

    Example:
        ```python
        from dynamo_cache.backends import create_dynamo_store

        store = create_dynamo_store("CacheTable", namespace="web", expires_in=3600)
        ```
    """
    if client is None:
        client = create_dynamo_client(region_name=region_name, endpoint_url=endpoint_url)
        logger.info(f"Created default DynamoDB client for table {table_name}")
    return DynamoStore(table_name=table_name, client=client, **kwargs)
