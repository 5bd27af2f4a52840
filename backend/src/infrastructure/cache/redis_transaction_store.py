"""Redis Transaction Store - Implementation of TransactionStorePort using redis-py.

Facts are stored as JSON text under ``<transaction_id>_<fact>`` keys with a
per-key expiry. Cache I/O errors are not retried; they surface as
TransactionStoreError so the calling validator can report them.

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import json
import logging
from typing import Any, Optional

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from domain.transactions.facts import fact_key
from domain.transactions.ports.transaction_store_port import (
    TransactionStorePort,
    TransactionStoreError,
)

logger = logging.getLogger(__name__)


class RedisTransactionStore(TransactionStorePort):
    """Transaction store backed by a shared Redis instance.

    Example:
        store = RedisTransactionStore.from_url(
            settings.REDIS_URL,
            default_ttl=settings.TTL_IN_SECONDS,
        )
        await store.set("txn-1", "quotedPrice", 240.0)
    """

    def __init__(self, client: aioredis.Redis, default_ttl: int = 3600):
        """Initialize adapter with an asyncio Redis client.

        Args:
            client: redis.asyncio client created with decode_responses=True
            default_ttl: Expiry in seconds used when a write gives none
        """
        self.client = client
        self.default_ttl = default_ttl

    @classmethod
    def from_url(
        cls,
        redis_url: str,
        default_ttl: int = 3600,
        socket_timeout: Optional[float] = None,
    ) -> "RedisTransactionStore":
        """Create a store from a Redis connection URL."""
        client = aioredis.Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=socket_timeout,
        )
        logger.info(f"Initialized Redis transaction store: default_ttl={default_ttl}s")
        return cls(client, default_ttl=default_ttl)

    async def get(self, transaction_id: str, key: str) -> Optional[Any]:
        name = fact_key(transaction_id, key)
        try:
            raw = await self.client.get(name)
        except RedisError as e:
            raise TransactionStoreError(f"Failed to read '{name}': {e}") from e

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            raise TransactionStoreError(f"Stored value for '{name}' is not valid JSON: {e}") from e

    async def set(
        self,
        transaction_id: str,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
    ) -> None:
        name = fact_key(transaction_id, key)
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise TransactionStoreError(f"Value for '{name}' is not serializable: {e}") from e

        try:
            await self.client.set(name, payload, ex=ttl or self.default_ttl)
        except RedisError as e:
            raise TransactionStoreError(f"Failed to write '{name}': {e}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            raise TransactionStoreError(f"Redis ping failed: {e}") from e

    async def close(self) -> None:
        await self.client.aclose()
