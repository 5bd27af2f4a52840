"""Transaction Store Port - Domain interface for the shared fact cache.

Validators of every protocol stage read and write transaction facts through
this port. Adapters provide Redis or in-memory backends.

Architecture: Hexagonal - Port interface in domain layer
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional


class TransactionStoreError(Exception):
    """Raised when the cache is unreachable or a stored fact cannot be decoded."""
    pass


class TransactionStorePort(ABC):
    """Port interface for reading and writing transaction facts.

    Values are opaque structured data (objects, sequences, scalars). They are
    serialized on write and deserialized on read. Each write carries its own
    time-to-live; there is no multi-key atomicity.

    A missing key is a valid outcome: ``get`` returns None and callers treat
    the fact as not yet known.

    Example Usage:
        store = RedisTransactionStore.from_url("redis://localhost:6379/0")

        await store.set(txn_id, Fact.QUOTED_PRICE, 240.0)
        price = await store.get(txn_id, Fact.QUOTED_PRICE)
    """

    default_ttl: int = 3600

    @abstractmethod
    async def get(self, transaction_id: str, key: str) -> Optional[Any]:
        """Read a fact.

        Args:
            transaction_id: Transaction the fact belongs to
            key: Fact name

        Returns:
            Deserialized value, or None if the fact is absent or expired

        Raises:
            TransactionStoreError: If the cache fails or the value is malformed
        """
        pass

    @abstractmethod
    async def set(
        self,
        transaction_id: str,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
    ) -> None:
        """Write a fact.

        Args:
            transaction_id: Transaction the fact belongs to
            key: Fact name
            value: JSON-serializable value
            ttl: Time-to-live in seconds (None uses the store default)

        Raises:
            TransactionStoreError: If the cache fails or value is not serializable
        """
        pass

    async def set_many(
        self,
        transaction_id: str,
        facts: Mapping[str, Any],
        ttl: Optional[int] = None,
    ) -> None:
        """Write several independent facts together.

        The writes are issued concurrently and all awaited before returning.
        Readers may observe them in any order.
        """
        await asyncio.gather(*(
            self.set(transaction_id, key, value, ttl=ttl)
            for key, value in facts.items()
        ))

    @abstractmethod
    async def ping(self) -> bool:
        """Check the backend is reachable."""
        pass

    async def close(self) -> None:
        """Release backend connections."""
        return None
