"""Transaction store adapters (Redis and in-memory)."""

from .redis_transaction_store import RedisTransactionStore
from .memory_transaction_store import InMemoryTransactionStore

__all__ = ["RedisTransactionStore", "InMemoryTransactionStore"]
