"""In-memory Transaction Store for tests and local development.

Behaves like the Redis adapter: values round-trip through JSON and expire
after their time-to-live. Fault injection sets let tests simulate an
unavailable cache for specific facts.
"""

import json
import logging
import time
from typing import Any, Callable, Optional

from domain.transactions.facts import fact_key
from domain.transactions.ports.transaction_store_port import (
    TransactionStorePort,
    TransactionStoreError,
)

logger = logging.getLogger(__name__)


class InMemoryTransactionStore(TransactionStorePort):
    """Dict-backed transaction store.

    Usage:
        store = InMemoryTransactionStore()
        await store.set("txn-1", "providerId", "P1")

        # Simulate cache failure for one fact
        store.fail_on_get.add("itemIdList")
    """

    def __init__(self, default_ttl: int = 3600, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._data: dict[str, tuple[str, float]] = {}
        self.fail_on_get: set[str] = set()
        self.fail_on_set: set[str] = set()

    async def get(self, transaction_id: str, key: str) -> Optional[Any]:
        if key in self.fail_on_get:
            raise TransactionStoreError(f"Simulated read failure for '{key}'")

        name = fact_key(transaction_id, key)
        entry = self._data.get(name)
        if entry is None:
            return None

        raw, expires_at = entry
        if self._clock() >= expires_at:
            del self._data[name]
            return None

        try:
            return json.loads(raw)
        except ValueError as e:
            raise TransactionStoreError(f"Stored value for '{name}' is not valid JSON: {e}") from e

    async def set(
        self,
        transaction_id: str,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
    ) -> None:
        if key in self.fail_on_set:
            raise TransactionStoreError(f"Simulated write failure for '{key}'")

        name = fact_key(transaction_id, key)
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise TransactionStoreError(f"Value for '{name}' is not serializable: {e}") from e

        self._data[name] = (payload, self._clock() + (ttl or self.default_ttl))

    def put_raw(self, transaction_id: str, key: str, raw: str, ttl: Optional[int] = None) -> None:
        """Store an already-serialized value (e.g. to plant a malformed fact)."""
        self._data[fact_key(transaction_id, key)] = (raw, self._clock() + (ttl or self.default_ttl))

    def keys(self) -> list[str]:
        return sorted(self._data)

    async def ping(self) -> bool:
        return True
