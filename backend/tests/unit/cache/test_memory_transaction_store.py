"""Unit tests for InMemoryTransactionStore"""

import pytest

from domain.transactions.ports import TransactionStoreError
from infrastructure.cache import InMemoryTransactionStore


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestInMemoryTransactionStore:
    """Test the dict-backed store"""

    @pytest.mark.asyncio
    async def test_round_trip(self):
        store = InMemoryTransactionStore()

        await store.set("txn-1", "itemIdList", {"I1": 2})

        assert await store.get("txn-1", "itemIdList") == {"I1": 2}
        assert store.keys() == ["txn-1_itemIdList"]

    @pytest.mark.asyncio
    async def test_missing_key_is_none(self):
        assert await InMemoryTransactionStore().get("txn-1", "providerId") is None

    @pytest.mark.asyncio
    async def test_transactions_are_isolated(self):
        store = InMemoryTransactionStore()

        await store.set("txn-1", "providerId", "P1")

        assert await store.get("txn-2", "providerId") is None

    @pytest.mark.asyncio
    async def test_values_expire(self):
        clock = FakeClock()
        store = InMemoryTransactionStore(default_ttl=60, clock=clock)
        await store.set("txn-1", "quotedPrice", 240.0)
        await store.set("txn-1", "providerId", "P1", ttl=600)

        clock.now += 61

        assert await store.get("txn-1", "quotedPrice") is None
        assert await store.get("txn-1", "providerId") == "P1"

    @pytest.mark.asyncio
    async def test_set_many(self):
        store = InMemoryTransactionStore()

        await store.set_many("txn-1", {"providerId": "P1", "providerLoc": "L1"})

        assert store.keys() == ["txn-1_providerId", "txn-1_providerLoc"]

    @pytest.mark.asyncio
    async def test_malformed_value(self):
        store = InMemoryTransactionStore()
        store.put_raw("txn-1", "quoteObject", "{broken")

        with pytest.raises(TransactionStoreError, match="not valid JSON"):
            await store.get("txn-1", "quoteObject")

    @pytest.mark.asyncio
    async def test_unserializable_value(self):
        with pytest.raises(TransactionStoreError, match="not serializable"):
            await InMemoryTransactionStore().set("txn-1", "quoteObject", {"when": object()})

    @pytest.mark.asyncio
    async def test_fault_injection(self):
        store = InMemoryTransactionStore()
        store.fail_on_get.add("itemIdList")
        store.fail_on_set.add("quotedPrice")

        with pytest.raises(TransactionStoreError):
            await store.get("txn-1", "itemIdList")
        with pytest.raises(TransactionStoreError):
            await store.set("txn-1", "quotedPrice", 1)
        assert await store.ping() is True
