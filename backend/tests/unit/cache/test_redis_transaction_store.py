"""Unit tests for RedisTransactionStore

The redis client is replaced with an AsyncMock; no server is needed.
"""

from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from domain.transactions.ports import TransactionStoreError
from infrastructure.cache import RedisTransactionStore


@pytest.fixture
def client():
    return AsyncMock()


@pytest.fixture
def redis_store(client):
    return RedisTransactionStore(client, default_ttl=3600)


class TestRedisTransactionStore:
    """Test the Redis adapter"""

    @pytest.mark.asyncio
    async def test_set_serializes_with_default_ttl(self, redis_store, client):
        await redis_store.set("txn-1", "itemIdList", {"I1": 2})

        client.set.assert_awaited_once_with("txn-1_itemIdList", '{"I1": 2}', ex=3600)

    @pytest.mark.asyncio
    async def test_set_with_explicit_ttl(self, redis_store, client):
        await redis_store.set("txn-1", "providerId", "P1", ttl=120)

        client.set.assert_awaited_once_with("txn-1_providerId", '"P1"', ex=120)

    @pytest.mark.asyncio
    async def test_get_deserializes(self, redis_store, client):
        client.get.return_value = '{"I1": 2}'

        assert await redis_store.get("txn-1", "itemIdList") == {"I1": 2}
        client.get.assert_awaited_once_with("txn-1_itemIdList")

    @pytest.mark.asyncio
    async def test_get_missing_key(self, redis_store, client):
        client.get.return_value = None

        assert await redis_store.get("txn-1", "itemIdList") is None

    @pytest.mark.asyncio
    async def test_get_malformed_value(self, redis_store, client):
        client.get.return_value = "{broken"

        with pytest.raises(TransactionStoreError, match="not valid JSON"):
            await redis_store.get("txn-1", "itemIdList")

    @pytest.mark.asyncio
    async def test_connection_errors_are_wrapped(self, redis_store, client):
        client.get.side_effect = RedisConnectionError("Connection refused")
        client.set.side_effect = RedisConnectionError("Connection refused")

        with pytest.raises(TransactionStoreError, match="Failed to read 'txn-1_itemIdList'"):
            await redis_store.get("txn-1", "itemIdList")
        with pytest.raises(TransactionStoreError, match="Failed to write 'txn-1_itemIdList'"):
            await redis_store.set("txn-1", "itemIdList", {})

    @pytest.mark.asyncio
    async def test_set_many_writes_every_fact(self, redis_store, client):
        await redis_store.set_many("txn-1", {"providerId": "P1", "providerLoc": "L1"}, ttl=60)

        assert client.set.await_count == 2
        names = sorted(call.args[0] for call in client.set.await_args_list)
        assert names == ["txn-1_providerId", "txn-1_providerLoc"]

    @pytest.mark.asyncio
    async def test_ping_and_close(self, redis_store, client):
        client.ping.return_value = True

        assert await redis_store.ping() is True
        await redis_store.close()

        client.aclose.assert_awaited_once()

    def test_from_url(self):
        with patch("infrastructure.cache.redis_transaction_store.aioredis.Redis.from_url") as from_url:
            store = RedisTransactionStore.from_url("redis://cache:6379/0", default_ttl=900, socket_timeout=2.0)

        from_url.assert_called_once_with("redis://cache:6379/0", decode_responses=True, socket_timeout=2.0)
        assert store.default_ttl == 900
        assert store.client is from_url.return_value
