"""Unit tests for the stage context check"""

import pytest

from domain.validation.context_checker import ContextCheckError, StageContextChecker
from fixtures.on_select import BASE_CONTEXT, SELECT_TIMESTAMP, TXN_ID, seed_select_facts


def context(**overrides):
    ctx = dict(BASE_CONTEXT)
    ctx.update(overrides)
    return ctx


class TestStageContextChecker:
    """Test /on_select context against the stored /select request"""

    @pytest.mark.asyncio
    async def test_matching_context_passes(self, store):
        await seed_select_facts(store)

        await StageContextChecker().check(context(), store)

    @pytest.mark.asyncio
    async def test_passes_without_stored_request(self, store):
        await StageContextChecker().check(context(message_id="msg-unrelated"), store)

    @pytest.mark.asyncio
    async def test_missing_context(self, store):
        with pytest.raises(ContextCheckError, match="context is missing in /on_select"):
            await StageContextChecker().check(None, store)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["transaction_id", "message_id", "timestamp", "bap_id", "bpp_id"])
    async def test_required_fields(self, store, field):
        ctx = context()
        del ctx[field]

        with pytest.raises(ContextCheckError, match=f"context.{field} is missing"):
            await StageContextChecker().check(ctx, store)

    @pytest.mark.asyncio
    async def test_wrong_action(self, store):
        with pytest.raises(ContextCheckError, match="context.action should be 'on_select'"):
            await StageContextChecker().check(context(action="select"), store)

    @pytest.mark.asyncio
    async def test_malformed_timestamp(self, store):
        with pytest.raises(ContextCheckError, match="not a valid RFC 3339 timestamp"):
            await StageContextChecker().check(context(timestamp="yesterday"), store)

    @pytest.mark.asyncio
    async def test_message_id_mismatch(self, store):
        await seed_select_facts(store)

        with pytest.raises(ContextCheckError, match="context.message_id mismatches in /select and /on_select"):
            await StageContextChecker().check(context(message_id="msg-other"), store)

    @pytest.mark.asyncio
    async def test_domain_mismatch(self, store):
        await seed_select_facts(store)

        with pytest.raises(ContextCheckError, match="context.domain mismatches"):
            await StageContextChecker().check(context(domain="ONDC:RET11"), store)

    @pytest.mark.asyncio
    async def test_timestamp_not_after_select(self, store):
        await seed_select_facts(store)

        with pytest.raises(ContextCheckError, match="should be after /select"):
            await StageContextChecker().check(context(timestamp=SELECT_TIMESTAMP), store)

    @pytest.mark.asyncio
    async def test_other_transactions_are_not_compared(self, store):
        await seed_select_facts(store)

        await StageContextChecker().check(context(transaction_id=f"{TXN_ID}-2", message_id="msg-other"), store)
