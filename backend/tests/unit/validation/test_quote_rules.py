"""Unit tests for /on_select quote reconciliation"""

import pytest

from domain.transactions.facts import Fact
from domain.validation.rules import QuoteValidator
from fixtures.on_select import (
    TXN_ID,
    make_line,
    make_order,
    make_quote,
    parse_order,
    seed_select_facts,
    stage_context,
)


def item_line(count=2, unit_price=50, value=100, item_id="I1", **kwargs):
    return make_line("item", item_id, value, title="Organic Apples", count=count, unit_price=unit_price, **kwargs)


def order_with_quote(total, *lines, **overrides):
    return parse_order(make_order(quote=make_quote(total, list(lines)), **overrides))


async def check(store, order, non_serviceable=False):
    return await QuoteValidator().run(order, stage_context(store, non_serviceable=non_serviceable))


class TestItemLines:
    """Test item lines against the /select selection"""

    @pytest.mark.asyncio
    async def test_matching_quote_has_no_issues(self, store):
        await seed_select_facts(store)

        result = await check(store, parse_order())

        assert len(result.errors) == 0

    @pytest.mark.asyncio
    async def test_count_change_reports_single_count_issue(self, store):
        await seed_select_facts(store)

        result = await check(store, order_with_quote(100, item_line(count="3")))

        count_issues = [i for i in result.errors if i.description.startswith("Count")]
        assert len(count_issues) == 1
        assert count_issues[0].code == 20000
        assert count_issues[0].description == "Count of item with id: I1 does not match in /select & /on_select"

    @pytest.mark.asyncio
    async def test_unit_and_total_price_mismatch(self, store):
        await seed_select_facts(store)

        result = await check(store, order_with_quote(100, item_line(unit_price=45)))

        assert [i.description for i in result.errors] == ["Item's unit and total price mismatch for id: I1"]

    @pytest.mark.asyncio
    async def test_missing_unit_price(self, store):
        await seed_select_facts(store)
        line = make_line("item", "I1", 100, title="Organic Apples", count=2)

        result = await check(store, order_with_quote(100, line))

        assert [i.description for i in result.errors] == ["Item's unit price missing in quote.breakup for item id I1"]

    @pytest.mark.asyncio
    async def test_unknown_item_line(self, store):
        await seed_select_facts(store)

        result = await check(
            store,
            order_with_quote(130, item_line(), item_line(count=1, unit_price=30, value=30, item_id="I9")),
        )

        descriptions = [i.description for i in result.errors]
        assert "item with id: I9 in quote.breakup[1] does not exist in items[]" in descriptions

    @pytest.mark.asyncio
    async def test_item_prices_are_recorded(self, store):
        await seed_select_facts(store)

        await check(store, parse_order())

        assert await store.get(TXN_ID, Fact.ITEM_PRICE_MAP) == {"I1": 100.0}
        assert await store.get(TXN_ID, Fact.QUOTED_PRICE) == 100.0


class TestTotals:
    """Test the breakup total and the /select item total"""

    @pytest.mark.asyncio
    async def test_perturbed_line_reports_total_mismatch(self, store):
        await seed_select_facts(store)
        delivery = make_line("delivery", "F1", "30.00", title="Delivery charges")

        result = await check(store, order_with_quote(130, item_line(), delivery))
        assert len(result.errors) == 0

        delivery["price"]["value"] = "31.00"
        result = await check(store, order_with_quote(130, item_line(), delivery))

        issues = result.errors.issues
        assert len(issues) == 1
        assert issues[0].description == "quote.price.value 130 does not match with the price breakup 131.00"

    @pytest.mark.asyncio
    async def test_totals_compare_after_half_up_rounding(self, store):
        await seed_select_facts(store)
        packing = make_line("packing", "F1", "0.50", title="Packing charges")

        result = await check(store, order_with_quote("101.00", item_line(), packing))

        assert len(result.errors) == 0

    @pytest.mark.asyncio
    async def test_negative_half_rounds_towards_positive(self, store):
        await seed_select_facts(store)
        discount = make_line("discount", "I1", "-100.50", title="Discount")

        result = await check(store, order_with_quote(0, item_line(), discount))

        assert len(result.errors) == 0

    @pytest.mark.asyncio
    async def test_selected_price_mismatch(self, store):
        await seed_select_facts(store, **{Fact.SELECTED_PRICE: 120})

        result = await check(store, parse_order())

        assert [i.description for i in result.errors] == [
            "Quoted Price in /on_select INR 100 does not match with the total price of items in /select INR 120"
        ]

    @pytest.mark.asyncio
    async def test_inclusive_tax_counts_towards_item_total(self, store):
        await seed_select_facts(store, **{Fact.SELECTED_PRICE: 105})
        tax = make_line("tax", "I1", 5, title="Tax")

        result = await check(store, order_with_quote(105, item_line(), tax))

        assert len(result.errors) == 0

    @pytest.mark.asyncio
    async def test_food_and_beverage_tax_is_excluded(self, store):
        await seed_select_facts(store, **{Fact.ITEM_CATEGORIES: {"I1": "F&B"}})
        tax = make_line("tax", "I1", 5, title="Tax")

        result = await check(store, order_with_quote(105, item_line(), tax))

        assert len(result.errors) == 0

    @pytest.mark.asyncio
    async def test_non_numeric_line_price(self, store):
        await seed_select_facts(store)
        packing = make_line("packing", "F1", "free", title="Packing charges")

        result = await check(store, order_with_quote(100, item_line(), packing))

        assert [i.description for i in result.errors] == [
            "quote.breakup[1].price.value must be a number in /on_select"
        ]


class TestChargeLines:
    """Test titles and references of non-item lines"""

    @pytest.mark.asyncio
    async def test_unknown_title_and_title_type(self, store):
        await seed_select_facts(store)
        line = make_line("surcharge", "F1", 0, title="Surge fee")

        result = await check(store, order_with_quote(100, item_line(), line))

        descriptions = [i.description for i in result.errors]
        assert descriptions == [
            'Quote breakup Payment title type "surcharge" is not as per the API contract',
            'Quote breakup Payment title "Surge fee" is not as per the API Contract',
        ]

    @pytest.mark.asyncio
    async def test_title_under_wrong_title_type(self, store):
        await seed_select_facts(store)
        line = make_line("packing", "F1", 0, title="Delivery charges")

        result = await check(store, order_with_quote(100, item_line(), line))

        assert [i.description for i in result.errors] == [
            'Quote breakup Payment title "Delivery charges" comes under the title type "delivery"'
        ]

    @pytest.mark.asyncio
    async def test_tax_line_with_unknown_item(self, store):
        await seed_select_facts(store)
        tax = make_line("tax", "I9", 0, title="Tax")

        result = await check(store, order_with_quote(100, item_line(), tax))

        assert len(result.errors) == 1
        assert "item with id: I9 in quote.breakup[1]" in result.errors.issues[0].description

    @pytest.mark.asyncio
    async def test_charge_line_with_unknown_fulfillment(self, store):
        await seed_select_facts(store)
        await store.set(TXN_ID, Fact.FULFILLMENT_ID_LIST, ["F1"])
        delivery = make_line("delivery", "F7", 0, title="Delivery charges")

        result = await check(store, order_with_quote(100, item_line(), delivery))

        assert [i.description for i in result.errors] == [
            "invalid id: F7 in delivery line item (should be a valid fulfillment_id)"
        ]

    @pytest.mark.asyncio
    async def test_delivery_charge_on_non_serviceable_fulfillment(self, store):
        await seed_select_facts(store)
        delivery = make_line("delivery", "F1", 30, title="Delivery charges")

        result = await check(store, order_with_quote(130, item_line(), delivery), non_serviceable=True)

        assert [i.description for i in result.errors] == [
            "Delivery charges not applicable for non-serviceable locations"
        ]

    @pytest.mark.asyncio
    async def test_unknown_parent_item_id(self, store):
        await seed_select_facts(store)

        result = await check(store, order_with_quote(100, item_line(parent_item_id="DI1")))

        assert [i.description for i in result.errors] == [
            "parent_item_id 'DI1' in quote.breakup[0] is not present in items array"
        ]


class TestStoredQuote:
    """Test the quote recorded for later stages"""

    @pytest.mark.asyncio
    async def test_item_quantity_block_is_dropped(self, store):
        await seed_select_facts(store)

        await check(store, parse_order())

        stored = await store.get(TXN_ID, Fact.QUOTE_OBJECT)
        line = stored["breakup"][0]
        assert "quantity" not in line["item"]
        assert line["@ondc/org/item_quantity"] == {"count": 2}
        assert stored["ttl"] == "P1D"


class TestFactReads:
    """Test which facts the quote rules depend on"""

    @pytest.mark.asyncio
    async def test_item_fulfillment_map_is_not_needed(self, store):
        await seed_select_facts(store)
        store.fail_on_get.add(Fact.ITEM_FULFILLMENT_MAP)

        result = await check(store, parse_order())

        assert result.failed is False
        assert len(result.errors) == 0
