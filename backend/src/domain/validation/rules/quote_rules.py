"""Quote rules for /on_select"""

from decimal import Decimal
from typing import Any, Optional

from domain.transactions.facts import Fact

from ..constants import (
    DELIVERY_TITLE_TYPE,
    FULFILLMENT_REFERENCING_TITLE_TYPES,
    ITEM_REFERENCING_TITLE_TYPES,
    ITEM_TITLE_TYPE,
    OFFER_TITLE_TYPE,
    PAYMENT_TITLE_TYPES,
    TAX_NOT_INCLUSIVE_CATEGORIES,
    Stage,
)
from ..messages import BreakupLine, Order, Quote
from ..models import ErrorCode, RuleResult, StageContext
from ..port import FieldValidator
from ..utils import json_number, optional_decimal, round_half_up


class QuoteValidator(FieldValidator):
    """Reconcile the quote breakup with itself and with /select.

    Rules:
    - no positive delivery charge when a fulfillment is non-serviceable
    - every title / title type pair comes from the payment title table
    - item lines: known item, unit price x count == line total, count equals
      the quantity selected in /select
    - tax and discount lines reference an item, other charges a fulfillment
    - rounded breakup total equals the rounded quoted price
    - item lines plus non-exempt tax equal the /select item total
    - every breakup parent_item_id appears among the order items

    Facts written: cleaned quote, quoted price, item id -> line price.
    """

    name = "quote"
    subject = "quote"

    async def check(self, order: Order, ctx: StageContext, result: RuleResult) -> None:
        selected = await ctx.fact(Fact.ITEM_ID_LIST)
        categories = await ctx.fact(Fact.ITEM_CATEGORIES) or {}
        selected_price = await ctx.fact(Fact.SELECTED_PRICE)
        fulfillment_ids = await ctx.fact(Fact.FULFILLMENT_ID_LIST)

        quote = order.quote
        if quote is None:
            result.errors.add(ErrorCode.GENERIC, f"quote is missing in /{Stage.ON_SELECT}")
            return

        if ctx.non_serviceable:
            for line in quote.breakup:
                value = _line_value(line)
                if line.title_type == DELIVERY_TITLE_TYPE and value is not None and value > 0:
                    result.errors.add(
                        ErrorCode.GENERIC,
                        "Delivery charges not applicable for non-serviceable locations"
                    )

        breakup_total = Decimal(0)
        items_total = Decimal(0)
        item_prices: dict[str, float] = {}

        for index, line in enumerate(quote.breakup):
            title_type = line.title_type
            item_id = line.item_id
            value = _line_value(line)

            self._check_title(line, result)

            if value is None:
                result.errors.add(
                    ErrorCode.GENERIC,
                    f"quote.breakup[{index}].price.value must be a number in /{Stage.ON_SELECT}"
                )

            if title_type == ITEM_TITLE_TYPE:
                self._check_item_line(line, index, value, selected, result)
                if value is not None:
                    item_prices[item_id] = json_number(abs(value))

            if title_type in ITEM_REFERENCING_TITLE_TYPES:
                if selected is not None and item_id not in selected:
                    result.errors.add(
                        ErrorCode.GENERIC,
                        f"item with id: {item_id} in quote.breakup[{index}] does not exist in items[] "
                        "(should be a valid item id)"
                    )

            if title_type in FULFILLMENT_REFERENCING_TITLE_TYPES:
                if fulfillment_ids is not None and item_id not in fulfillment_ids:
                    result.errors.add(
                        ErrorCode.GENERIC,
                        f"invalid id: {item_id} in {title_type} line item (should be a valid fulfillment_id)"
                    )

            if value is None:
                continue
            breakup_total += value
            if title_type == ITEM_TITLE_TYPE or (
                title_type == "tax" and categories.get(item_id) not in TAX_NOT_INCLUSIVE_CATEGORIES
            ):
                items_total += value

        breakup_total = round_half_up(breakup_total, 2)
        quoted_price = optional_decimal(quote.price.value if quote.price else None)
        if quoted_price is None:
            result.errors.add(
                ErrorCode.GENERIC,
                f"quote.price.value must be a number in /{Stage.ON_SELECT}"
            )
        elif round_half_up(breakup_total) != round_half_up(quoted_price):
            result.errors.add(
                ErrorCode.GENERIC,
                f"quote.price.value {quoted_price} does not match with the price breakup {breakup_total}"
            )

        if _is_number(selected_price) and items_total != Decimal(str(selected_price)):
            result.errors.add(
                ErrorCode.GENERIC,
                f"Quoted Price in /{Stage.ON_SELECT} INR {items_total} does not match with the total "
                f"price of items in /{Stage.SELECT} INR {selected_price}"
            )

        result.facts[Fact.QUOTE_OBJECT] = _stored_quote(quote)
        result.facts[Fact.ITEM_PRICE_MAP] = item_prices
        if quoted_price is not None:
            result.facts[Fact.QUOTED_PRICE] = json_number(quoted_price)

        item_parent_ids = {item.parent_item_id for item in order.items if item.parent_item_id}
        for index, line in enumerate(quote.breakup):
            parent_id = line.parent_item_id
            if parent_id and parent_id not in item_parent_ids:
                result.errors.add(
                    ErrorCode.GENERIC,
                    f"parent_item_id '{parent_id}' in quote.breakup[{index}] is not present in items array"
                )

    def _check_title(self, line: BreakupLine, result: RuleResult) -> None:
        title_type = line.title_type
        if title_type in (ITEM_TITLE_TYPE, OFFER_TITLE_TYPE):
            return

        if title_type not in PAYMENT_TITLE_TYPES.values():
            result.errors.add(
                ErrorCode.GENERIC,
                f'Quote breakup Payment title type "{title_type}" is not as per the API contract'
            )

        title = (line.title or "").lower().strip()
        if title not in PAYMENT_TITLE_TYPES:
            result.errors.add(
                ErrorCode.GENERIC,
                f'Quote breakup Payment title "{line.title}" is not as per the API Contract'
            )
        elif PAYMENT_TITLE_TYPES[title] != title_type:
            result.errors.add(
                ErrorCode.GENERIC,
                f'Quote breakup Payment title "{line.title}" comes under the title type '
                f'"{PAYMENT_TITLE_TYPES[title]}"'
            )

    def _check_item_line(
        self,
        line: BreakupLine,
        index: int,
        value: Optional[Decimal],
        selected: Optional[dict[str, Any]],
        result: RuleResult,
    ) -> None:
        item_id = line.item_id
        if selected is not None and item_id not in selected:
            result.errors.add(
                ErrorCode.GENERIC,
                f"item with id: {item_id} in quote.breakup[{index}] does not exist in items[]"
            )

        count = optional_decimal(line.count)
        if line.item is None:
            result.errors.add(
                ErrorCode.GENERIC,
                f"Item's unit price missing in quote.breakup for item id {item_id}"
            )
        else:
            unit_price = optional_decimal(line.item.price.value if line.item.price else None)
            if unit_price is None or count is None or value is None or unit_price * count != value:
                result.errors.add(
                    ErrorCode.GENERIC,
                    f"Item's unit and total price mismatch for id: {item_id}"
                )

        if selected is not None and item_id in selected:
            if count is None or count != optional_decimal(selected[item_id]):
                result.errors.add(
                    ErrorCode.GENERIC,
                    f"Count of item with id: {item_id} does not match in /{Stage.SELECT} & /{Stage.ON_SELECT}"
                )


def _line_value(line: BreakupLine) -> Optional[Decimal]:
    return optional_decimal(line.price.value if line.price else None)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _stored_quote(quote: Quote) -> dict[str, Any]:
    """Quote as received, minus the item quantity block of item lines."""
    stored = quote.model_dump(mode="json", by_alias=True, exclude_unset=True)
    for line in stored.get("breakup", []):
        if line.get("@ondc/org/title_type") == ITEM_TITLE_TYPE and isinstance(line.get("item"), dict):
            line["item"].pop("quantity", None)
    return stored
