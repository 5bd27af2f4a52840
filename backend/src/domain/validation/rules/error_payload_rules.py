"""Reduced-availability error payload rules for /on_select"""

import json
from typing import Any

from domain.transactions.facts import Fact

from ..constants import REDUCED_AVAILABILITY_ERROR_CODE, Stage
from ..messages import Order
from ..models import ErrorCode, RuleResult, StageContext
from ..port import FieldValidator
from ..utils import optional_decimal


class ErrorPayloadValidator(FieldValidator):
    """Check the out-of-stock error payload against the quote.

    Runs only when ``order.error.code`` is 40002. The error message must be a
    JSON array of ``{dynamic_item_id, item_id}`` entries that agrees with the
    breakup lines whose count dropped below the quantity selected in /select.
    """

    name = "error_payload"
    subject = "error message"
    default_code = ErrorCode.OUT_OF_STOCK_PAYLOAD

    async def check(self, order: Order, ctx: StageContext, result: RuleResult) -> None:
        error = order.error
        if error is None or str(error.code) != REDUCED_AVAILABILITY_ERROR_CODE:
            return

        try:
            payload = json.loads(error.message)
        except (TypeError, ValueError):
            result.errors.add(
                ErrorCode.OUT_OF_STOCK_PAYLOAD,
                f"The error.message provided in {Stage.ON_SELECT_OUT_OF_STOCK} should be a valid JSON array"
            )
            return

        if not isinstance(payload, list):
            result.errors.add(
                ErrorCode.OUT_OF_STOCK_PAYLOAD,
                f"The error.message provided in {Stage.ON_SELECT_OUT_OF_STOCK} should be an array"
            )
            return

        entries = [entry for entry in payload if isinstance(entry, dict)]
        breakup = order.quote.breakup if order.quote else []
        breakup_parent_ids = [line.parent_item_id for line in breakup if line.parent_item_id]
        dynamic_ids = [entry.get("dynamic_item_id") for entry in entries]

        for dynamic_id in _difference(dynamic_ids, breakup_parent_ids):
            result.errors.add(
                ErrorCode.OUT_OF_STOCK_PAYLOAD,
                f"Dynamic_item_id: {dynamic_id} doesn't exist in any quote.breakup.item.parent_item_ids"
            )

        selected = await ctx.fact(Fact.ITEM_ID_LIST)
        if selected is None:
            return

        reduced = [
            line for line in breakup
            if line.item_quantity is not None and _is_reduced(line.count, selected.get(line.item_id))
        ]
        reduced_parent_ids = [line.parent_item_id for line in reduced if line.parent_item_id]
        reduced_item_ids = {line.item_id for line in reduced}
        payload_item_ids = {entry.get("item_id") for entry in entries}

        for parent_id in _difference(reduced_parent_ids, dynamic_ids):
            result.errors.add(
                ErrorCode.OUT_OF_STOCK_PAYLOAD,
                f"Dynamic_item_id: {parent_id} is missing from error payload"
            )

        for entry in entries:
            item_id = entry.get("item_id")
            if item_id and item_id not in reduced_item_ids:
                result.errors.add(
                    ErrorCode.OUT_OF_STOCK_PAYLOAD,
                    f"Item isn't reduced {item_id} in error message is not present in fulfillments/items"
                )

        for line in reduced:
            if line.item_id not in payload_item_ids:
                result.errors.add(
                    ErrorCode.OUT_OF_STOCK_PAYLOAD,
                    f"message/order/items for item {line.item_id} does not match in error message"
                )


def _is_reduced(count: Any, selected_quantity: Any) -> bool:
    response_count = optional_decimal(count)
    requested = optional_decimal(selected_quantity)
    return response_count is not None and requested is not None and response_count < requested


def _difference(left: list, right: list) -> list:
    """Unique values of ``left`` absent from ``right``, in first-seen order."""
    exclude = set(right)
    seen = set()
    missing = []
    for value in left:
        if value not in exclude and value not in seen:
            seen.add(value)
            missing.append(value)
    return missing
