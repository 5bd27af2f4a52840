"""Item rules for /on_select"""

from domain.transactions.facts import Fact

from ..constants import Stage
from ..messages import Order
from ..models import ErrorCode, RuleResult, StageContext
from ..port import FieldValidator


class ItemValidator(FieldValidator):
    """Validate the items returned against the /select request.

    Rules:
    - every item id must have been selected in /select (skipped while the
      selection is not yet known)
    - every item must reference a fulfillment declared in the order

    Facts written: confirmed item ids (in response order) and the
    item -> fulfillment map.
    """

    name = "items"
    subject = "items"

    async def check(self, order: Order, ctx: StageContext, result: RuleResult) -> None:
        selected = await ctx.fact(Fact.ITEM_ID_LIST)
        selected_ids = set(selected) if selected is not None else None

        fulfillment_ids = {ff.id for ff in order.fulfillments if ff.id}
        confirmed: list[str] = []
        item_fulfillments: dict[str, str] = {}

        for item in order.items:
            if selected_ids is not None and item.id not in selected_ids:
                result.errors.add(
                    ErrorCode.GENERIC,
                    f"Invalid Item Id provided in /{Stage.ON_SELECT}: {item.id}"
                )
            else:
                confirmed.append(item.id)

            if item.fulfillment_id not in fulfillment_ids:
                result.errors.add(
                    ErrorCode.GENERIC,
                    f"fulfillment_id for item {item.id} does not exist in order.fulfillments[]"
                )

            item_fulfillments[item.id] = item.fulfillment_id

        result.facts[Fact.SELECT_ITEM_LIST] = confirmed
        result.facts[Fact.ITEM_FULFILLMENT_MAP] = item_fulfillments
