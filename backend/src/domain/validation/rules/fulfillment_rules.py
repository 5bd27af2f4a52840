"""Fulfillment rules for /on_select"""

from typing import Optional

from domain.transactions.facts import Fact, tracking_fact

from ..constants import (
    DELIVERY_CATEGORIES,
    DOMAIN_ERROR_TYPE,
    NON_SERVICEABLE,
    NON_SERVICEABLE_ERROR_CODE,
    ORDER_DETAILS_FIELDS,
    ORDER_DETAILS_TAG,
    SELF_PICKUP_CATEGORIES,
    SERVICEABILITY_CODES,
    SERVICEABLE,
    TIME_WINDOW_FULFILLMENT_TYPES,
    FulfillmentType,
    Stage,
)
from ..messages import Fulfillment, Order
from ..models import ErrorCode, RuleResult, StageContext
from ..port import FieldValidator
from ..utils import iso_duration_to_seconds, optional_decimal, parse_timestamp


class FulfillmentValidator(FieldValidator):
    """Validate each fulfillment option offered by the seller.

    Rules, per fulfillment in array order:
    - id is mandatory (other checks are skipped without it)
    - TAT is mandatory and must exceed the /on_search time to ship
    - state code must be Serviceable or Non-serviceable
    - category must come from the vocabulary of the fulfillment type
    - Delivery / Self-Pickup time window must be ordered and in the future
    - Buyer-Delivery needs a complete order_details tag
    - tracking must be a boolean
    - id must differ from the provider id

    A non-serviceable fulfillment requires the domain error 30009. The
    non-serviceable flag is handed to the quote rules via ``outputs``.
    """

    name = "fulfillments"
    subject = "fulfillments"

    async def check(self, order: Order, ctx: StageContext, result: RuleResult) -> None:
        time_to_ship = optional_decimal(await ctx.fact(Fact.TIME_TO_SHIP))
        provider_id = order.provider.id if order.provider else None

        fulfillment_ids: list[str] = []
        tat_seconds: dict[str, int] = {}
        non_serviceable = False

        for index, ff in enumerate(order.fulfillments):
            if not ff.id:
                result.errors.add(
                    ErrorCode.GENERIC,
                    f"Fulfillment Id must be present in /{Stage.ON_SELECT}"
                )
                continue
            fulfillment_ids.append(ff.id)

            tat = self._check_tat(ff, index, time_to_ship, result)
            if tat is not None:
                tat_seconds[ff.id] = tat

            code = ff.state_code
            if not code:
                result.errors.add(
                    ErrorCode.GENERIC,
                    f"In Fulfillment{index}, descriptor code is mandatory in /{Stage.ON_SELECT}"
                )
            else:
                if code == NON_SERVICEABLE:
                    non_serviceable = True
                if code not in SERVICEABILITY_CODES:
                    result.errors.add(
                        ErrorCode.GENERIC,
                        "Pre-order fulfillment state codes should be 'Serviceable' or "
                        f"'Non-serviceable' in fulfillments[{index}].state.descriptor.code"
                    )

            self._check_category(ff, index, result)

            if ff.type in TIME_WINDOW_FULFILLMENT_TYPES:
                self._check_time_window(ff, ctx.timestamp, result)

            if ff.type == FulfillmentType.BUYER_DELIVERY:
                self._check_order_details(ff, result)

            if not isinstance(ff.tracking, bool):
                result.errors.add(
                    ErrorCode.GENERIC,
                    f"Tracking must be present for fulfillment ID: {ff.id} in boolean form"
                )
            else:
                result.facts[tracking_fact(ff.id)] = ff.tracking

            if provider_id is not None and ff.id == provider_id:
                result.errors.add(
                    ErrorCode.GENERIC,
                    f"Fulfillment ID can't be equal to Provider ID in /{Stage.ON_SELECT}"
                )

        if non_serviceable:
            error = order.error
            if (
                error is None
                or error.type != DOMAIN_ERROR_TYPE
                or str(error.code) != NON_SERVICEABLE_ERROR_CODE
            ):
                result.errors.add(
                    ErrorCode.GENERIC,
                    "Non Serviceable Domain error should be provided when fulfillment is not serviceable"
                )

        result.facts[Fact.FULFILLMENT_ID_LIST] = fulfillment_ids
        result.facts[Fact.FULFILLMENT_TAT_SECONDS] = tat_seconds
        result.outputs["non_serviceable"] = non_serviceable

    def _check_tat(self, ff: Fulfillment, index: int, time_to_ship, result: RuleResult) -> Optional[int]:
        if not ff.tat:
            result.errors.add(
                ErrorCode.GENERIC,
                f"Fulfillment TAT must be present for fulfillment ID: {ff.id}"
            )
            return None

        try:
            tat = iso_duration_to_seconds(ff.tat)
        except ValueError:
            result.errors.add(
                ErrorCode.GENERIC,
                f"Fulfillment TAT '{ff.tat}' is not a valid ISO 8601 duration for fulfillment ID: {ff.id}"
            )
            return None

        if time_to_ship is not None and tat <= time_to_ship:
            result.errors.add(
                ErrorCode.GENERIC,
                f"/fulfillments[{index}]/@ondc/org/TAT (O2D) in /{Stage.ON_SELECT} can't be less than "
                f"or equal to @ondc/org/time_to_ship (O2S) in /{Stage.ON_SEARCH}"
            )
        return tat

    def _check_category(self, ff: Fulfillment, index: int, result: RuleResult) -> None:
        if ff.type == FulfillmentType.DELIVERY and ff.state_code == SERVICEABLE:
            allowed = DELIVERY_CATEGORIES
        elif ff.type == FulfillmentType.SELF_PICKUP:
            allowed = SELF_PICKUP_CATEGORIES
        else:
            return

        if ff.category not in allowed:
            result.errors.add(
                ErrorCode.GENERIC,
                f"In Fulfillment{index}, @ondc/org/category is not a valid value in /{Stage.ON_SELECT} "
                f"and should have one of these values [{','.join(allowed)}]"
            )

    def _check_time_window(self, ff: Fulfillment, timestamp: Optional[str], result: RuleResult) -> None:
        # Delivery promises a drop window, Self-Pickup a pickup window
        stop = "end" if ff.type == FulfillmentType.DELIVERY else "start"
        window = ff.time_range(stop)
        if window is None:
            return

        try:
            start = parse_timestamp(window.start) if window.start else None
            end = parse_timestamp(window.end) if window.end else None
        except ValueError:
            result.errors.add(
                ErrorCode.GENERIC,
                f"Time range of {ff.type} fulfillment {ff.id} must hold RFC 3339 timestamps"
            )
            return

        if start and end and start >= end:
            result.errors.add(
                ErrorCode.TIME_ORDER,
                f"Start time must be less than end time in {ff.type} fulfillment"
            )
        if start and timestamp and start <= parse_timestamp(timestamp):
            result.errors.add(
                ErrorCode.TIME_ORDER,
                f"Start time must be after context.timestamp in {ff.type} fulfillment"
            )

    def _check_order_details(self, ff: Fulfillment, result: RuleResult) -> None:
        tag = ff.tag(ORDER_DETAILS_TAG)
        if tag is None:
            result.errors.add(
                ErrorCode.MISSING_TAG,
                f"Missing '{ORDER_DETAILS_TAG}' tag in fulfillments when fulfillment.type is "
                f"'{FulfillmentType.BUYER_DELIVERY}'"
            )
            return

        values = {entry.code: entry.value for entry in tag.list}
        for field_name in ORDER_DETAILS_FIELDS:
            value = values.get(field_name)
            if value is None or str(value).strip() == "":
                result.errors.add(
                    ErrorCode.MISSING_TAG_FIELD,
                    f"'{field_name}' is missing or empty in '{ORDER_DETAILS_TAG}' tag in fulfillments"
                )
