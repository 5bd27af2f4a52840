"""Static protocol tables consulted by the /on_select field validators.

All tables are immutable and loaded once at import time.
"""

from types import MappingProxyType


class Stage:
    SEARCH = "search"
    ON_SEARCH = "on_search"
    SELECT = "select"
    ON_SELECT = "on_select"
    ON_SELECT_OUT_OF_STOCK = "on_select_out_of_stock"


# Payment line-item title -> title type
PAYMENT_TITLE_TYPES = MappingProxyType({
    "delivery charges": "delivery",
    "packing charges": "packing",
    "tax": "tax",
    "discount": "discount",
    "convenience fee": "misc",
    "offer": "offer",
})

ITEM_TITLE_TYPE = "item"
OFFER_TITLE_TYPE = "offer"
ITEM_REFERENCING_TITLE_TYPES = frozenset({"tax", "discount"})
FULFILLMENT_REFERENCING_TITLE_TYPES = frozenset({"packing", "delivery", "misc"})
DELIVERY_TITLE_TYPE = "delivery"

# Categories whose tax is not part of the selected item total
TAX_NOT_INCLUSIVE_CATEGORIES = frozenset({"F&B"})


class FulfillmentType:
    DELIVERY = "Delivery"
    SELF_PICKUP = "Self-Pickup"
    BUYER_DELIVERY = "Buyer-Delivery"


TIME_WINDOW_FULFILLMENT_TYPES = frozenset({FulfillmentType.DELIVERY, FulfillmentType.SELF_PICKUP})

DELIVERY_CATEGORIES = (
    "Immediate Delivery",
    "Same Day Delivery",
    "Next Day Delivery",
    "Standard Delivery",
    "Express Delivery",
)
SELF_PICKUP_CATEGORIES = ("Takeaway", "Kerbside")

SERVICEABLE = "Serviceable"
NON_SERVICEABLE = "Non-serviceable"
SERVICEABILITY_CODES = frozenset({SERVICEABLE, NON_SERVICEABLE})

DOMAIN_ERROR_TYPE = "DOMAIN-ERROR"
NON_SERVICEABLE_ERROR_CODE = "30009"
REDUCED_AVAILABILITY_ERROR_CODE = "40002"

ORDER_DETAILS_TAG = "order_details"
ORDER_DETAILS_FIELDS = (
    "weight_unit",
    "weight_value",
    "dim_unit",
    "length",
    "breadth",
    "height",
)
