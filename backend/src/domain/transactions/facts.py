"""Names of the transaction facts exchanged between protocol stages.

Cache keys are namespaced as ``<transaction_id>_<fact name>``.
"""


class Fact:
    """Fact names shared with the other stage validators."""

    # Recorded by /select and earlier stages
    PROVIDER_ID = "providerId"
    PROVIDER_LOCATION = "providerLoc"
    ITEM_ID_LIST = "itemIdList"  # item id -> selected quantity
    ITEM_CATEGORIES = "itemCategories"  # item id -> category id
    SELECTED_PRICE = "selectedPrice"
    TIME_TO_SHIP = "timeToShip"  # seconds, from /on_search

    # Recorded by /on_select for /init and later
    SELECT_ITEM_LIST = "selectItemList"
    ITEM_FULFILLMENT_MAP = "itemFulfillmentMap"
    FULFILLMENT_ID_LIST = "fulfillmentIdList"
    FULFILLMENT_TAT_SECONDS = "fulfillmentTatSeconds"
    QUOTE_OBJECT = "quoteObject"
    QUOTED_PRICE = "quotedPrice"
    ITEM_PRICE_MAP = "itemPriceMap"


def fact_key(transaction_id: str, name: str) -> str:
    """Build the cache key for a fact of a transaction."""
    return f"{transaction_id}_{name}"


def tracking_fact(fulfillment_id: str) -> str:
    """Fact name holding the tracking flag of one fulfillment."""
    return f"{fulfillment_id}_tracking"
