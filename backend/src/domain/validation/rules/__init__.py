"""Field validators of the /on_select stage.

Each validator checks one section of the order, records facts for later
stages and reports every violation it finds.
"""

from .provider_rules import ProviderValidator
from .item_rules import ItemValidator
from .fulfillment_rules import FulfillmentValidator
from .quote_rules import QuoteValidator
from .error_payload_rules import ErrorPayloadValidator

__all__ = [
    "ProviderValidator",
    "ItemValidator",
    "FulfillmentValidator",
    "QuoteValidator",
    "ErrorPayloadValidator",
]
