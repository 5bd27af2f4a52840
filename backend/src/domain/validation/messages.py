"""Typed shape of the /on_select stage payload.

Every protocol field is optional: a missing field is reported by the field
validators rather than rejected at parse time. Unknown fields are kept so the
quote can be persisted as received. ONDC ``@ondc/org/...`` names are exposed
through aliases.
"""

from typing import Any, List, Optional, Union, get_origin

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Protocol numbers are sent as strings, but some sellers send JSON numbers
NumberLike = Optional[Union[str, int, float]]


class ProtocolModel(BaseModel):
    # Sellers send numeric ids; they are compared as strings
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    @field_validator("*", mode="before")
    @classmethod
    def null_list_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        """An explicit null array reads like an absent one."""
        if value is None and get_origin(cls.model_fields[info.field_name].annotation) is list:
            return []
        return value


class Descriptor(ProtocolModel):
    code: Optional[str] = None
    name: Optional[str] = None


class Location(ProtocolModel):
    id: Optional[str] = None


class Provider(ProtocolModel):
    id: Optional[str] = None
    locations: List[Location] = Field(default_factory=list)


class Item(ProtocolModel):
    id: Optional[str] = None
    fulfillment_id: Optional[str] = None
    parent_item_id: Optional[str] = None


class TimeRange(ProtocolModel):
    start: Optional[str] = None
    end: Optional[str] = None


class StopTime(ProtocolModel):
    range: Optional[TimeRange] = None


class Stop(ProtocolModel):
    time: Optional[StopTime] = None


class FulfillmentState(ProtocolModel):
    descriptor: Optional[Descriptor] = None


class TagEntry(ProtocolModel):
    code: Optional[str] = None
    value: Any = None


class Tag(ProtocolModel):
    code: Optional[str] = None
    list: List[TagEntry] = Field(default_factory=list)


class Fulfillment(ProtocolModel):
    id: Optional[str] = None
    type: Optional[str] = None
    tat: Optional[str] = Field(None, alias="@ondc/org/TAT")
    category: Optional[str] = Field(None, alias="@ondc/org/category")
    # Untyped so that "true" or 1 is reported instead of coerced to a bool
    tracking: Any = None
    state: Optional[FulfillmentState] = None
    start: Optional[Stop] = None
    end: Optional[Stop] = None
    tags: List[Tag] = Field(default_factory=list)

    @property
    def state_code(self) -> Optional[str]:
        if self.state and self.state.descriptor:
            return self.state.descriptor.code
        return None

    def time_range(self, stop: str) -> Optional[TimeRange]:
        """Time window of the ``start`` or ``end`` stop, if declared."""
        point = getattr(self, stop)
        if point and point.time:
            return point.time.range
        return None

    def tag(self, code: str) -> Optional[Tag]:
        return next((tag for tag in self.tags if tag.code == code), None)


class Price(ProtocolModel):
    currency: Optional[str] = None
    value: NumberLike = None


class ItemQuantity(ProtocolModel):
    count: NumberLike = None


class BreakupItem(ProtocolModel):
    price: Optional[Price] = None
    parent_item_id: Optional[str] = None
    quantity: Any = None


class BreakupLine(ProtocolModel):
    title_type: Optional[str] = Field(None, alias="@ondc/org/title_type")
    item_id: Optional[str] = Field(None, alias="@ondc/org/item_id")
    item_quantity: Optional[ItemQuantity] = Field(None, alias="@ondc/org/item_quantity")
    title: Optional[str] = None
    price: Optional[Price] = None
    item: Optional[BreakupItem] = None

    @property
    def parent_item_id(self) -> Optional[str]:
        return self.item.parent_item_id if self.item else None

    @property
    def count(self) -> NumberLike:
        return self.item_quantity.count if self.item_quantity else None


class Quote(ProtocolModel):
    price: Optional[Price] = None
    breakup: List[BreakupLine] = Field(default_factory=list)


class OrderError(ProtocolModel):
    type: Optional[str] = None
    code: NumberLike = None
    message: Optional[str] = None


class Order(ProtocolModel):
    provider: Optional[Provider] = None
    items: List[Item] = Field(default_factory=list)
    fulfillments: List[Fulfillment] = Field(default_factory=list)
    quote: Optional[Quote] = None
    error: Optional[OrderError] = None


class StageMessage(ProtocolModel):
    order: Optional[Order] = None


class StageRequestContext(ProtocolModel):
    transaction_id: Optional[str] = None
    message_id: Optional[str] = None
    timestamp: Optional[str] = None
    action: Optional[str] = None


class StageRequest(ProtocolModel):
    """Envelope of a stage call: ``{context, message}``."""
    context: Optional[StageRequestContext] = None
    message: Optional[StageMessage] = None
