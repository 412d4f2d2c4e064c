"""Wire contracts for the events the back office publishes.

Each event serializes to a flat JSON object with camelCase keys, a ``type``
discriminator and a ``utc`` timestamp. Field names follow Python conventions
and are aliased on output.
"""

from datetime import UTC, datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    return datetime.now(UTC)


class IntegrationEvent(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    event_type: ClassVar[str]

    utc: datetime = Field(default_factory=_utcnow)

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.event_type, **self.model_dump(by_alias=True, mode="json")}


class OrderCreated(IntegrationEvent):
    event_type: ClassVar[str] = "order-created"

    order_id: str
    customer_id: str
    total: float


class InventoryReserve(IntegrationEvent):
    """One per order line; ``qty`` is the quantity to hold back."""

    event_type: ClassVar[str] = "inventory-reserve"

    product_id: str
    qty: int
    order_id: str


class CustomerCreated(IntegrationEvent):
    event_type: ClassVar[str] = "customer-created"

    customer_id: str
    city_partition: str
    name: str


class CustomerDeleted(IntegrationEvent):
    event_type: ClassVar[str] = "customer-deleted"

    customer_id: str
    partition_key: str


class ProductCreated(IntegrationEvent):
    event_type: ClassVar[str] = "product-created"

    product_id: str
    category: str
    name: str
    price: float
    has_image: bool


class ProductDeleted(IntegrationEvent):
    event_type: ClassVar[str] = "product-deleted"

    product_id: str
    partition_key: str


class ProductImageUploaded(IntegrationEvent):
    event_type: ClassVar[str] = "product-image-uploaded"

    product_id: str
    url: str


class ProductImageReplaced(IntegrationEvent):
    event_type: ClassVar[str] = "product-image-replaced"

    product_id: str
    new_url: str


class ContractUploaded(IntegrationEvent):
    event_type: ClassVar[str] = "contract-uploaded"

    file_name: str


class ContractDeleted(IntegrationEvent):
    event_type: ClassVar[str] = "contract-deleted"

    file_name: str
