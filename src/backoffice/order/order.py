"""Order aggregate with its LineItem value object.

An order lives in its customer's partition, ``CUSTOMER-<customer id>``.
Line items are a snapshot taken when the order is placed: product name and
unit price are copied from the product and never re-read.
"""

import json
import math
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from backoffice.domain import backoffice
from backoffice.keys import customer_partition, new_unique_id, same_partition


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


def parse_status(status):
    """Map a caller-supplied status to an OrderStatus. Blank means None."""
    if status is None or not str(status).strip():
        return None
    try:
        return OrderStatus(str(status).strip())
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError({"status": [f"Status must be one of: {allowed}"]}) from None


@backoffice.value_object(part_of="Order")
class LineItem:
    product_id: String(required=True, max_length=64)
    product_name: String(required=True, max_length=255)
    quantity: Integer(required=True, min_value=1)
    unit_price: Float(required=True)

    @property
    def subtotal(self) -> float:
        return self.quantity * self.unit_price

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
        }


@backoffice.aggregate
class Order:
    partition_id: String(required=True, max_length=255)
    unique_id: Identifier(identifier=True)
    etag: String(max_length=64)
    last_modified: DateTime()

    customer_id: String(required=True, max_length=64)
    items_json: Text(required=True)
    total: Float(required=True)
    status: String(choices=OrderStatus, default=OrderStatus.PENDING.value)

    @invariant.post
    def partition_follows_customer(self):
        if not same_partition(self.partition_id, customer_partition(self.customer_id)):
            raise ValidationError(
                {"partition_id": [f"Partition {self.partition_id} does not belong to customer {self.customer_id}"]}
            )

    @invariant.post
    def must_have_at_least_one_line(self):
        if not self.lines:
            raise ValidationError({"items": ["An order needs at least one line item"]})

    @invariant.post
    def total_matches_lines(self):
        expected = sum(line.subtotal for line in self.lines)
        if self.total is None or not math.isclose(self.total, expected, rel_tol=1e-9, abs_tol=1e-9):
            raise ValidationError({"total": [f"Total {self.total} does not match line items ({expected})"]})

    @property
    def lines(self) -> list[LineItem]:
        try:
            raw = json.loads(self.items_json or "[]")
        except json.JSONDecodeError:
            raise ValidationError({"items": ["Line items are not valid JSON"]}) from None
        return [LineItem(**item) for item in raw]

    @classmethod
    def place(cls, customer_id, lines, status=None):
        """Build a new order. The total is always computed from ``lines``."""
        status = parse_status(status) or OrderStatus.PENDING
        return cls(
            partition_id=customer_partition(customer_id),
            unique_id=new_unique_id(),
            customer_id=customer_id,
            items_json=json.dumps([line.to_dict() for line in lines]),
            total=sum(line.subtotal for line in lines),
            status=status.value,
        )

    def change_status(self, status):
        """Move to ``status``. A blank status leaves the order as it is."""
        new_status = parse_status(status)
        if new_status is not None:
            self.status = new_status.value
