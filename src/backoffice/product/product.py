"""Product aggregate, partitioned by category."""

import math

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from backoffice.domain import backoffice
from backoffice.keys import category_partition, new_unique_id, same_partition


@backoffice.aggregate
class Product:
    """An item for sale, stored under ``CATEGORY-<CATEGORY>``.

    ``image_url`` is the locator handed out by the attachment store; the
    product only keeps it.
    """

    partition_id: String(required=True, max_length=255)
    unique_id: Identifier(identifier=True)
    etag: String(max_length=64)
    last_modified: DateTime()

    category: String(required=True, max_length=100)
    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True)
    stock_quantity: Integer(min_value=0, default=0)
    image_url: String(max_length=1024)

    @invariant.post
    def partition_follows_category(self):
        if not same_partition(self.partition_id, category_partition(self.category)):
            raise ValidationError(
                {"partition_id": [f"Partition {self.partition_id} does not match category {self.category!r}"]}
            )

    @invariant.post
    def price_must_be_positive(self):
        if self.price is None or not math.isfinite(self.price) or self.price <= 0:
            raise ValidationError({"price": ["Price must be a finite amount greater than zero"]})

    @property
    def has_image(self) -> bool:
        return bool(self.image_url and self.image_url.strip())

    @classmethod
    def create(cls, category, name, price, stock_quantity=0, description=None):
        return cls(
            partition_id=category_partition(category),
            unique_id=new_unique_id(),
            category=category,
            name=name,
            price=price,
            stock_quantity=stock_quantity,
            description=description,
        )

    def revise(self, name, price, stock_quantity, description=None, category=None):
        """Replace the editable fields. A new category moves the partition id with it."""
        with atomic_change(self):
            self.name = name
            self.price = price
            self.stock_quantity = stock_quantity
            self.description = description
            if category:
                self.category = category
                self.partition_id = category_partition(category)

    def attach_image(self, url):
        self.image_url = url
