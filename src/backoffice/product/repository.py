"""Storage access for products."""

from protean.exceptions import ValidationError

from backoffice.keys import category_partition
from backoffice.product.product import Product
from backoffice.storage.repository import PartitionedRepository


class ProductRepository(PartitionedRepository[Product]):
    entity_cls = Product
    table_name = "Products"

    def in_category(self, category: str):
        return self.scan_partition(category_partition(category))

    async def find_by_name(self, partition_id: str, name: str, exclude_unique_id: str | None = None) -> Product | None:
        """Case-insensitive name lookup within one category partition."""
        wanted = name.strip().lower()
        return await self.find(
            lambda product: product.unique_id != exclude_unique_id and product.name.strip().lower() == wanted,
            partition_id=partition_id,
        )

    async def ensure_name_available(self, partition_id: str, name: str, exclude_unique_id: str | None = None) -> None:
        if await self.find_by_name(partition_id, name, exclude_unique_id) is not None:
            raise ValidationError({"name": ["A product with this name already exists in this category."]})
