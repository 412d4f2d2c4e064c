"""Product maintenance: editing, removal and listing."""

import structlog
from protean.exceptions import ObjectNotFoundError

from backoffice.attachments import get_attachment_store
from backoffice.events.contracts import ProductDeleted, ProductImageReplaced
from backoffice.events.dispatch import publish_event
from backoffice.exceptions import ConcurrencyConflict
from backoffice.product.product import Product
from backoffice.product.repository import ProductRepository
from backoffice.storage.relocation import RelocationStrategy, save_relocatable

logger = structlog.get_logger(__name__)


async def load_product(repository: ProductRepository, partition_id: str, unique_id: str) -> Product:
    product = await repository.get(partition_id, unique_id)
    if product is None:
        raise ObjectNotFoundError(f"Product {unique_id} not found in {partition_id}")
    return product


async def update_product(
    partition_id: str,
    unique_id: str,
    name: str,
    price: float,
    stock_quantity: int,
    description: str | None = None,
    category: str | None = None,
    image: bytes | None = None,
    image_name: str = "",
    etag: str | None = None,
    repository: ProductRepository | None = None,
    strategy: RelocationStrategy | None = None,
) -> Product:
    """Replace a product's details and optionally its image.

    A different ``category`` moves the product to that category's partition.
    A new image replaces the stored one: the old attachment is removed first.
    """
    repository = repository or ProductRepository()

    product = await load_product(repository, partition_id, unique_id)
    if etag is not None and etag != product.etag:
        raise ConcurrencyConflict(repository.table_name, partition_id, unique_id, etag)

    product.revise(
        name=name,
        price=price,
        stock_quantity=stock_quantity,
        description=description,
        category=category,
    )
    await repository.ensure_name_available(product.partition_id, product.name, exclude_unique_id=unique_id)

    replaced = False
    if image:
        store = get_attachment_store()
        if product.has_image:
            await store.remove(product.image_url)
        product.attach_image(await store.store(image, image_name))
        replaced = True

    product = await save_relocatable(repository, product, partition_id, strategy)
    logger.info("Product updated", product_id=unique_id, partition_id=product.partition_id)

    if replaced:
        await publish_event(ProductImageReplaced(product_id=unique_id, new_url=product.image_url))
    return product


async def delete_product(partition_id: str, unique_id: str, repository: ProductRepository | None = None) -> bool:
    """Remove a product and its image.

    The attachment goes first; if removing the row then fails the product
    is left without its image.
    """
    repository = repository or ProductRepository()

    product = await repository.get(partition_id, unique_id)
    if product is not None and product.has_image:
        await get_attachment_store().remove(product.image_url)

    removed = await repository.delete(partition_id, unique_id)
    if removed:
        logger.info("Product deleted", product_id=unique_id, partition_id=partition_id)
        await publish_event(ProductDeleted(product_id=unique_id, partition_key=partition_id))
    return removed


async def list_products(category: str | None = None, repository: ProductRepository | None = None) -> list[Product]:
    """All products, or those of one category, most recently modified first."""
    repository = repository or ProductRepository()
    source = repository.in_category(category) if category and category.strip() else repository.scan_all()
    products = [product async for product in source]
    return sorted(products, key=lambda p: p.last_modified, reverse=True)
