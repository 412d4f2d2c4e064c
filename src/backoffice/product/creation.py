"""Product creation, with an optional image."""

import structlog

from backoffice.attachments import get_attachment_store
from backoffice.events.contracts import ProductCreated, ProductImageUploaded
from backoffice.events.dispatch import publish_all
from backoffice.product.product import Product
from backoffice.product.repository import ProductRepository

logger = structlog.get_logger(__name__)


async def create_product(
    category: str,
    name: str,
    price: float,
    stock_quantity: int = 0,
    description: str | None = None,
    image: bytes | None = None,
    image_name: str = "",
    repository: ProductRepository | None = None,
) -> Product:
    """Create a product in its category partition.

    The image, when given, is stored before the product row is written, so a
    failed insert can leave an orphaned attachment behind.
    """
    repository = repository or ProductRepository()

    product = Product.create(
        category=category,
        name=name,
        price=price,
        stock_quantity=stock_quantity,
        description=description,
    )
    await repository.ensure_name_available(product.partition_id, product.name)

    if image:
        product.attach_image(await get_attachment_store().store(image, image_name))

    await repository.insert(product)
    logger.info("Product created", product_id=product.unique_id, partition_id=product.partition_id)

    events = [
        ProductCreated(
            product_id=product.unique_id,
            category=product.partition_id,
            name=product.name,
            price=product.price,
            has_image=product.has_image,
        )
    ]
    if product.has_image:
        events.append(ProductImageUploaded(product_id=product.unique_id, url=product.image_url))
    await publish_all(*events)
    return product
