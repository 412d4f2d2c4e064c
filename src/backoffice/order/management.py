"""Order maintenance: status changes, removal and listing."""

import structlog
from protean.exceptions import ObjectNotFoundError

from backoffice.exceptions import ConcurrencyConflict
from backoffice.order.order import Order
from backoffice.order.repository import OrderRepository

logger = structlog.get_logger(__name__)


async def load_order(repository: OrderRepository, partition_id: str, unique_id: str) -> Order:
    order = await repository.get(partition_id, unique_id)
    if order is None:
        raise ObjectNotFoundError(f"Order {unique_id} not found in {partition_id}")
    return order


async def update_order_status(
    partition_id: str,
    unique_id: str,
    status: str | None,
    etag: str | None = None,
    repository: OrderRepository | None = None,
) -> Order:
    """Change an order's status. Line items and total are never touched."""
    repository = repository or OrderRepository()

    order = await load_order(repository, partition_id, unique_id)
    if etag is not None and etag != order.etag:
        raise ConcurrencyConflict(repository.table_name, partition_id, unique_id, etag)

    order.change_status(status)
    await repository.update(order)
    logger.info("Order status changed", order_id=unique_id, status=order.status)
    return order


async def delete_order(partition_id: str, unique_id: str, repository: OrderRepository | None = None) -> bool:
    repository = repository or OrderRepository()
    removed = await repository.delete(partition_id, unique_id)
    if removed:
        logger.info("Order deleted", order_id=unique_id, partition_id=partition_id)
    return removed


async def list_orders(customer_id: str | None = None, repository: OrderRepository | None = None) -> list[Order]:
    """All orders, or one customer's, most recently modified first."""
    repository = repository or OrderRepository()
    source = repository.for_customer(customer_id) if customer_id and customer_id.strip() else repository.scan_all()
    orders = [order async for order in source]
    return sorted(orders, key=lambda o: o.last_modified, reverse=True)
