"""Order placement.

Composes a customer, several products and the new order. Nothing is
written until every reference has been resolved and priced, so a rejected
order leaves no trace. Events go out after the insert and cannot undo it.
"""

from collections.abc import Iterable
from contextlib import aclosing

import structlog

from backoffice.customer.repository import CustomerRepository
from backoffice.events.contracts import InventoryReserve, OrderCreated
from backoffice.events.dispatch import publish_all
from backoffice.exceptions import CustomerNotFound, EmptyOrder, ProductNotFound
from backoffice.order.order import LineItem, Order, parse_status
from backoffice.order.repository import OrderRepository
from backoffice.product.repository import ProductRepository

logger = structlog.get_logger(__name__)


def usable_items(items: Iterable[tuple[str, int]]) -> list[tuple[str, int]]:
    """Drop entries without a product id or with a quantity below one."""
    usable = []
    for product_id, quantity in items:
        if product_id and product_id.strip() and quantity and quantity > 0:
            usable.append((product_id.strip(), int(quantity)))
    return usable


async def place_order(
    customer_id: str,
    items: Iterable[tuple[str, int]],
    status: str | None = None,
    orders: OrderRepository | None = None,
    customers: CustomerRepository | None = None,
    products: ProductRepository | None = None,
) -> Order:
    """Place an order for ``customer_id`` from (product id, quantity) pairs.

    Raises:
        EmptyOrder: when no usable line remains.
        ValidationError: for a status outside the known set.
        CustomerNotFound: when the customer does not exist.
        ProductNotFound: when any product does not exist.
    """
    orders = orders or OrderRepository()
    customers = customers or CustomerRepository()
    products = products or ProductRepository()

    requested = usable_items(items)
    if not requested:
        raise EmptyOrder()
    parse_status(status)

    customer = await customers.find_by_unique_id(customer_id)
    if customer is None:
        raise CustomerNotFound(customer_id)

    wanted = {product_id for product_id, _ in requested}
    catalogue = {}
    async with aclosing(products.scan_all()) as stream:
        async for product in stream:
            if product.unique_id in wanted:
                catalogue[product.unique_id] = product
                if len(catalogue) == len(wanted):
                    break

    lines = []
    for product_id, quantity in requested:
        product = catalogue.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        lines.append(
            LineItem(
                product_id=product.unique_id,
                product_name=product.name,
                quantity=quantity,
                unit_price=product.price,
            )
        )

    order = Order.place(customer_id=customer.unique_id, lines=lines, status=status)
    await orders.insert(order)
    logger.info(
        "Order placed",
        order_id=order.unique_id,
        customer_id=order.customer_id,
        total=order.total,
        lines=len(lines),
    )

    await publish_all(
        OrderCreated(order_id=order.unique_id, customer_id=order.customer_id, total=order.total),
        *(InventoryReserve(product_id=line.product_id, qty=line.quantity, order_id=order.unique_id) for line in lines),
    )
    return order
