"""Storage access for orders."""

from backoffice.keys import customer_partition
from backoffice.order.order import Order
from backoffice.storage.repository import PartitionedRepository


class OrderRepository(PartitionedRepository[Order]):
    entity_cls = Order
    table_name = "Orders"

    def for_customer(self, customer_id: str):
        return self.scan_partition(customer_partition(customer_id))
