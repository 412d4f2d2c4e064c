"""Storage access for customers."""

from backoffice.customer.customer import Customer
from backoffice.keys import city_partition
from backoffice.storage.repository import PartitionedRepository


class CustomerRepository(PartitionedRepository[Customer]):
    entity_cls = Customer
    table_name = "Customers"

    def in_city(self, city: str):
        return self.scan_partition(city_partition(city))
