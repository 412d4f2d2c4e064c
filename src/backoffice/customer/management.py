"""Customer maintenance: editing, removal and listing."""

import structlog
from protean.exceptions import ObjectNotFoundError

from backoffice.customer.customer import Customer
from backoffice.customer.repository import CustomerRepository
from backoffice.customer.uniqueness import ContactIndex, ScanningContactIndex
from backoffice.events.contracts import CustomerDeleted
from backoffice.events.dispatch import publish_event
from backoffice.exceptions import ConcurrencyConflict
from backoffice.storage.relocation import RelocationStrategy, save_relocatable

logger = structlog.get_logger(__name__)


async def load_customer(repository: CustomerRepository, partition_id: str, unique_id: str) -> Customer:
    customer = await repository.get(partition_id, unique_id)
    if customer is None:
        raise ObjectNotFoundError(f"Customer {unique_id} not found in {partition_id}")
    return customer


async def update_customer(
    partition_id: str,
    unique_id: str,
    first_name: str,
    last_name: str,
    email: str,
    city: str,
    phone: str | None = None,
    etag: str | None = None,
    repository: CustomerRepository | None = None,
    contacts: ContactIndex | None = None,
    strategy: RelocationStrategy | None = None,
) -> Customer:
    """Replace a customer's details, moving it to another city partition if needed.

    ``etag``, when given, must be the version the caller last read.
    """
    repository = repository or CustomerRepository()
    contacts = contacts or ScanningContactIndex(repository)

    customer = await load_customer(repository, partition_id, unique_id)
    if etag is not None and etag != customer.etag:
        raise ConcurrencyConflict(repository.table_name, partition_id, unique_id, etag)

    customer.update_details(first_name=first_name, last_name=last_name, email=email, city=city, phone=phone)
    await contacts.ensure_available(customer.email, customer.phone, exclude_unique_id=customer.unique_id)

    customer = await save_relocatable(repository, customer, partition_id, strategy)
    logger.info("Customer updated", customer_id=unique_id, partition_id=customer.partition_id)
    return customer


async def delete_customer(partition_id: str, unique_id: str, repository: CustomerRepository | None = None) -> bool:
    """Remove a customer. Orders placed by the customer are kept."""
    repository = repository or CustomerRepository()
    removed = await repository.delete(partition_id, unique_id)
    if removed:
        logger.info("Customer deleted", customer_id=unique_id, partition_id=partition_id)
        await publish_event(CustomerDeleted(customer_id=unique_id, partition_key=partition_id))
    return removed


async def list_customers(city: str | None = None, repository: CustomerRepository | None = None) -> list[Customer]:
    """All customers, or those of one city, most recently modified first."""
    repository = repository or CustomerRepository()
    source = repository.in_city(city) if city and city.strip() else repository.scan_all()
    customers = [customer async for customer in source]
    return sorted(customers, key=lambda c: c.last_modified, reverse=True)
