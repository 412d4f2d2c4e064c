"""Customer registration."""

import structlog

from backoffice.customer.customer import Customer
from backoffice.customer.repository import CustomerRepository
from backoffice.customer.uniqueness import ContactIndex, ScanningContactIndex
from backoffice.events.contracts import CustomerCreated
from backoffice.events.dispatch import publish_event

logger = structlog.get_logger(__name__)


async def register_customer(
    first_name: str,
    last_name: str,
    email: str,
    city: str,
    phone: str | None = None,
    repository: CustomerRepository | None = None,
    contacts: ContactIndex | None = None,
) -> Customer:
    """Create a customer in its city partition and announce it.

    Raises ValidationError for malformed fields or an email/phone already in
    use; nothing is written in either case.
    """
    repository = repository or CustomerRepository()
    contacts = contacts or ScanningContactIndex(repository)

    customer = Customer.register(first_name=first_name, last_name=last_name, email=email, city=city, phone=phone)
    await contacts.ensure_available(customer.email, customer.phone)
    await repository.insert(customer)

    logger.info("Customer registered", customer_id=customer.unique_id, partition_id=customer.partition_id)
    await publish_event(
        CustomerCreated(
            customer_id=customer.unique_id,
            city_partition=customer.partition_id,
            name=customer.full_name,
        )
    )
    return customer
