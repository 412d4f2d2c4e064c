"""Email and phone uniqueness across customers.

``ContactIndex`` is the seam for the lookup. The only implementation scans
the whole customer table, which is linear in the number of customers.

The check runs before the write and nothing holds a lock in between, so two
registrations racing with the same email can both pass. This is accepted.
"""

from abc import ABC, abstractmethod

from protean.exceptions import ValidationError

from backoffice.customer.repository import CustomerRepository
from backoffice.shared.email import EmailAddress
from backoffice.shared.phone import PhoneNumber


class ContactIndex(ABC):
    @abstractmethod
    async def conflicts(self, email: str, phone: str | None, exclude_unique_id: str | None = None) -> dict:
        """Field-level messages for every contact detail already taken by another customer."""
        ...

    async def ensure_available(self, email: str, phone: str | None, exclude_unique_id: str | None = None) -> None:
        errors = await self.conflicts(email, phone, exclude_unique_id)
        if errors:
            raise ValidationError(errors)


class ScanningContactIndex(ContactIndex):
    def __init__(self, repository: CustomerRepository | None = None):
        self.repository = repository or CustomerRepository()

    async def conflicts(self, email: str, phone: str | None, exclude_unique_id: str | None = None) -> dict:
        wanted_email = EmailAddress(address=email).normalized
        wanted_phone = PhoneNumber(number=phone).normalized if phone else None

        errors = {}
        async for other in self.repository.scan_all():
            if other.unique_id == exclude_unique_id:
                continue
            if "email" not in errors and other.email_address.normalized == wanted_email:
                errors["email"] = ["A customer with this email already exists."]
            if (
                wanted_phone
                and "phone" not in errors
                and other.phone_number is not None
                and other.phone_number.normalized == wanted_phone
            ):
                errors["phone"] = ["A customer with this phone number already exists."]
        return errors
