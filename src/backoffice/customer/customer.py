"""Customer aggregate, partitioned by city."""

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from backoffice.domain import backoffice
from backoffice.keys import city_partition, new_unique_id, same_partition
from backoffice.shared.email import EmailAddress
from backoffice.shared.phone import PhoneNumber


@backoffice.aggregate
class Customer:
    """A person the shop sells to, stored under ``CITY-<CITY>``.

    Email and phone are kept as plain strings so they serialize as-is; they
    are checked against the EmailAddress and PhoneNumber value objects
    whenever the customer changes. Uniqueness across customers is not an
    aggregate concern (see ``backoffice.customer.uniqueness``).
    """

    partition_id: String(required=True, max_length=255)
    unique_id: Identifier(identifier=True)
    etag: String(max_length=64)
    last_modified: DateTime()

    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    phone: String(max_length=20)
    city: String(required=True, max_length=100)

    @invariant.post
    def partition_follows_city(self):
        if not same_partition(self.partition_id, city_partition(self.city)):
            raise ValidationError(
                {"partition_id": [f"Partition {self.partition_id} does not match city {self.city!r}"]}
            )

    @invariant.post
    def contact_details_are_well_formed(self):
        EmailAddress(address=self.email)
        if self.phone:
            PhoneNumber(number=self.phone)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def email_address(self) -> EmailAddress:
        return EmailAddress(address=self.email)

    @property
    def phone_number(self) -> PhoneNumber | None:
        return PhoneNumber(number=self.phone) if self.phone else None

    @classmethod
    def register(cls, first_name, last_name, email, city, phone=None):
        return cls(
            partition_id=city_partition(city),
            unique_id=new_unique_id(),
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone or None,
            city=city,
        )

    def update_details(self, first_name, last_name, email, city, phone=None):
        """Replace the editable fields. A new city moves the partition id with it."""
        with atomic_change(self):
            self.first_name = first_name
            self.last_name = last_name
            self.email = email
            self.phone = phone or None
            self.city = city
            self.partition_id = city_partition(city)
