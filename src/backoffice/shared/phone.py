"""PhoneNumber value object."""

import re

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from backoffice.domain import backoffice

# Optional leading +, then digits and the usual separators
_PHONE_PATTERN = re.compile(r"\+?[\d\s\-()]+")


@backoffice.value_object
class PhoneNumber:
    """A customer's contact number, e.g. ``+27 31 555 0123`` or ``(031) 555-0123``."""

    number: String(required=True, max_length=20)

    @invariant.post
    def number_is_dialable(self):
        if not _PHONE_PATTERN.fullmatch(self.number) or not any(ch.isdigit() for ch in self.number):
            raise ValidationError({"phone": [f"Invalid phone number: {self.number!r}"]})

    @property
    def normalized(self) -> str:
        """Form used for the uniqueness comparison."""
        return self.number.strip().lower()
