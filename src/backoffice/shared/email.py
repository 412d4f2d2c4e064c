"""EmailAddress value object for validated email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from backoffice.domain import backoffice

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


@backoffice.value_object
class EmailAddress:
    """A structurally valid email address.

    Exactly one @, non-empty local and domain parts without leading, trailing
    or doubled dots, a dotted domain and no whitespace or forbidden characters.
    Comparison for uniqueness is case-insensitive; see ``normalized``.
    """

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address
        invalid = ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise invalid

        local_part, domain_part = email.split("@", 1)

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise invalid
        if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise invalid
        if "." not in domain_part or ".." in local_part or ".." in domain_part:
            raise invalid
        if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
            raise invalid
        if any(forbidden in email for forbidden in _FORBIDDEN):
            raise invalid

    @property
    def normalized(self) -> str:
        return self.address.strip().lower()
