"""The back-office domain: customers, products and orders."""

from protean.domain import Domain

from backoffice.utils.logging import configure_logging

configure_logging()

backoffice = Domain(name="backoffice")
