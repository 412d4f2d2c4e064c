"""Composite key policy: how partition ids and unique ids are derived.

Every stored entity lives at ``(partition_id, unique_id)``. The partition id
is a fixed prefix plus a domain attribute, so callers can predict it for
partition scans and can tell when an update has to move an entity.
"""

from typing import NamedTuple
from uuid import uuid4

CITY_PREFIX = "CITY-"
CATEGORY_PREFIX = "CATEGORY-"
CUSTOMER_PREFIX = "CUSTOMER-"


class EntityKey(NamedTuple):
    partition_id: str
    unique_id: str


def partition_key(prefix: str, attribute: str) -> str:
    """Return ``prefix`` followed by the uppercased attribute."""
    return f"{prefix}{attribute.upper()}"


def city_partition(city: str) -> str:
    return partition_key(CITY_PREFIX, city)


def category_partition(category: str) -> str:
    return partition_key(CATEGORY_PREFIX, category)


def customer_partition(customer_id: str) -> str:
    # Customer ids are generated hex tokens and are used verbatim.
    return f"{CUSTOMER_PREFIX}{customer_id}"


def attribute_of(partition_id: str, prefix: str) -> str | None:
    """Recover the attribute from a partition id, or None if the prefix differs."""
    if partition_id and partition_id.upper().startswith(prefix):
        return partition_id[len(prefix) :]
    return None


def same_partition(first: str | None, second: str | None) -> bool:
    """Compare two partition ids case-insensitively."""
    return (first or "").upper() == (second or "").upper()


def new_unique_id() -> str:
    """A random 128-bit identifier as 32 lowercase hex characters."""
    return uuid4().hex
