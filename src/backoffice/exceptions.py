"""Errors raised by the storage layer and the back-office workflows.

Malformed input is reported with Protean's ``ValidationError`` (field-level
messages), and an entity a workflow needs but cannot find is reported with
Protean's ``ObjectNotFoundError``. A plain lookup that misses is not an
error at all: repositories return ``None``.
"""

from protean.exceptions import ValidationError


class StorageError(Exception):
    """Base class for failures reported by a storage backend."""


class AlreadyExists(StorageError):
    """An insert collided with an existing composite key."""

    def __init__(self, table: str, partition_id: str, unique_id: str):
        self.table = table
        self.partition_id = partition_id
        self.unique_id = unique_id
        super().__init__(f"{table} already holds an entity at ({partition_id}, {unique_id})")


class ConcurrencyConflict(StorageError):
    """An update presented a version token that no longer matches the store."""

    def __init__(self, table: str, partition_id: str, unique_id: str, etag: str | None = None):
        self.table = table
        self.partition_id = partition_id
        self.unique_id = unique_id
        self.etag = etag
        super().__init__(f"{table} entity ({partition_id}, {unique_id}) was modified by another writer")


class RelocationInconsistency(StorageError):
    """A partition move failed half-way; the store needs manual reconciliation."""

    def __init__(self, table: str, unique_id: str, source_partition: str, target_partition: str, stage: str):
        self.table = table
        self.unique_id = unique_id
        self.source_partition = source_partition
        self.target_partition = target_partition
        self.stage = stage
        super().__init__(
            f"Moving {table} entity {unique_id} from {source_partition} to {target_partition} failed during {stage}"
        )


class DependencyNotFound(Exception):
    """An entity referenced by a workflow input does not exist."""

    kind = "entity"

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"{self.kind} {identifier} not found")


class CustomerNotFound(DependencyNotFound):
    kind = "Customer"


class ProductNotFound(DependencyNotFound):
    kind = "Product"


class EmptyOrder(ValidationError):
    """No line item survived filtering; an order needs at least one."""

    def __init__(self):
        super().__init__({"items": ["Add at least one valid product with quantity > 0."]})


class PublishFailed(Exception):
    """An event could not be handed to the message queue."""

    def __init__(self, event_name: str, reason: str):
        self.event_name = event_name
        self.reason = reason
        super().__init__(f"Publishing {event_name} failed: {reason}")
