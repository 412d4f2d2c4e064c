"""Generic repository for partitioned, versioned entities.

One implementation serves every entity type that exposes ``partition_id``,
``unique_id``, ``etag`` and ``last_modified``. Subclasses bind the entity
class and the table name and may add finders.

The repository never writes across partitions atomically. Keeping several
entities consistent is the calling workflow's job.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from typing import Any, Generic, TypeVar

import structlog
from protean.utils.reflection import declared_fields

from backoffice.storage import get_backend
from backoffice.storage.port import StorageBackend, StoredRecord

logger = structlog.get_logger(__name__)

T = TypeVar("T")

KEY_FIELDS = ("partition_id", "unique_id")
VERSION_FIELDS = ("etag", "last_modified")


class PartitionedRepository(Generic[T]):
    """CRUD and range reads over one table of ``entity_cls`` instances."""

    entity_cls: type[T]
    table_name: str

    def __init__(self, backend: StorageBackend | None = None):
        self.backend = backend or get_backend()

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def _payload_fields(self) -> list[str]:
        return [
            name
            for name in declared_fields(self.entity_cls)
            if not name.startswith("_") and name not in KEY_FIELDS + VERSION_FIELDS
        ]

    def to_payload(self, entity: T) -> dict[str, Any]:
        return {name: getattr(entity, name) for name in self._payload_fields()}

    def to_entity(self, record: StoredRecord) -> T:
        fields = set(self._payload_fields())
        return self.entity_cls(
            partition_id=record.partition_id,
            unique_id=record.unique_id,
            etag=record.etag,
            last_modified=record.last_modified,
            **{name: value for name, value in record.data.items() if name in fields},
        )

    @staticmethod
    def _stamp(entity: T, record: StoredRecord) -> T:
        entity.etag = record.etag
        entity.last_modified = record.last_modified
        return entity

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, partition_id: str, unique_id: str) -> T | None:
        """Point lookup. Returns None when nothing is stored at the key."""
        record = await self.backend.get(self.table_name, partition_id, unique_id)
        return self.to_entity(record) if record is not None else None

    async def scan_partition(self, partition_id: str) -> AsyncIterator[T]:
        """Stream every entity in one partition."""
        async for record in self.backend.query(self.table_name, partition_id):
            yield self.to_entity(record)

    async def scan_all(self) -> AsyncIterator[T]:
        """Stream every entity in the table.

        Meant for low-volume administrative listings; latency grows with
        the table.
        """
        async for record in self.backend.query(self.table_name):
            yield self.to_entity(record)

    async def find(self, predicate: Callable[[T], bool], partition_id: str | None = None) -> T | None:
        """Return the first entity matching ``predicate``, scanning one partition or the table."""
        entities = self.scan_partition(partition_id) if partition_id is not None else self.scan_all()
        async with aclosing(entities):
            async for entity in entities:
                if predicate(entity):
                    return entity
        return None

    async def find_by_unique_id(self, unique_id: str) -> T | None:
        """Locate an entity when its partition is not known to the caller."""
        return await self.find(lambda entity: entity.unique_id == unique_id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def ensure_table(self) -> None:
        await self.backend.ensure_table(self.table_name)

    async def insert(self, entity: T) -> T:
        """Store a new entity and stamp it with its first version token.

        Raises:
            AlreadyExists: when the composite key is taken.
        """
        record = await self.backend.insert(
            self.table_name, entity.partition_id, entity.unique_id, self.to_payload(entity)
        )
        logger.debug(
            "Entity inserted",
            table=self.table_name,
            partition_id=entity.partition_id,
            unique_id=entity.unique_id,
        )
        return self._stamp(entity, record)

    async def update(self, entity: T) -> T:
        """Replace the stored entity if its version token is still current.

        Raises:
            ConcurrencyConflict: when another writer got there first.
            ObjectNotFoundError: when the entity is no longer stored.
        """
        record = await self.backend.replace(
            self.table_name,
            entity.partition_id,
            entity.unique_id,
            self.to_payload(entity),
            if_match=entity.etag,
        )
        logger.debug(
            "Entity updated",
            table=self.table_name,
            partition_id=entity.partition_id,
            unique_id=entity.unique_id,
        )
        return self._stamp(entity, record)

    async def delete(self, partition_id: str, unique_id: str, if_match: str | None = None) -> bool:
        """Remove an entity. Deleting an absent key is not an error.

        Raises:
            ConcurrencyConflict: when ``if_match`` is given and no longer current.
        """
        removed = await self.backend.delete(self.table_name, partition_id, unique_id, if_match=if_match)
        logger.debug(
            "Entity deleted",
            table=self.table_name,
            partition_id=partition_id,
            unique_id=unique_id,
            removed=removed,
        )
        return removed
