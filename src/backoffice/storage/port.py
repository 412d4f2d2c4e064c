"""Interface for partitioned key-value stores.

The repository programs against this port; adapters are swapped via
configuration. A backend only needs composite-key operations: point reads,
partition or full-table iteration, insert, conditional replace and delete.
Its native transaction scope is a single row, never a set of partitions.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class StoredRecord:
    """One row as the backend holds it: key, version metadata and payload."""

    partition_id: str
    unique_id: str
    etag: str
    last_modified: datetime
    data: dict[str, Any] = field(default_factory=dict)


class StorageBackend(ABC):
    """Abstract interface for storage adapters."""

    @abstractmethod
    async def ensure_table(self, table: str) -> None:
        """Create the table if it does not exist yet."""
        ...

    @abstractmethod
    async def get(self, table: str, partition_id: str, unique_id: str) -> StoredRecord | None:
        """Return the record at the key, or None when absent."""
        ...

    @abstractmethod
    def query(self, table: str, partition_id: str | None = None) -> AsyncIterator[StoredRecord]:
        """Stream records of one partition, or of the whole table.

        Adapters fetch pages internally; the caller sees one finite stream.
        Rows written while the stream is open may or may not appear.
        """
        ...

    @abstractmethod
    async def insert(self, table: str, partition_id: str, unique_id: str, data: dict[str, Any]) -> StoredRecord:
        """Store a new record.

        Raises:
            AlreadyExists: when the key is taken.
        """
        ...

    @abstractmethod
    async def replace(
        self, table: str, partition_id: str, unique_id: str, data: dict[str, Any], if_match: str | None
    ) -> StoredRecord:
        """Overwrite a record if its stored etag equals ``if_match``.

        Raises:
            ConcurrencyConflict: when the etags differ.
            ObjectNotFoundError: when nothing is stored at the key.
        """
        ...

    @abstractmethod
    async def delete(self, table: str, partition_id: str, unique_id: str, if_match: str | None = None) -> bool:
        """Remove a record. Returns False when nothing was stored there.

        With ``if_match`` the record is removed only if its etag still matches.

        Raises:
            ConcurrencyConflict: when ``if_match`` is given and the etags differ.
        """
        ...

    @abstractmethod
    async def reset(self) -> None:
        """Discard every record in every table."""
        ...
