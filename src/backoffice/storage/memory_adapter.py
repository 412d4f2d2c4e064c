"""In-memory storage adapter for development and testing.

Rows live in plain dictionaries keyed by table and composite key. Reads and
writes take a threading lock so a TestClient worker thread and the test body
can share one instance. Iteration is paged like a remote table service would
page it.
"""

import threading
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from protean.exceptions import ObjectNotFoundError

from backoffice.exceptions import AlreadyExists, ConcurrencyConflict
from backoffice.storage.port import StorageBackend, StoredRecord


class InMemoryBackend(StorageBackend):
    def __init__(self, page_size: int = 100):
        self.page_size = page_size
        self._tables: dict[str, dict[tuple[str, str], StoredRecord]] = {}
        self._lock = threading.Lock()

    def _rows(self, table: str) -> dict[tuple[str, str], StoredRecord]:
        return self._tables.setdefault(table, {})

    @staticmethod
    def _stamp(partition_id: str, unique_id: str, data: dict[str, Any]) -> StoredRecord:
        return StoredRecord(
            partition_id=partition_id,
            unique_id=unique_id,
            etag=uuid4().hex,
            last_modified=datetime.now(UTC),
            data=dict(data),
        )

    async def ensure_table(self, table: str) -> None:
        with self._lock:
            self._rows(table)

    async def get(self, table: str, partition_id: str, unique_id: str) -> StoredRecord | None:
        with self._lock:
            return self._rows(table).get((partition_id, unique_id))

    def _page(self, table: str, partition_id: str | None, after: tuple[str, str] | None) -> list[StoredRecord]:
        with self._lock:
            keys = sorted(
                key
                for key in self._rows(table)
                if (partition_id is None or key[0] == partition_id) and (after is None or key > after)
            )
            return [self._rows(table)[key] for key in keys[: self.page_size]]

    async def query(self, table: str, partition_id: str | None = None) -> AsyncIterator[StoredRecord]:
        after = None
        while True:
            page = self._page(table, partition_id, after)
            for record in page:
                yield record
            if len(page) < self.page_size:
                return
            after = (page[-1].partition_id, page[-1].unique_id)

    async def insert(self, table: str, partition_id: str, unique_id: str, data: dict[str, Any]) -> StoredRecord:
        with self._lock:
            rows = self._rows(table)
            if (partition_id, unique_id) in rows:
                raise AlreadyExists(table, partition_id, unique_id)
            record = self._stamp(partition_id, unique_id, data)
            rows[(partition_id, unique_id)] = record
            return record

    async def replace(
        self, table: str, partition_id: str, unique_id: str, data: dict[str, Any], if_match: str | None
    ) -> StoredRecord:
        with self._lock:
            rows = self._rows(table)
            current = rows.get((partition_id, unique_id))
            if current is None:
                raise ObjectNotFoundError(f"{table} has no entity at ({partition_id}, {unique_id})")
            if current.etag != if_match:
                raise ConcurrencyConflict(table, partition_id, unique_id, if_match)
            record = self._stamp(partition_id, unique_id, data)
            rows[(partition_id, unique_id)] = record
            return record

    async def delete(self, table: str, partition_id: str, unique_id: str, if_match: str | None = None) -> bool:
        with self._lock:
            rows = self._rows(table)
            current = rows.get((partition_id, unique_id))
            if current is None:
                return False
            if if_match is not None and current.etag != if_match:
                raise ConcurrencyConflict(table, partition_id, unique_id, if_match)
            del rows[(partition_id, unique_id)]
            return True

    async def reset(self) -> None:
        with self._lock:
            self._tables.clear()
