"""SQLAlchemy storage adapter with one relational table per logical table.

Each table has a composite primary key ``(partition_id, unique_id)``, the
version token and timestamp as plain columns, and the entity payload as JSON.
Works against SQLite and PostgreSQL. SQLAlchemy calls are blocking, so every
operation runs in a worker thread via ``asyncio.to_thread``.
"""

import asyncio
import threading
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from protean.exceptions import ObjectNotFoundError
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    and_,
    create_engine,
    delete,
    insert,
    or_,
    select,
    update,
)
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import IntegrityError

from backoffice.exceptions import AlreadyExists, ConcurrencyConflict
from backoffice.storage.port import StorageBackend, StoredRecord


class SqlAlchemyBackend(StorageBackend):
    def __init__(self, database_uri: str, page_size: int = 100, engine: Engine | None = None):
        self.engine = engine or create_engine(database_uri)
        self.page_size = page_size
        self.metadata = MetaData()
        self._tables: dict[str, Table] = {}
        self._lock = threading.Lock()

    def table_for(self, name: str) -> Table:
        """Return the table for a logical name, creating it in the database on first use."""
        with self._lock:
            if name not in self._tables:
                table = self.metadata.tables.get(name.lower())
                if table is None:
                    table = Table(
                        name.lower(),
                        self.metadata,
                        Column("partition_id", String(255), primary_key=True),
                        Column("unique_id", String(64), primary_key=True),
                        Column("etag", String(64), nullable=False),
                        Column("last_modified", DateTime(timezone=True), nullable=False),
                        Column("payload", JSON, nullable=False),
                    )
                table.create(self.engine, checkfirst=True)
                self._tables[name] = table
            return self._tables[name]

    def create_tables(self, names: list[str]) -> None:
        for name in names:
            self.table_for(name)

    def drop_tables(self, names: list[str]) -> None:
        tables = [self.table_for(name) for name in names]
        with self._lock:
            self.metadata.drop_all(self.engine, tables=tables)
            for name in names:
                self._tables.pop(name, None)

    @staticmethod
    def _to_record(row: Row) -> StoredRecord:
        values = row._mapping
        last_modified = values["last_modified"]
        # SQLite hands back naive datetimes
        if last_modified.tzinfo is None:
            last_modified = last_modified.replace(tzinfo=UTC)
        return StoredRecord(
            partition_id=values["partition_id"],
            unique_id=values["unique_id"],
            etag=values["etag"],
            last_modified=last_modified,
            data=dict(values["payload"] or {}),
        )

    # ------------------------------------------------------------------
    # Blocking implementations
    # ------------------------------------------------------------------

    def _get(self, table: str, partition_id: str, unique_id: str) -> StoredRecord | None:
        t = self.table_for(table)
        with self.engine.connect() as conn:
            row = conn.execute(select(t).where(t.c.partition_id == partition_id, t.c.unique_id == unique_id)).first()
        return self._to_record(row) if row is not None else None

    def _page(self, table: str, partition_id: str | None, after: tuple[str, str] | None) -> list[StoredRecord]:
        t = self.table_for(table)
        stmt = select(t)
        if partition_id is not None:
            stmt = stmt.where(t.c.partition_id == partition_id)
        if after is not None:
            last_partition, last_unique = after
            stmt = stmt.where(
                or_(
                    t.c.partition_id > last_partition,
                    and_(t.c.partition_id == last_partition, t.c.unique_id > last_unique),
                )
            )
        stmt = stmt.order_by(t.c.partition_id, t.c.unique_id).limit(self.page_size)
        with self.engine.connect() as conn:
            return [self._to_record(row) for row in conn.execute(stmt)]

    def _insert(self, table: str, partition_id: str, unique_id: str, data: dict[str, Any]) -> StoredRecord:
        t = self.table_for(table)
        record = StoredRecord(partition_id, unique_id, uuid4().hex, datetime.now(UTC), dict(data))
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    insert(t).values(
                        partition_id=partition_id,
                        unique_id=unique_id,
                        etag=record.etag,
                        last_modified=record.last_modified,
                        payload=record.data,
                    )
                )
        except IntegrityError as exc:
            raise AlreadyExists(table, partition_id, unique_id) from exc
        return record

    def _replace(
        self, table: str, partition_id: str, unique_id: str, data: dict[str, Any], if_match: str | None
    ) -> StoredRecord:
        t = self.table_for(table)
        record = StoredRecord(partition_id, unique_id, uuid4().hex, datetime.now(UTC), dict(data))
        key = and_(t.c.partition_id == partition_id, t.c.unique_id == unique_id)
        with self.engine.begin() as conn:
            result = conn.execute(
                update(t)
                .where(key, t.c.etag == if_match)
                .values(etag=record.etag, last_modified=record.last_modified, payload=record.data)
            )
            if result.rowcount == 0:
                if conn.execute(select(t.c.etag).where(key)).first() is None:
                    raise ObjectNotFoundError(f"{table} has no entity at ({partition_id}, {unique_id})")
                raise ConcurrencyConflict(table, partition_id, unique_id, if_match)
        return record

    def _delete(self, table: str, partition_id: str, unique_id: str, if_match: str | None) -> bool:
        t = self.table_for(table)
        key = and_(t.c.partition_id == partition_id, t.c.unique_id == unique_id)
        stmt = delete(t).where(key) if if_match is None else delete(t).where(key, t.c.etag == if_match)
        with self.engine.begin() as conn:
            result = conn.execute(stmt)
            if result.rowcount == 0 and if_match is not None:
                if conn.execute(select(t.c.etag).where(key)).first() is not None:
                    raise ConcurrencyConflict(table, partition_id, unique_id, if_match)
        return result.rowcount > 0

    def _reset(self) -> None:
        with self.engine.begin() as conn:
            for t in list(self._tables.values()):
                conn.execute(delete(t))

    # ------------------------------------------------------------------
    # Port
    # ------------------------------------------------------------------

    async def ensure_table(self, table: str) -> None:
        await asyncio.to_thread(self.create_tables, [table])

    async def get(self, table: str, partition_id: str, unique_id: str) -> StoredRecord | None:
        return await asyncio.to_thread(self._get, table, partition_id, unique_id)

    async def query(self, table: str, partition_id: str | None = None) -> AsyncIterator[StoredRecord]:
        after = None
        while True:
            page = await asyncio.to_thread(self._page, table, partition_id, after)
            for record in page:
                yield record
            if len(page) < self.page_size:
                return
            after = (page[-1].partition_id, page[-1].unique_id)

    async def insert(self, table: str, partition_id: str, unique_id: str, data: dict[str, Any]) -> StoredRecord:
        return await asyncio.to_thread(self._insert, table, partition_id, unique_id, data)

    async def replace(
        self, table: str, partition_id: str, unique_id: str, data: dict[str, Any], if_match: str | None
    ) -> StoredRecord:
        return await asyncio.to_thread(self._replace, table, partition_id, unique_id, data, if_match)

    async def delete(self, table: str, partition_id: str, unique_id: str, if_match: str | None = None) -> bool:
        return await asyncio.to_thread(self._delete, table, partition_id, unique_id, if_match)

    async def reset(self) -> None:
        await asyncio.to_thread(self._reset)
