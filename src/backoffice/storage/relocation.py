"""Moving an entity to another partition.

The partition id is part of the primary key, so changing the attribute it is
derived from (a customer's city, a product's category) cannot be done with an
update. The entity is written under the new key and removed from the old one,
keeping its unique id and fields. The store has no multi-partition
transaction, so a failure between the two writes leaves the store
inconsistent. That case is logged at critical level and raised as
``RelocationInconsistency`` for an operator to reconcile.
"""

from enum import Enum
from typing import TypeVar

import structlog

from backoffice.config import get_settings
from backoffice.exceptions import ConcurrencyConflict, RelocationInconsistency
from backoffice.keys import same_partition
from backoffice.storage.repository import PartitionedRepository

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class RelocationStrategy(Enum):
    """Order of the two writes performed by a partition move."""

    # Remove the old row, then write the new one. A failed insert loses the entity.
    DELETE_FIRST = "delete_first"
    # Write the new row, then remove the old one. A failed delete leaves a duplicate.
    INSERT_FIRST = "insert_first"


def configured_strategy() -> RelocationStrategy:
    return RelocationStrategy(get_settings().relocation_strategy)


async def save_relocatable(
    repository: PartitionedRepository[T],
    entity: T,
    previous_partition_id: str,
    strategy: RelocationStrategy | None = None,
) -> T:
    """Persist ``entity``, moving it if its partition id changed.

    When the new partition id matches ``previous_partition_id`` ignoring
    case, this is an ordinary version-checked update at the stored key.
    A move is version-checked too: the old row must still carry
    ``entity.etag``, otherwise ``ConcurrencyConflict`` is raised and at most
    one copy of the entity remains.
    """
    if same_partition(entity.partition_id, previous_partition_id):
        entity.partition_id = previous_partition_id
        return await repository.update(entity)

    strategy = strategy or configured_strategy()
    expected_etag = entity.etag
    log = logger.bind(
        table=repository.table_name,
        unique_id=entity.unique_id,
        source_partition=previous_partition_id,
        target_partition=entity.partition_id,
        strategy=strategy.value,
    )

    if strategy is RelocationStrategy.DELETE_FIRST:
        # The old row goes only if nobody wrote it since it was read.
        if not await repository.delete(previous_partition_id, entity.unique_id, if_match=expected_etag):
            raise ConcurrencyConflict(repository.table_name, previous_partition_id, entity.unique_id, expected_etag)
        try:
            await repository.insert(entity)
        except Exception as exc:
            log.critical("Relocation lost entity after delete", error=str(exc))
            raise RelocationInconsistency(
                repository.table_name, entity.unique_id, previous_partition_id, entity.partition_id, "insert"
            ) from exc
    else:
        current = await repository.get(previous_partition_id, entity.unique_id)
        if current is None or current.etag != expected_etag:
            raise ConcurrencyConflict(repository.table_name, previous_partition_id, entity.unique_id, expected_etag)
        await repository.insert(entity)
        try:
            removed = await repository.delete(previous_partition_id, entity.unique_id, if_match=expected_etag)
        except ConcurrencyConflict:
            removed = False
        except Exception as exc:
            log.critical("Relocation left duplicate entity", error=str(exc))
            raise RelocationInconsistency(
                repository.table_name, entity.unique_id, previous_partition_id, entity.partition_id, "delete"
            ) from exc
        if not removed:
            # Another writer changed or moved the source meanwhile; withdraw the copy.
            await _withdraw_copy(repository, entity, previous_partition_id, log)
            raise ConcurrencyConflict(repository.table_name, previous_partition_id, entity.unique_id, expected_etag)

    log.info("Entity relocated")
    return entity


async def _withdraw_copy(repository, entity, previous_partition_id, log) -> None:
    try:
        await repository.delete(entity.partition_id, entity.unique_id, if_match=entity.etag)
    except Exception as exc:
        log.critical("Relocation could not withdraw its copy", error=str(exc))
        raise RelocationInconsistency(
            repository.table_name, entity.unique_id, previous_partition_id, entity.partition_id, "withdraw"
        ) from exc
