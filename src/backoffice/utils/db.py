import asyncio

from protean.domain import Domain

from backoffice.customer.repository import CustomerRepository
from backoffice.order.repository import OrderRepository
from backoffice.product.repository import ProductRepository
from backoffice.storage import get_backend
from backoffice.storage.sql_adapter import SqlAlchemyBackend

REPOSITORIES = (CustomerRepository, ProductRepository, OrderRepository)


def table_names() -> list[str]:
    return [repository.table_name for repository in REPOSITORIES]


async def _ensure_tables():
    for repository in REPOSITORIES:
        await repository().ensure_table()


def setup_db(domain: Domain):
    """Create the tables of every repository in the configured backend"""
    with domain.domain_context():
        asyncio.run(_ensure_tables())


def drop_db(domain: Domain):
    """Drop the tables of every repository, or empty them where tables cannot be dropped"""
    with domain.domain_context():
        backend = get_backend()
        if isinstance(backend, SqlAlchemyBackend):
            backend.drop_tables(table_names())
        else:
            asyncio.run(backend.reset())
