import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the domain by pushing the associated domain_context. The activated domain can then be referred to elsewhere as `current_domain`
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from backoffice.domain import backoffice

    backoffice.init()
    backoffice.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


def _test_backend(tmp_path):
    """In-memory by default; STORAGE_BACKEND=sql runs the suite over a SQLite file."""
    from backoffice.config import get_settings
    from backoffice.storage.memory_adapter import InMemoryBackend
    from backoffice.storage.sql_adapter import SqlAlchemyBackend

    # A small page size makes every scan cross page boundaries
    if get_settings().storage_backend == "sql":
        return SqlAlchemyBackend(f"sqlite:///{tmp_path / 'suite.db'}", page_size=2)
    return InMemoryBackend(page_size=2)


@pytest.fixture(autouse=True)
def run_around_tests(tmp_path):
    """Give every test a fresh store, publisher, attachment store and contract share."""
    from backoffice.attachments import reset_attachment_store, set_attachment_store
    from backoffice.attachments.fake_adapter import FakeAttachmentStore
    from backoffice.config import reset_settings
    from backoffice.contracts import reset_contract_share, set_contract_share
    from backoffice.contracts.fake_adapter import FakeContractShare
    from backoffice.events import reset_publisher, set_publisher
    from backoffice.events.fake_adapter import FakePublisher
    from backoffice.storage import reset_backend, set_backend

    reset_settings()
    set_backend(_test_backend(tmp_path))
    set_publisher(FakePublisher())
    set_attachment_store(FakeAttachmentStore())
    set_contract_share(FakeContractShare())

    yield

    reset_backend()
    reset_publisher()
    reset_attachment_store()
    reset_contract_share()
    reset_settings()


@pytest.fixture()
def backend():
    from backoffice.storage import get_backend

    return get_backend()


@pytest.fixture()
def publisher():
    from backoffice.events import get_publisher

    return get_publisher()


@pytest.fixture()
def attachments():
    from backoffice.attachments import get_attachment_store

    return get_attachment_store()


@pytest.fixture()
def sql_backend(tmp_path):
    """Swap in a SQLAlchemy backend over a throwaway SQLite file."""
    from backoffice.storage import set_backend
    from backoffice.storage.sql_adapter import SqlAlchemyBackend

    store = SqlAlchemyBackend(f"sqlite:///{tmp_path / 'store.db'}", page_size=2)
    set_backend(store)
    yield store
    store.engine.dispose()


@pytest.fixture()
def contracts():
    from backoffice.contracts import get_contract_share

    return get_contract_share()
