"""Storage backend factory.

Provides get_backend() / set_backend() / reset_backend() to swap
implementations:
- InMemoryBackend for development and testing (default)
- SqlAlchemyBackend for SQLite/PostgreSQL deployments
"""

from backoffice.config import get_settings
from backoffice.storage.port import StorageBackend

_current_backend: StorageBackend | None = None


def get_backend() -> StorageBackend:
    """Return the configured storage backend (singleton).

    Chosen by the STORAGE_BACKEND environment variable: "memory" or "sql".
    """
    global _current_backend
    if _current_backend is None:
        settings = get_settings()
        if settings.storage_backend == "memory":
            from backoffice.storage.memory_adapter import InMemoryBackend

            _current_backend = InMemoryBackend(page_size=settings.storage_page_size)
        elif settings.storage_backend == "sql":
            from backoffice.storage.sql_adapter import SqlAlchemyBackend

            _current_backend = SqlAlchemyBackend(settings.database_uri, page_size=settings.storage_page_size)
        else:
            raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
    return _current_backend


def set_backend(backend: StorageBackend) -> None:
    """Override the active storage backend (useful for tests)."""
    global _current_backend
    _current_backend = backend


def reset_backend() -> None:
    """Reset the backend singleton (useful for testing)."""
    global _current_backend
    _current_backend = None
