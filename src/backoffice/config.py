"""Runtime settings, read from environment variables.

Adapters (storage backend, event publisher, attachment store, contract
share) are chosen here; the singletons in each adapter package consult these
settings the first time they are asked for an instance.
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    log_level: str | None = None
    log_dir: str | None = "logs"
    storage_backend: str = "memory"
    database_uri: str = "sqlite:///backoffice.db"
    storage_page_size: int = 100
    event_publisher: str = "fake"
    redis_url: str = "redis://localhost:6379/0"
    event_stream: str = "orders"
    attachment_adapter: str = "fake"
    attachment_dir: str = "attachments"
    contract_share: str = "fake"
    contract_dir: str = "contracts"
    relocation_strategy: str = "delete_first"


def load_settings() -> Settings:
    """Build a Settings object from the current environment."""
    return Settings(
        environment=(os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower(),
        log_level=os.getenv("LOG_LEVEL"),
        log_dir=os.getenv("LOG_DIR", "logs") or None,
        storage_backend=os.getenv("STORAGE_BACKEND", "memory").lower(),
        database_uri=os.getenv("DATABASE_URI", "sqlite:///backoffice.db"),
        storage_page_size=int(os.getenv("STORAGE_PAGE_SIZE", "100")),
        event_publisher=os.getenv("EVENT_PUBLISHER", "fake").lower(),
        redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        event_stream=os.getenv("EVENT_STREAM", "orders"),
        attachment_adapter=os.getenv("ATTACHMENT_ADAPTER", "fake").lower(),
        attachment_dir=os.getenv("ATTACHMENT_DIR", "attachments"),
        contract_share=os.getenv("CONTRACT_SHARE", "fake").lower(),
        contract_dir=os.getenv("CONTRACT_DIR", "contracts"),
        relocation_strategy=os.getenv("RELOCATION_STRATEGY", "delete_first").lower(),
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
