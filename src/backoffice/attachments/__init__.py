"""Selects the process-wide attachment store from settings."""

from backoffice.attachments.port import AttachmentStore
from backoffice.config import get_settings

_store_instance: AttachmentStore | None = None


def get_attachment_store() -> AttachmentStore:
    """Return the configured attachment store (singleton).

    Uses FakeAttachmentStore by default. Set ATTACHMENT_ADAPTER=local to keep
    files in ATTACHMENT_DIR.
    """
    global _store_instance
    if _store_instance is None:
        settings = get_settings()
        if settings.attachment_adapter == "fake":
            from backoffice.attachments.fake_adapter import FakeAttachmentStore

            _store_instance = FakeAttachmentStore()
        elif settings.attachment_adapter == "local":
            from backoffice.attachments.local_adapter import LocalDirectoryStore

            _store_instance = LocalDirectoryStore(settings.attachment_dir)
        else:
            raise ValueError(f"Unknown attachment adapter: {settings.attachment_adapter}")
    return _store_instance


def set_attachment_store(store: AttachmentStore) -> None:
    global _store_instance
    _store_instance = store


def reset_attachment_store() -> None:
    """Reset the attachment store singleton (useful for testing)."""
    global _store_instance
    _store_instance = None
