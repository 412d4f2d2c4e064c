"""Interface for storing product images and other binary attachments.

The store owns the locator format. Callers keep the returned locator on the
entity and hand it back unchanged to remove the object.
"""

from abc import ABC, abstractmethod


class AttachmentStore(ABC):
    """Abstract interface for attachment adapters."""

    @abstractmethod
    async def store(self, content: bytes, suggested_name: str) -> str:
        """Save ``content`` under a fresh name and return its locator.

        Only the extension of ``suggested_name`` is kept.
        """
        ...

    @abstractmethod
    async def remove(self, locator: str) -> bool:
        """Delete the object. Returns False when it did not exist."""
        ...
