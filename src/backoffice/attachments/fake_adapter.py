"""Dict-backed attachment store for tests and local runs.

Configurable success/failure behavior for testing.
"""

from pathlib import PurePosixPath
from uuid import uuid4

from backoffice.attachments.port import AttachmentStore

LOCATOR_PREFIX = "memory://attachments/"


class AttachmentUnavailable(Exception):
    pass


class FakeAttachmentStore(AttachmentStore):
    """Fake store that accepts every object by default."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.should_succeed = True
        self.failure_reason = "Object storage unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Object storage unavailable"):
        """Configure the fake store behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def store(self, content: bytes, suggested_name: str) -> str:
        if not self.should_succeed:
            raise AttachmentUnavailable(self.failure_reason)
        locator = f"{LOCATOR_PREFIX}{uuid4()}{PurePosixPath(suggested_name).suffix}"
        self.objects[locator] = content
        return locator

    async def remove(self, locator: str) -> bool:
        if not self.should_succeed:
            raise AttachmentUnavailable(self.failure_reason)
        return self.objects.pop(locator, None) is not None
