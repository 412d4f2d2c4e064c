"""In-memory publisher that records what it was asked to send.

Configurable success/failure behavior for testing how workflows cope with
an unavailable queue.
"""

import json
from typing import Any

from backoffice.events.port import EventPublisher
from backoffice.exceptions import PublishFailed


class FakePublisher(EventPublisher):
    """Fake publisher that accepts every message by default."""

    def __init__(self):
        self.messages: list[tuple[str, dict[str, Any]]] = []
        self.should_succeed = True
        self.failure_reason = "Queue unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Queue unavailable"):
        """Configure the fake publisher behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def publish(self, event_name: str, payload: dict[str, Any]) -> None:
        if not self.should_succeed:
            raise PublishFailed(event_name, self.failure_reason)
        self.messages.append((event_name, payload))

    async def peek(self, max_messages: int = 16) -> list[str]:
        return [json.dumps(payload) for _, payload in self.messages[:max_messages]]

    def of_type(self, event_name: str) -> list[dict[str, Any]]:
        """Payloads published under ``event_name``, in publish order."""
        return [payload for name, payload in self.messages if name == event_name]
