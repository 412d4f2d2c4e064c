"""Interface every event publisher implements.

Publishing is fire-and-forget with at-least-once delivery assumed.
Consumers must tolerate duplicates.
"""

from abc import ABC, abstractmethod
from typing import Any


class EventPublisher(ABC):
    """Abstract interface for publisher adapters."""

    @abstractmethod
    async def publish(self, event_name: str, payload: dict[str, Any]) -> None:
        """Hand one JSON-serializable event body to the queue.

        Raises:
            PublishFailed: when the queue does not accept the message.
        """
        ...

    @abstractmethod
    async def peek(self, max_messages: int = 16) -> list[str]:
        """Return up to ``max_messages`` queued bodies as JSON text, oldest first,
        without consuming them."""
        ...

    async def close(self) -> None:
        """Release connections. Adapters without any keep the default."""
        return None
