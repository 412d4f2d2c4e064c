"""Redis Streams publisher.

Each event is appended to one stream as a single entry holding the event
name and the JSON body. The stream is capped approximately at
``max_stream_length`` entries.
"""

import json
from typing import Any

import redis.asyncio as aioredis
import structlog
from redis.exceptions import RedisError

from backoffice.events.port import EventPublisher
from backoffice.exceptions import PublishFailed

logger = structlog.get_logger(__name__)


class RedisStreamPublisher(EventPublisher):
    def __init__(self, redis_url: str, stream: str = "orders", max_stream_length: int = 10_000):
        self.redis_url = redis_url
        self.stream = stream
        self.max_stream_length = max_stream_length
        self._redis: aioredis.Redis | None = None

    @property
    def client(self) -> aioredis.Redis:
        if self._redis is None:
            self._redis = aioredis.from_url(self.redis_url, decode_responses=True)
        return self._redis

    async def publish(self, event_name: str, payload: dict[str, Any]) -> None:
        try:
            await self.client.xadd(
                self.stream,
                {"type": event_name, "body": json.dumps(payload)},
                maxlen=self.max_stream_length,
                approximate=True,
            )
        except RedisError as exc:
            raise PublishFailed(event_name, str(exc)) from exc

    async def peek(self, max_messages: int = 16) -> list[str]:
        entries = await self.client.xrange(self.stream, count=max_messages)
        return [fields["body"] for _, fields in entries]

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("Redis publisher closed", stream=self.stream)
