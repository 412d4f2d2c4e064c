"""Selects the process-wide event publisher from settings."""

from backoffice.config import get_settings
from backoffice.events.port import EventPublisher

_publisher_instance: EventPublisher | None = None


def get_publisher() -> EventPublisher:
    """Return the configured event publisher (singleton).

    Uses FakePublisher by default. Set EVENT_PUBLISHER=redis to append
    events to a Redis stream instead.
    """
    global _publisher_instance
    if _publisher_instance is None:
        settings = get_settings()
        if settings.event_publisher == "fake":
            from backoffice.events.fake_adapter import FakePublisher

            _publisher_instance = FakePublisher()
        elif settings.event_publisher == "redis":
            from backoffice.events.redis_adapter import RedisStreamPublisher

            _publisher_instance = RedisStreamPublisher(settings.redis_url, settings.event_stream)
        else:
            raise ValueError(f"Unknown event publisher: {settings.event_publisher}")
    return _publisher_instance


def set_publisher(publisher: EventPublisher) -> None:
    global _publisher_instance
    _publisher_instance = publisher


def reset_publisher() -> None:
    """Reset the publisher singleton (useful for testing)."""
    global _publisher_instance
    _publisher_instance = None
