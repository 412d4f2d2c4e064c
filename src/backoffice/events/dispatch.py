"""Fire-and-forget publication of integration events.

A failed publish is logged and dropped. The state change that produced the
event has already been written and stays written.
"""

import structlog

from backoffice.events import get_publisher
from backoffice.events.contracts import IntegrationEvent
from backoffice.exceptions import PublishFailed

logger = structlog.get_logger(__name__)


async def publish_event(event: IntegrationEvent) -> bool:
    """Publish ``event`` through the configured publisher.

    Returns True when the queue accepted the message.
    """
    try:
        await get_publisher().publish(event.event_type, event.to_payload())
    except PublishFailed as exc:
        logger.warning("Event publish failed", event_type=event.event_type, reason=exc.reason)
        return False
    except Exception:
        logger.error("Event publisher error", event_type=event.event_type, exc_info=True)
        return False
    logger.debug("Event published", event_type=event.event_type)
    return True


async def publish_all(*events: IntegrationEvent) -> int:
    """Publish events in order, continuing past failures. Returns the number accepted."""
    accepted = 0
    for event in events:
        if await publish_event(event):
            accepted += 1
    return accepted
