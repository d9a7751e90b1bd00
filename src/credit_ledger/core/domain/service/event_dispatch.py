from __future__ import annotations

import logging

from returns.result import Failure

from credit_ledger.core.ports.outbound.events import DomainEvent, EventPublisher

logger = logging.getLogger(__name__)


async def publish_non_fatal(events: EventPublisher, event: DomainEvent) -> tuple[str, ...]:
    """Publish ``event``; a failure becomes a warning string instead of an error."""
    published = await events.publish(event)
    if isinstance(published, Failure):
        err = published.failure()
        logger.warning("%s side effects failed: %s", type(event).__name__, err)
        return (str(err),)
    return ()
