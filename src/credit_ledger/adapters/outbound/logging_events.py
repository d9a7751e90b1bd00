from __future__ import annotations

import logging
from dataclasses import dataclass

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.errors import LedgerError, NotificationError
from credit_ledger.core.ports.outbound.events import (
    DomainEvent,
    EventPublisher,
    OrderReconciled,
    PaymentRecorded,
)

logger = logging.getLogger(__name__)


@dataclass
class LoggingEventPublisher(EventPublisher):
    """Publisher used when notifications are switched off: events are only logged."""

    fail: bool = False

    async def publish(self, event: DomainEvent) -> Result[None, LedgerError]:
        if self.fail:
            return Failure(NotificationError(message="publisher is down"))
        if isinstance(event, OrderReconciled):
            logger.info("[event] order_reconciled: %s", event.order.order_id.value)
        elif isinstance(event, PaymentRecorded):
            logger.info("[event] payment_recorded: %s", event.payment.payment_id.value)
        return Success(None)
