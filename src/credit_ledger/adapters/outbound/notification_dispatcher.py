from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.money import Money
from credit_ledger.core.domain.model.order import Order
from credit_ledger.core.ports.outbound.events import (
    DomainEvent,
    EventPublisher,
    OrderReconciled,
    PaymentRecorded,
)
from credit_ledger.core.ports.outbound.notifications import BillRenderer, Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationDispatcher(EventPublisher):
    """Turns domain events into customer emails.

    ``OrderReconciled`` with ``send_bill`` renders the bill and mails it;
    ``PaymentRecorded`` mails a payment confirmation. Customers without an
    email address are skipped.
    """

    renderer: BillRenderer
    notifier: Notifier
    bill_template_id: str
    payment_template_id: str
    business_name: str

    async def publish(self, event: DomainEvent) -> Result[None, LedgerError]:
        if isinstance(event, OrderReconciled):
            if not event.send_bill:
                return Success(None)
            return await self._send_bill(event.order)
        if isinstance(event, PaymentRecorded):
            return await self._send_payment_confirmation(event)
        return Success(None)

    async def _send_bill(self, order: Order) -> Result[None, LedgerError]:
        email = order.customer.email.strip()
        if not email:
            logger.info("order %s: customer has no email, bill not sent", order.order_id.value)
            return Success(None)

        rendered = self.renderer.render_bill(order)
        if isinstance(rendered, Failure):
            return rendered

        params: dict[str, Any] = {
            "to_name": order.customer.name,
            "email": email,
            "order_id": order.order_id.short(),
            "orders": [
                {
                    "name": ln.item_name,
                    "units": ln.quantity,
                    "price": _fixed(ln.subtotal()),
                }
                for ln in order.lines
            ],
            "cost": {
                "shipping": "0.00",
                "tax": "0.00",
                "total": _fixed(order.total),
            },
            "bill_pdf": base64.b64encode(rendered.unwrap()).decode("ascii"),
        }
        sent = await self.notifier.send(self.bill_template_id, params)
        if isinstance(sent, Success):
            logger.info("bill for order %s sent to %s", order.order_id.value, email)
        return sent

    async def _send_payment_confirmation(
        self, event: PaymentRecorded
    ) -> Result[None, LedgerError]:
        email = event.customer.email.strip()
        if not email:
            return Success(None)
        payment = event.payment
        params = {
            "name": event.customer.name,
            "email": email,
            "from_name": self.business_name,
            "title": _fixed(payment.amount),
            "balance": _fixed(payment.new_balance),
            "payment_date": payment.paid_on.isoformat(),
        }
        return await self.notifier.send(self.payment_template_id, params)


def _fixed(m: Money) -> str:
    return f"{m.rounded_to_2_decimals():.2f}"
