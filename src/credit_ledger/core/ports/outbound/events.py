from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union

from returns.result import Result

from credit_ledger.core.domain.model.customer import Customer
from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.order import Order
from credit_ledger.core.domain.model.payment import Payment


@dataclass(frozen=True)
class OrderReconciled:
    order: Order
    send_bill: bool = False


@dataclass(frozen=True)
class PaymentRecorded:
    payment: Payment
    customer: Customer


DomainEvent = Union[OrderReconciled, PaymentRecorded]


class EventPublisher(Protocol):
    async def publish(self, event: DomainEvent) -> Result[None, LedgerError]: ...
