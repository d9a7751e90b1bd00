from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import UUID, uuid4

from credit_ledger.core.domain.model.customer import CustomerId
from credit_ledger.core.domain.model.money import Money


@dataclass(frozen=True)
class PaymentId:
    value: UUID

    @staticmethod
    def new() -> "PaymentId":
        return PaymentId(uuid4())


@dataclass(frozen=True)
class Payment:
    payment_id: PaymentId
    customer_id: CustomerId
    customer_name: str
    amount: Money
    previous_balance: Money
    new_balance: Money
    paid_on: date
    note: str = ""
    # assigned by the ledger store, used to order same-day payments
    sequence: int = 0
