from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from uuid import uuid4

from credit_ledger.core.domain.model.money import Money


@dataclass(frozen=True)
class CustomerId:
    value: str

    @staticmethod
    def new() -> "CustomerId":
        return CustomerId(uuid4().hex)


@dataclass(frozen=True)
class Customer:
    customer_id: CustomerId
    business_id: str
    name: str
    phone: str
    email: str
    balance: Money
    created_at: datetime

    def has_outstanding_balance(self) -> bool:
        return self.balance.is_positive()

    def with_balance(self, balance: Money) -> "Customer":
        return replace(self, balance=balance)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
