from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, Sequence

from returns.result import Result

from credit_ledger.core.domain.model.customer import Customer
from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.money import Money
from credit_ledger.core.domain.model.payment import Payment


@dataclass(frozen=True)
class CreateCustomerCommand:
    business_id: str
    name: str
    phone: str = ""
    email: str = ""
    opening_balance: Decimal = Decimal("0")


@dataclass(frozen=True)
class UpdateCustomerCommand:
    customer_id: str
    business_id: str | None = None
    name: str | None = None
    phone: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class OutstandingCredit:
    customer: Customer
    last_payment: Payment | None


@dataclass(frozen=True)
class OutstandingCreditsView:
    entries: Sequence[OutstandingCredit]
    total_outstanding: Money


class CustomerDirectoryUseCase(Protocol):
    async def create_customer(
        self, command: CreateCustomerCommand
    ) -> Result[Customer, LedgerError]: ...

    async def get_customer(self, customer_id: str) -> Result[Customer, LedgerError]: ...

    async def list_customers(
        self, search: str | None = None
    ) -> Result[Sequence[Customer], LedgerError]: ...

    async def update_customer(
        self, command: UpdateCustomerCommand
    ) -> Result[Customer, LedgerError]: ...

    async def delete_customer(self, customer_id: str) -> Result[None, LedgerError]: ...

    async def list_outstanding(
        self, search: str | None = None
    ) -> Result[OutstandingCreditsView, LedgerError]: ...
