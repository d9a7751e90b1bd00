from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from credit_ledger.core.domain.model.customer import Customer, CustomerId
from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.money import Money


@dataclass(frozen=True)
class NewCustomer:
    business_id: str
    name: str
    phone: str
    email: str
    balance: Money


class CustomerRepository(Protocol):
    async def insert(self, customer: NewCustomer) -> Result[Customer, LedgerError]: ...

    async def get(self, customer_id: CustomerId) -> Result[Customer, LedgerError]: ...

    async def list_all(self) -> Result[Sequence[Customer], LedgerError]: ...

    async def list_with_balance(self) -> Result[Sequence[Customer], LedgerError]:
        """Customers whose balance is strictly greater than zero."""
        ...

    async def update_fields(
        self, customer_id: CustomerId, fields: dict[str, str]
    ) -> Result[Customer, LedgerError]: ...

    async def compare_and_set_balance(
        self, customer_id: CustomerId, expected: Money, new: Money
    ) -> Result[Customer, LedgerError]:
        """Write ``new`` only if the stored balance still equals ``expected``.

        Fails with ``BalanceConflict`` otherwise.
        """
        ...

    async def delete(self, customer_id: CustomerId) -> Result[None, LedgerError]: ...
