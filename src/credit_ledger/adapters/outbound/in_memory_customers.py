from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Sequence

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.customer import Customer, CustomerId, now_utc
from credit_ledger.core.domain.model.errors import (
    BalanceConflict,
    CustomerNotFound,
    LedgerError,
    PersistenceError,
)
from credit_ledger.core.domain.model.money import Money
from credit_ledger.core.ports.outbound.customers import CustomerRepository, NewCustomer

_EDITABLE = {"business_id", "name", "phone", "email"}


@dataclass
class InMemoryCustomerRepository(CustomerRepository):
    _store: Dict[str, Customer] = field(default_factory=dict)

    async def insert(self, customer: NewCustomer) -> Result[Customer, LedgerError]:
        cid = CustomerId.new()
        created = Customer(
            customer_id=cid,
            business_id=customer.business_id,
            name=customer.name,
            phone=customer.phone,
            email=customer.email,
            balance=customer.balance,
            created_at=now_utc(),
        )
        self._store[cid.value] = created
        return Success(created)

    async def get(self, customer_id: CustomerId) -> Result[Customer, LedgerError]:
        if customer_id.value not in self._store:
            return Failure(
                CustomerNotFound(message="customer not found", customer_id=customer_id.value)
            )
        return Success(self._store[customer_id.value])

    async def list_all(self) -> Result[Sequence[Customer], LedgerError]:
        return Success(tuple(self._store.values()))

    async def list_with_balance(self) -> Result[Sequence[Customer], LedgerError]:
        return Success(tuple(c for c in self._store.values() if c.balance.is_positive()))

    async def update_fields(
        self, customer_id: CustomerId, fields: dict[str, str]
    ) -> Result[Customer, LedgerError]:
        unknown = set(fields) - _EDITABLE
        if unknown:
            return Failure(
                PersistenceError(message=f"fields not editable: {sorted(unknown)}")
            )
        got = await self.get(customer_id)
        if isinstance(got, Failure):
            return got
        updated = replace(got.unwrap(), **fields)
        self._store[customer_id.value] = updated
        return Success(updated)

    async def compare_and_set_balance(
        self, customer_id: CustomerId, expected: Money, new: Money
    ) -> Result[Customer, LedgerError]:
        got = await self.get(customer_id)
        if isinstance(got, Failure):
            return got
        current = got.unwrap()
        if current.balance != expected:
            return Failure(
                BalanceConflict(
                    message=f"expected {expected.format()}, found {current.balance.format()}",
                    customer_id=customer_id.value,
                )
            )
        updated = current.with_balance(new)
        self._store[customer_id.value] = updated
        return Success(updated)

    async def delete(self, customer_id: CustomerId) -> Result[None, LedgerError]:
        if self._store.pop(customer_id.value, None) is None:
            return Failure(
                CustomerNotFound(message="customer not found", customer_id=customer_id.value)
            )
        return Success(None)
