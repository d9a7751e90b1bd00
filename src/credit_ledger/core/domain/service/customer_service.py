from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Sequence

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.customer import Customer, CustomerId
from credit_ledger.core.domain.model.errors import (
    InvalidAmountError,
    LedgerError,
    OutstandingBalanceError,
    ValidationError,
)
from credit_ledger.core.domain.model.money import DEFAULT_CURRENCY, Money, fold_money
from credit_ledger.core.domain.model.payment import Payment
from credit_ledger.core.ports.inbound.customers import (
    CreateCustomerCommand,
    CustomerDirectoryUseCase,
    OutstandingCredit,
    OutstandingCreditsView,
    UpdateCustomerCommand,
)
from credit_ledger.core.ports.outbound.customers import CustomerRepository, NewCustomer
from credit_ledger.core.ports.outbound.payments import PaymentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomerDirectoryDeps:
    customers: CustomerRepository
    payments: PaymentRepository
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class CustomerDirectoryService(CustomerDirectoryUseCase):
    deps: CustomerDirectoryDeps

    async def create_customer(
        self, command: CreateCustomerCommand
    ) -> Result[Customer, LedgerError]:
        if not command.name.strip():
            return Failure(ValidationError("name is required"))
        try:
            opening = Money.of(Decimal(str(command.opening_balance)), self.deps.currency)
        except InvalidOperation:
            return Failure(InvalidAmountError("opening_balance is not a number"))
        if opening.is_negative():
            return Failure(InvalidAmountError("opening_balance must be >= 0"))

        created = await self.deps.customers.insert(
            NewCustomer(
                business_id=command.business_id.strip(),
                name=command.name.strip(),
                phone=command.phone.strip(),
                email=command.email.strip(),
                balance=opening,
            )
        )
        if isinstance(created, Success):
            logger.info("customer %s created", created.unwrap().customer_id.value)
        return created

    async def get_customer(self, customer_id: str) -> Result[Customer, LedgerError]:
        if not customer_id.strip():
            return Failure(ValidationError("customer_id is required"))
        return await self.deps.customers.get(CustomerId(customer_id.strip()))

    async def list_customers(
        self, search: str | None = None
    ) -> Result[Sequence[Customer], LedgerError]:
        return (await self.deps.customers.list_all()).map(
            lambda customers: tuple(c for c in customers if _matches(c, search))
        )

    async def update_customer(
        self, command: UpdateCustomerCommand
    ) -> Result[Customer, LedgerError]:
        fields = {
            name: value.strip()
            for name, value in (
                ("business_id", command.business_id),
                ("name", command.name),
                ("phone", command.phone),
                ("email", command.email),
            )
            if value is not None
        }
        if "name" in fields and not fields["name"]:
            return Failure(ValidationError("name cannot be empty"))
        return await self.deps.customers.update_fields(
            CustomerId(command.customer_id.strip()), fields
        )

    async def delete_customer(self, customer_id: str) -> Result[None, LedgerError]:
        got = await self.get_customer(customer_id)
        if isinstance(got, Failure):
            return got
        customer = got.unwrap()
        if customer.has_outstanding_balance():
            return Failure(
                OutstandingBalanceError(
                    message=f"customer still owes {customer.balance.format()}",
                    customer_id=customer.customer_id.value,
                )
            )
        deleted = await self.deps.customers.delete(customer.customer_id)
        if isinstance(deleted, Success):
            logger.info("customer %s deleted", customer.customer_id.value)
        return deleted

    async def list_outstanding(
        self, search: str | None = None
    ) -> Result[OutstandingCreditsView, LedgerError]:
        owing = await self.deps.customers.list_with_balance()
        if isinstance(owing, Failure):
            return owing
        payments = await self.deps.payments.list_all()
        if isinstance(payments, Failure):
            return payments

        latest: dict[CustomerId, Payment] = {}
        for p in sorted(payments.unwrap(), key=lambda p: (p.paid_on, p.sequence)):
            latest[p.customer_id] = p

        customers = owing.unwrap()
        entries = tuple(
            OutstandingCredit(customer=c, last_payment=latest.get(c.customer_id))
            for c in customers
            if _matches(c, search)
        )
        total = fold_money((c.balance for c in customers), currency=self.deps.currency)
        return Success(OutstandingCreditsView(entries=entries, total_outstanding=total))


def _matches(customer: Customer, search: str | None) -> bool:
    if not search or not search.strip():
        return True
    term = search.strip().lower()
    return term in customer.name.lower() or term in customer.phone
