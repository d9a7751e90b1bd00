from __future__ import annotations

from dataclasses import dataclass

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.money import DEFAULT_CURRENCY, fold_money
from credit_ledger.core.ports.inbound.dashboard import DashboardSummary, DashboardUseCase
from credit_ledger.core.ports.outbound.customers import CustomerRepository
from credit_ledger.core.ports.outbound.orders import OrderRepository


@dataclass(frozen=True)
class DashboardDeps:
    customers: CustomerRepository
    orders: OrderRepository
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class DashboardService(DashboardUseCase):
    deps: DashboardDeps

    async def summary(self) -> Result[DashboardSummary, LedgerError]:
        customers = await self.deps.customers.list_all()
        if isinstance(customers, Failure):
            return customers
        orders = await self.deps.orders.list_all()
        if isinstance(orders, Failure):
            return orders

        currency = self.deps.currency
        return Success(
            DashboardSummary(
                total_customers=len(customers.unwrap()),
                total_sales=fold_money((o.total for o in orders.unwrap()), currency),
                total_outstanding=fold_money(
                    (c.balance for c in customers.unwrap()), currency
                ),
            )
        )
