from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Sequence

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.customer import CustomerId
from credit_ledger.core.domain.model.errors import (
    LedgerError,
    OrderNotFound,
    PersistenceError,
)
from credit_ledger.core.domain.model.order import Order, OrderId, OrderStatus
from credit_ledger.core.ports.outbound.orders import OrderRepository


@dataclass
class InMemoryOrderRepository(OrderRepository):
    _store: Dict[str, Order] = field(default_factory=dict)

    async def save(self, order: Order) -> Result[OrderId, LedgerError]:
        key = str(order.order_id.value)
        if key in self._store:
            return Failure(PersistenceError(message="order_id already exists"))
        self._store[key] = order
        return Success(order.order_id)

    async def get(self, order_id: OrderId) -> Result[Order, LedgerError]:
        key = str(order_id.value)
        if key not in self._store:
            return Failure(OrderNotFound(message="order not found", order_id=key))
        return Success(self._store[key])

    async def list(
        self,
        offset: int,
        limit: int,
        customer_id: CustomerId | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
    ) -> Result[Sequence[Order], LedgerError]:
        orders = list(self._store.values())  # insertion order

        if customer_id is not None:
            orders = [o for o in orders if o.customer_id.value == customer_id.value]

        if search:
            term = search.lower()
            orders = [
                o
                for o in orders
                if term in o.customer.name.lower() or term in o.description.lower()
            ]

        reverse = sort_dir == "desc"

        if sort_by == "created_at":
            orders = sorted(orders, key=lambda o: o.created_at, reverse=reverse)
        elif sort_by == "total":
            orders = sorted(orders, key=lambda o: o.total.amount, reverse=reverse)

        sliced = orders[offset : offset + limit]
        return Success(tuple(sliced))

    async def list_all(self) -> Result[Sequence[Order], LedgerError]:
        return Success(tuple(self._store.values()))

    async def set_status(
        self, order_id: OrderId, status: OrderStatus
    ) -> Result[Order, LedgerError]:
        got = await self.get(order_id)
        if isinstance(got, Failure):
            return got
        updated = got.unwrap().with_status(status)
        self._store[str(order_id.value)] = updated
        return Success(updated)
