from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from credit_ledger.core.domain.model.customer import CustomerId
from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.order import Order, OrderId, OrderStatus


class OrderRepository(Protocol):
    async def save(self, order: Order) -> Result[OrderId, LedgerError]: ...

    async def get(self, order_id: OrderId) -> Result[Order, LedgerError]: ...

    async def list(
        self,
        offset: int,
        limit: int,
        customer_id: CustomerId | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
    ) -> Result[Sequence[Order], LedgerError]: ...

    async def list_all(self) -> Result[Sequence[Order], LedgerError]: ...

    async def set_status(
        self, order_id: OrderId, status: OrderStatus
    ) -> Result[Order, LedgerError]: ...
