from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.order import Order


@dataclass(frozen=True)
class GetOrderQuery:
    order_id: str  # UUID string


@dataclass(frozen=True)
class SetOrderStatusCommand:
    order_id: str
    status: str


class GetOrderUseCase(Protocol):
    async def get_order(self, query: GetOrderQuery) -> Result[Order, LedgerError]: ...

    async def set_status(
        self, command: SetOrderStatusCommand
    ) -> Result[Order, LedgerError]: ...
