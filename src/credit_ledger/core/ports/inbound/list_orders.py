from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.order import Order


@dataclass(frozen=True)
class ListOrdersQuery:
    offset: int = 0
    limit: int = 50
    customer_id: str | None = None
    search: str | None = None  # customer name or description
    sort_by: str = "created_at"  # created_at | total
    sort_dir: str = "desc"  # asc | desc


class ListOrdersUseCase(Protocol):
    async def list_orders(
        self, query: ListOrdersQuery
    ) -> Result[Sequence[Order], LedgerError]: ...
