from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.money import Money


@dataclass(frozen=True)
class DashboardSummary:
    total_customers: int
    total_sales: Money
    total_outstanding: Money


class DashboardUseCase(Protocol):
    async def summary(self) -> Result[DashboardSummary, LedgerError]: ...
