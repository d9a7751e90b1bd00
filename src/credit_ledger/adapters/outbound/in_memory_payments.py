from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Sequence

from returns.result import Result, Success

from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.payment import Payment
from credit_ledger.core.ports.outbound.payments import PaymentRepository


@dataclass
class InMemoryPaymentRepository(PaymentRepository):
    _log: List[Payment] = field(default_factory=list)

    async def append(self, payment: Payment) -> Result[Payment, LedgerError]:
        stored = replace(payment, sequence=len(self._log) + 1)
        self._log.append(stored)
        return Success(stored)

    async def list_all(self) -> Result[Sequence[Payment], LedgerError]:
        return Success(tuple(self._log))
