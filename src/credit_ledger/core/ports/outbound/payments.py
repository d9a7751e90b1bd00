from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.payment import Payment


class PaymentRepository(Protocol):
    """Append-only payment log."""

    async def append(self, payment: Payment) -> Result[Payment, LedgerError]:
        """Store ``payment`` and return it with its ledger sequence assigned."""
        ...

    async def list_all(self) -> Result[Sequence[Payment], LedgerError]: ...
