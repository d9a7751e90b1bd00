from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, Sequence

from returns.result import Result

from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.payment import Payment


@dataclass(frozen=True)
class RecordPaymentCommand:
    customer_id: str
    amount: Decimal
    note: str = ""


@dataclass(frozen=True)
class PaymentReceipt:
    payment: Payment
    warnings: tuple[str, ...] = ()


class PaymentLedgerUseCase(Protocol):
    async def record_payment(
        self, command: RecordPaymentCommand
    ) -> Result[PaymentReceipt, LedgerError]: ...

    async def history_for(
        self, customer_id: str
    ) -> Result[Sequence[Payment], LedgerError]: ...
