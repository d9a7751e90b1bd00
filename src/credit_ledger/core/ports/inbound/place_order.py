from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.money import Money
from credit_ledger.core.domain.model.order import Order, OrderLine, PaymentMode


@dataclass(frozen=True)
class ItemSelection:
    item_id: str
    quantity: int


@dataclass(frozen=True)
class PlaceOrderCommand:
    customer_id: str
    lines: Sequence[OrderLine]
    payment_mode: PaymentMode = PaymentMode.SETTLE_NOW
    description: str = ""
    send_bill: bool = False


@dataclass(frozen=True)
class OrderReceipt:
    order: Order
    new_balance: Money | None
    warnings: tuple[str, ...] = ()

    @property
    def total(self) -> Money:
        return self.order.total


class PlaceOrderUseCase(Protocol):
    async def build_lines(
        self, selections: Sequence[ItemSelection]
    ) -> Result[tuple[OrderLine, ...], LedgerError]: ...

    async def place_order(
        self, command: PlaceOrderCommand
    ) -> Result[OrderReceipt, LedgerError]: ...
