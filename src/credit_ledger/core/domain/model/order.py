from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Tuple
from uuid import UUID, uuid4

from credit_ledger.core.domain.model.catalog import ItemId
from credit_ledger.core.domain.model.customer import CustomerId
from credit_ledger.core.domain.model.money import Money


class PaymentMode(str, Enum):
    SETTLE_NOW = "settle_now"
    DEFER = "defer"


class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class OrderId:
    value: UUID

    @staticmethod
    def new() -> "OrderId":
        return OrderId(uuid4())

    def short(self) -> str:
        return self.value.hex[-6:]


@dataclass(frozen=True)
class OrderLine:
    item_id: ItemId
    item_name: str
    unit_price: Money
    quantity: int

    def subtotal(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CustomerSnapshot:
    customer_id: CustomerId
    name: str
    phone: str
    email: str


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    customer: CustomerSnapshot
    lines: Tuple[OrderLine, ...]
    description: str
    payment_mode: PaymentMode
    total: Money
    status: OrderStatus
    created_at: datetime

    @property
    def customer_id(self) -> CustomerId:
        return self.customer.customer_id

    def with_status(self, status: OrderStatus) -> "Order":
        return replace(self, status=status)
