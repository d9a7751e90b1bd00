from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.errors import (
    InvalidStatusTransition,
    LedgerError,
    ValidationError,
)
from credit_ledger.core.domain.model.order import Order, OrderId, OrderStatus
from credit_ledger.core.ports.inbound.get_order import (
    GetOrderQuery,
    GetOrderUseCase,
    SetOrderStatusCommand,
)
from credit_ledger.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger(__name__)

# administrative transitions only; nothing moves an order automatically
_ALLOWED = {
    OrderStatus.PENDING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


@dataclass(frozen=True)
class GetOrderDeps:
    orders: OrderRepository


@dataclass(frozen=True)
class GetOrderService(GetOrderUseCase):
    deps: GetOrderDeps

    async def get_order(self, query: GetOrderQuery) -> Result[Order, LedgerError]:
        oid = _parse_order_id(query.order_id)
        if isinstance(oid, Failure):
            return oid
        return await self.deps.orders.get(oid.unwrap())

    async def set_status(
        self, command: SetOrderStatusCommand
    ) -> Result[Order, LedgerError]:
        oid = _parse_order_id(command.order_id)
        if isinstance(oid, Failure):
            return oid
        try:
            requested = OrderStatus(command.status.strip().lower())
        except ValueError:
            return Failure(
                ValidationError("status must be one of: pending, completed, cancelled")
            )

        got = await self.deps.orders.get(oid.unwrap())
        if isinstance(got, Failure):
            return got
        order = got.unwrap()
        if requested not in _ALLOWED[order.status]:
            return Failure(
                InvalidStatusTransition(
                    message="only pending orders can be completed or cancelled",
                    current=order.status.value,
                    requested=requested.value,
                )
            )

        updated = await self.deps.orders.set_status(order.order_id, requested)
        if isinstance(updated, Success):
            logger.info(
                "order %s: %s -> %s",
                order.order_id.value,
                order.status.value,
                requested.value,
            )
        return updated


def _parse_order_id(raw: str) -> Result[OrderId, LedgerError]:
    try:
        return Success(OrderId(UUID(raw)))
    except (ValueError, TypeError, AttributeError):
        return Failure(ValidationError(message="order_id must be a valid UUID"))
