from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import InvalidOperation
from typing import Sequence

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.catalog import ItemId
from credit_ledger.core.domain.model.credit_account import CreditAccount
from credit_ledger.core.domain.model.customer import Customer, CustomerId, now_utc
from credit_ledger.core.domain.model.errors import (
    EmptyOrderError,
    InvalidAmountError,
    LedgerError,
    NoCustomerError,
    ValidationError,
)
from credit_ledger.core.domain.model.money import DEFAULT_CURRENCY
from credit_ledger.core.domain.model.order import (
    CustomerSnapshot,
    Order,
    OrderId,
    OrderLine,
    OrderStatus,
    PaymentMode,
)
from credit_ledger.core.domain.service.balance_updates import update_balance
from credit_ledger.core.domain.service.event_dispatch import publish_non_fatal
from credit_ledger.core.domain.service.order_lines import compute_total, merge_or_add
from credit_ledger.core.ports.inbound.place_order import (
    ItemSelection,
    OrderReceipt,
    PlaceOrderCommand,
    PlaceOrderUseCase,
)
from credit_ledger.core.ports.outbound.catalog import CatalogRepository
from credit_ledger.core.ports.outbound.customers import CustomerRepository
from credit_ledger.core.ports.outbound.events import EventPublisher, OrderReconciled
from credit_ledger.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaceOrderDeps:
    customers: CustomerRepository
    catalog: CatalogRepository
    orders: OrderRepository
    events: EventPublisher
    balance_update_max_attempts: int = 5
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class PlaceOrderService(PlaceOrderUseCase):
    """Order-to-credit reconciler.

    Validate -> total -> persist as pending -> charge the credit account when
    deferred -> publish ``OrderReconciled``. Nothing is rolled back: if the
    charge fails after the order was saved, the order stays and the error is
    returned to the caller.
    """

    deps: PlaceOrderDeps

    async def build_lines(
        self, selections: Sequence[ItemSelection]
    ) -> Result[tuple[OrderLine, ...], LedgerError]:
        lines: tuple[OrderLine, ...] = ()
        for i, sel in enumerate(selections):
            if not sel.item_id.strip():
                return Failure(ValidationError(f"selections[{i}].item_id is required"))
            got = await self.deps.catalog.get(ItemId(sel.item_id.strip()))
            if isinstance(got, Failure):
                return got
            lines = merge_or_add(lines, got.unwrap(), sel.quantity)
        return Success(lines)

    async def place_order(
        self, command: PlaceOrderCommand
    ) -> Result[OrderReceipt, LedgerError]:
        v = _validate_command(command)
        if isinstance(v, Failure):
            return v

        got = await self.deps.customers.get(CustomerId(command.customer_id.strip()))
        if isinstance(got, Failure):
            return got
        customer = got.unwrap()

        built = _build_order(command, customer, self.deps.currency)
        if isinstance(built, Failure):
            return built
        order = built.unwrap()

        if order.payment_mode is PaymentMode.DEFER:
            # an out-of-range charge is rejected before the order is saved
            dry_run = CreditAccount(customer.customer_id, customer.balance).charge(order.total)
            if isinstance(dry_run, Failure):
                return dry_run

        saved = await self.deps.orders.save(order)
        if isinstance(saved, Failure):
            return saved
        logger.info(
            "order %s saved for customer %s: total=%s mode=%s",
            order.order_id.value,
            customer.customer_id.value,
            order.total.format(),
            order.payment_mode.value,
        )

        new_balance = None
        if order.payment_mode is PaymentMode.DEFER:
            charged = await update_balance(
                self.deps.customers,
                customer.customer_id,
                lambda account: account.charge(order.total),
                self.deps.balance_update_max_attempts,
            )
            if isinstance(charged, Failure):
                logger.error(
                    "order %s saved but charging customer %s failed: %s",
                    order.order_id.value,
                    customer.customer_id.value,
                    charged.failure(),
                )
                return charged
            new_balance = charged.unwrap().after.balance
            logger.info(
                "customer %s charged %s, balance now %s",
                customer.customer_id.value,
                order.total.format(),
                new_balance.format(),
            )

        warnings = await publish_non_fatal(
            self.deps.events, OrderReconciled(order=order, send_bill=command.send_bill)
        )
        return Success(OrderReceipt(order=order, new_balance=new_balance, warnings=warnings))


def _validate_command(cmd: PlaceOrderCommand) -> Result[PlaceOrderCommand, LedgerError]:
    if not cmd.customer_id.strip():
        return Failure(NoCustomerError("a customer must be selected"))
    if not cmd.lines:
        return Failure(EmptyOrderError("at least one order line is required"))

    for i, ln in enumerate(cmd.lines):
        if ln.quantity <= 0:
            return Failure(ValidationError(f"lines[{i}].quantity must be > 0"))
        if ln.unit_price.is_negative():
            return Failure(ValidationError(f"lines[{i}].unit_price must be >= 0"))

    return Success(cmd)


def _build_order(
    cmd: PlaceOrderCommand, customer: Customer, currency: str
) -> Result[Order, LedgerError]:
    lines = tuple(cmd.lines)
    try:
        total = compute_total(lines, currency=currency)
    except InvalidOperation:
        return Failure(InvalidAmountError("order total is out of range"))
    order = Order(
        order_id=OrderId.new(),
        customer=CustomerSnapshot(
            customer_id=customer.customer_id,
            name=customer.name,
            phone=customer.phone,
            email=customer.email,
        ),
        lines=lines,
        description=cmd.description.strip(),
        payment_mode=cmd.payment_mode,
        total=total,
        status=OrderStatus.PENDING,
        created_at=now_utc(),
    )
    return Success(order)
