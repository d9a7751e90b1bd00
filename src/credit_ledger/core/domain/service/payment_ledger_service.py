from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Sequence

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.customer import CustomerId, now_utc
from credit_ledger.core.domain.model.errors import (
    InvalidAmountError,
    LedgerError,
    ValidationError,
)
from credit_ledger.core.domain.model.money import DEFAULT_CURRENCY, Money
from credit_ledger.core.domain.model.payment import Payment, PaymentId
from credit_ledger.core.domain.service.balance_updates import update_balance
from credit_ledger.core.domain.service.event_dispatch import publish_non_fatal
from credit_ledger.core.ports.inbound.record_payment import (
    PaymentLedgerUseCase,
    PaymentReceipt,
    RecordPaymentCommand,
)
from credit_ledger.core.ports.outbound.customers import CustomerRepository
from credit_ledger.core.ports.outbound.events import EventPublisher, PaymentRecorded
from credit_ledger.core.ports.outbound.payments import PaymentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentLedgerDeps:
    customers: CustomerRepository
    payments: PaymentRepository
    events: EventPublisher
    balance_update_max_attempts: int = 5
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class PaymentLedgerService(PaymentLedgerUseCase):
    deps: PaymentLedgerDeps

    async def record_payment(
        self, command: RecordPaymentCommand
    ) -> Result[PaymentReceipt, LedgerError]:
        v = _validate_command(command, self.deps.currency)
        if isinstance(v, Failure):
            return v
        amount = v.unwrap()
        customer_id = CustomerId(command.customer_id.strip())

        changed = await update_balance(
            self.deps.customers,
            customer_id,
            lambda account: account.settle(amount),
            self.deps.balance_update_max_attempts,
        )
        if isinstance(changed, Failure):
            return changed
        change = changed.unwrap()

        payment = Payment(
            payment_id=PaymentId.new(),
            customer_id=customer_id,
            customer_name=change.before.name,
            amount=amount,
            previous_balance=change.before.balance,
            new_balance=change.after.balance,
            paid_on=now_utc().date(),
            note=command.note.strip(),
        )
        appended = await self.deps.payments.append(payment)
        if isinstance(appended, Failure):
            logger.error(
                "balance of customer %s settled by %s but the payment log write failed: %s",
                customer_id.value,
                amount.format(),
                appended.failure(),
            )
            return appended
        payment = appended.unwrap()
        logger.info(
            "payment %s from customer %s: %s -> %s",
            payment.payment_id.value,
            customer_id.value,
            payment.previous_balance.format(),
            payment.new_balance.format(),
        )

        warnings = await publish_non_fatal(
            self.deps.events, PaymentRecorded(payment=payment, customer=change.after)
        )
        return Success(PaymentReceipt(payment=payment, warnings=warnings))

    async def history_for(
        self, customer_id: str
    ) -> Result[Sequence[Payment], LedgerError]:
        if not customer_id.strip():
            return Failure(ValidationError("customer_id is required"))
        cid = CustomerId(customer_id.strip())
        return (await self.deps.payments.list_all()).map(
            lambda payments: newest_first(p for p in payments if p.customer_id == cid)
        )


def newest_first(payments: Iterable[Payment]) -> tuple[Payment, ...]:
    # same-day payments keep the order they were recorded in
    ordered = sorted(payments, key=lambda p: p.sequence)
    return tuple(sorted(ordered, key=lambda p: p.paid_on, reverse=True))


def _validate_command(
    cmd: RecordPaymentCommand, currency: str
) -> Result[Money, LedgerError]:
    if not cmd.customer_id.strip():
        return Failure(ValidationError("customer_id is required"))
    try:
        amount = Money.of(Decimal(str(cmd.amount)), currency)
    except InvalidOperation:
        return Failure(InvalidAmountError(f"amount is not a number: {cmd.amount!r}"))
    if not amount.amount.is_finite():
        return Failure(InvalidAmountError(f"amount is not a number: {cmd.amount!r}"))
    if not amount.is_positive():
        return Failure(InvalidAmountError("payment amount must be > 0"))
    return Success(amount)
