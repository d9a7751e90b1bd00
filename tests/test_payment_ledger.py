from datetime import date
from decimal import Decimal

import pytest
from returns.result import Failure, Success

from credit_ledger.core.domain.model.customer import CustomerId
from credit_ledger.core.domain.model.errors import (
    CustomerNotFound,
    InvalidAmountError,
    OverpaymentError,
)
from credit_ledger.core.domain.model.money import Money
from credit_ledger.core.domain.model.payment import Payment, PaymentId
from credit_ledger.core.domain.service.payment_ledger_service import newest_first
from credit_ledger.core.ports.inbound.customers import CreateCustomerCommand
from credit_ledger.core.ports.inbound.record_payment import RecordPaymentCommand
from credit_ledger.core.ports.outbound.events import PaymentRecorded


async def _customer_owing(usecases, amount: str, name: str = "Kamal Silva"):
    created = await usecases.customers.create_customer(
        CreateCustomerCommand(
            business_id="CUS-9",
            name=name,
            phone="0711111111",
            email="kamal@example.com",
            opening_balance=Decimal(amount),
        )
    )
    return created.unwrap()


@pytest.mark.asyncio
async def test_full_payment_clears_balance_and_outstanding_listing(usecases, events):
    customer = await _customer_owing(usecases, "15.00")
    cid = customer.customer_id.value

    result = await usecases.payments.record_payment(
        RecordPaymentCommand(customer_id=cid, amount=Decimal("15.00"))
    )

    assert isinstance(result, Success)
    payment = result.unwrap().payment
    assert payment.previous_balance == Money.of("15.00")
    assert payment.new_balance == Money.of("0.00")
    assert payment.customer_name == "Kamal Silva"

    refreshed = (await usecases.customers.get_customer(cid)).unwrap()
    assert refreshed.balance.is_zero()

    outstanding = (await usecases.customers.list_outstanding()).unwrap()
    assert [e.customer.customer_id.value for e in outstanding.entries] == []

    assert len(events.published) == 1
    assert isinstance(events.published[0], PaymentRecorded)


@pytest.mark.asyncio
async def test_overpayment_is_rejected_and_balance_unchanged(usecases, events):
    customer = await _customer_owing(usecases, "10.00")
    cid = customer.customer_id.value

    result = await usecases.payments.record_payment(
        RecordPaymentCommand(customer_id=cid, amount=Decimal("12.00"))
    )

    assert isinstance(result, Failure)
    assert isinstance(result.failure(), OverpaymentError)
    assert (await usecases.customers.get_customer(cid)).unwrap().balance == Money.of("10.00")
    assert (await usecases.payments.history_for(cid)).unwrap() == ()
    assert events.published == []


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5.00"), Decimal("NaN")])
async def test_non_positive_or_invalid_amount_is_rejected(usecases, amount):
    customer = await _customer_owing(usecases, "10.00")

    result = await usecases.payments.record_payment(
        RecordPaymentCommand(customer_id=customer.customer_id.value, amount=amount)
    )

    assert isinstance(result, Failure)
    assert isinstance(result.failure(), InvalidAmountError)


@pytest.mark.asyncio
async def test_unknown_customer(usecases):
    result = await usecases.payments.record_payment(
        RecordPaymentCommand(customer_id="nobody", amount=Decimal("1.00"))
    )
    assert isinstance(result.failure(), CustomerNotFound)


@pytest.mark.asyncio
async def test_history_keeps_recording_order_within_a_day(usecases):
    customer = await _customer_owing(usecases, "100.00")
    cid = customer.customer_id.value

    for amount in ("10.00", "20.00", "30.00"):
        await usecases.payments.record_payment(
            RecordPaymentCommand(customer_id=cid, amount=Decimal(amount))
        )

    history = (await usecases.payments.history_for(cid)).unwrap()

    assert [p.amount for p in history] == [
        Money.of("10.00"),
        Money.of("20.00"),
        Money.of("30.00"),
    ]
    assert history[-1].new_balance == Money.of("40.00")
    for p in history:
        assert p.new_balance == p.previous_balance - p.amount


@pytest.mark.asyncio
async def test_history_only_contains_that_customer(usecases):
    first = await _customer_owing(usecases, "50.00", name="First")
    second = await _customer_owing(usecases, "50.00", name="Second")

    await usecases.payments.record_payment(
        RecordPaymentCommand(customer_id=first.customer_id.value, amount=Decimal("5.00"))
    )
    await usecases.payments.record_payment(
        RecordPaymentCommand(customer_id=second.customer_id.value, amount=Decimal("7.00"))
    )

    history = (await usecases.payments.history_for(first.customer_id.value)).unwrap()
    assert [p.customer_name for p in history] == ["First"]


@pytest.mark.asyncio
async def test_notification_failure_is_a_warning(usecases, events):
    events.fail = True
    customer = await _customer_owing(usecases, "10.00")

    result = await usecases.payments.record_payment(
        RecordPaymentCommand(
            customer_id=customer.customer_id.value, amount=Decimal("4.00"), note="cash"
        )
    )

    receipt = result.unwrap()
    assert receipt.payment.new_balance == Money.of("6.00")
    assert receipt.payment.note == "cash"
    assert receipt.warnings == ("mail relay unavailable",)


def _logged(amount: str, paid_on: date, sequence: int) -> Payment:
    return Payment(
        payment_id=PaymentId.new(),
        customer_id=CustomerId("c-1"),
        customer_name="Nimal",
        amount=Money.of(amount),
        previous_balance=Money.of("100.00"),
        new_balance=Money.of("100.00") - Money.of(amount),
        paid_on=paid_on,
        sequence=sequence,
    )


def test_newest_first_is_stable_for_equal_dates():
    payments = [
        _logged("1.00", date(2024, 5, 1), 1),
        _logged("2.00", date(2024, 5, 2), 2),
        _logged("3.00", date(2024, 5, 2), 3),
        _logged("4.00", date(2024, 5, 1), 4),
    ]

    ordered = newest_first(reversed(payments))

    assert [p.sequence for p in ordered] == [2, 3, 1, 4]
