from dataclasses import dataclass, replace
from decimal import Decimal

import pytest
from returns.result import Failure, Success

from credit_ledger.adapters.outbound.in_memory_catalog import InMemoryCatalogRepository
from credit_ledger.adapters.outbound.in_memory_customers import (
    InMemoryCustomerRepository,
)
from credit_ledger.adapters.outbound.in_memory_orders import InMemoryOrderRepository
from credit_ledger.core.domain.model.errors import (
    BalanceConflict,
    CustomerNotFound,
    EmptyOrderError,
    InvalidAmountError,
    ItemNotFound,
    NoCustomerError,
    ValidationError,
)
from credit_ledger.core.domain.model.money import Money
from credit_ledger.core.domain.model.order import OrderStatus, PaymentMode
from credit_ledger.core.domain.service.place_order_service import (
    PlaceOrderDeps,
    PlaceOrderService,
)
from credit_ledger.core.ports.inbound.customers import CreateCustomerCommand
from credit_ledger.core.ports.inbound.list_orders import ListOrdersQuery
from credit_ledger.core.ports.inbound.place_order import (
    ItemSelection,
    PlaceOrderCommand,
)
from credit_ledger.core.ports.outbound.customers import NewCustomer
from credit_ledger.core.ports.outbound.events import OrderReconciled


async def _lines(usecases, *selections):
    built = await usecases.place_order.build_lines(
        [ItemSelection(item_id=i.item_id.value, quantity=q) for i, q in selections]
    )
    return built.unwrap()


@pytest.mark.asyncio
async def test_deferred_order_charges_credit_account(usecases, events, customer, printing):
    lines = await _lines(usecases, (printing, 3))

    result = await usecases.place_order.place_order(
        PlaceOrderCommand(
            customer_id=customer.customer_id.value,
            lines=lines,
            payment_mode=PaymentMode.DEFER,
        )
    )

    assert isinstance(result, Success)
    receipt = result.unwrap()
    assert receipt.total == Money.of("15.00")
    assert receipt.new_balance == Money.of("15.00")
    assert receipt.order.status is OrderStatus.PENDING
    assert receipt.order.customer.name == "Nimal Perera"
    assert receipt.warnings == ()

    balance = (await usecases.customers.get_customer(customer.customer_id.value)).unwrap().balance
    assert balance == Money.of("15.00")

    assert len(events.published) == 1
    assert isinstance(events.published[0], OrderReconciled)
    assert events.published[0].order == receipt.order


@pytest.mark.asyncio
async def test_settle_now_leaves_balance_alone(usecases, customer, printing, binding):
    lines = await _lines(usecases, (printing, 2), (binding, 1))

    receipt = (
        await usecases.place_order.place_order(
            PlaceOrderCommand(customer_id=customer.customer_id.value, lines=lines)
        )
    ).unwrap()

    assert receipt.total == Money.of("130.00")
    assert receipt.new_balance is None
    balance = (await usecases.customers.get_customer(customer.customer_id.value)).unwrap().balance
    assert balance.is_zero()


@pytest.mark.asyncio
async def test_empty_order_is_rejected_without_side_effects(usecases, events, customer):
    result = await usecases.place_order.place_order(
        PlaceOrderCommand(
            customer_id=customer.customer_id.value, lines=(), payment_mode=PaymentMode.DEFER
        )
    )

    assert isinstance(result, Failure)
    assert isinstance(result.failure(), EmptyOrderError)
    orders = (await usecases.list_orders.list_orders(ListOrdersQuery())).unwrap()
    assert orders == ()
    balance = (await usecases.customers.get_customer(customer.customer_id.value)).unwrap().balance
    assert balance.is_zero()
    assert events.published == []


@pytest.mark.asyncio
async def test_repeated_selection_merges_into_one_line(usecases, printing):
    lines = await _lines(usecases, (printing, 1), (printing, 2))

    assert len(lines) == 1
    assert lines[0].quantity == 3


@pytest.mark.asyncio
async def test_build_lines_unknown_item(usecases):
    built = await usecases.place_order.build_lines([ItemSelection(item_id="missing", quantity=1)])
    assert isinstance(built.failure(), ItemNotFound)


@pytest.mark.asyncio
async def test_customer_must_be_selected(usecases, printing):
    lines = await _lines(usecases, (printing, 1))
    result = await usecases.place_order.place_order(
        PlaceOrderCommand(customer_id="  ", lines=lines)
    )
    assert isinstance(result.failure(), NoCustomerError)


@pytest.mark.asyncio
async def test_unknown_customer(usecases, printing):
    lines = await _lines(usecases, (printing, 1))
    result = await usecases.place_order.place_order(
        PlaceOrderCommand(customer_id="ghost", lines=lines)
    )
    assert isinstance(result.failure(), CustomerNotFound)


@pytest.mark.asyncio
async def test_non_positive_quantity_is_rejected(usecases, customer, printing):
    lines = await _lines(usecases, (printing, 1))
    bad = (replace(lines[0], quantity=0),)

    result = await usecases.place_order.place_order(
        PlaceOrderCommand(customer_id=customer.customer_id.value, lines=bad)
    )

    assert isinstance(result.failure(), ValidationError)


@pytest.mark.asyncio
async def test_publish_failure_is_reported_as_warning(usecases, events, customer, printing):
    events.fail = True
    lines = await _lines(usecases, (printing, 1))

    result = await usecases.place_order.place_order(
        PlaceOrderCommand(
            customer_id=customer.customer_id.value,
            lines=lines,
            payment_mode=PaymentMode.DEFER,
            send_bill=True,
        )
    )

    receipt = result.unwrap()
    assert receipt.warnings == ("mail relay unavailable",)
    assert receipt.new_balance == Money.of("5.00")
    assert events.published[0].send_bill is True


# --- concurrent balance updates ------------------------------------------------


@dataclass
class InterleavingCustomers(InMemoryCustomerRepository):
    """Lets another writer charge ``sneak_in`` right before the next CAS writes."""

    sneak_in: Money = Money.of("5.00")
    interleave: int = 1

    async def compare_and_set_balance(self, customer_id, expected, new):
        if self.interleave > 0:
            self.interleave -= 1
            current = (await self.get(customer_id)).unwrap()
            await super().compare_and_set_balance(
                customer_id, current.balance, current.balance + self.sneak_in
            )
        return await super().compare_and_set_balance(customer_id, expected, new)


async def _deferred_order(customers, events, printing_item, max_attempts):
    catalog = InMemoryCatalogRepository()
    orders = InMemoryOrderRepository()
    catalog._store[printing_item.item_id.value] = printing_item
    customer = (
        await customers.insert(
            NewCustomer(
                business_id="",
                name="Racy",
                phone="",
                email="",
                balance=Money.zero(),
            )
        )
    ).unwrap()
    svc = PlaceOrderService(
        PlaceOrderDeps(
            customers=customers,
            catalog=catalog,
            orders=orders,
            events=events,
            balance_update_max_attempts=max_attempts,
        )
    )
    lines = (await svc.build_lines([ItemSelection(printing_item.item_id.value, 3)])).unwrap()
    result = await svc.place_order(
        PlaceOrderCommand(
            customer_id=customer.customer_id.value,
            lines=lines,
            payment_mode=PaymentMode.DEFER,
        )
    )
    return customer, orders, result


@pytest.mark.asyncio
async def test_conflicting_write_is_retried_without_losing_it(events, printing):
    customers = InterleavingCustomers()

    customer, _, result = await _deferred_order(customers, events, printing, max_attempts=3)

    assert result.unwrap().new_balance == Money.of("20.00")
    stored = (await customers.get(customer.customer_id)).unwrap()
    assert stored.balance == Money.of("20.00")


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts_and_keeps_order(events, printing):
    customers = InterleavingCustomers(interleave=10)

    customer, orders, result = await _deferred_order(customers, events, printing, max_attempts=2)

    assert isinstance(result, Failure)
    assert isinstance(result.failure(), BalanceConflict)
    # the order was persisted before the charge and is not rolled back
    assert len((await orders.list_all()).unwrap()) == 1
    assert events.published == []
    stored = (await customers.get(customer.customer_id)).unwrap()
    assert stored.balance == Money.of("10.00")


@pytest.mark.asyncio
async def test_out_of_range_total_is_rejected_before_saving(
    usecases, events, customer, printing
):
    lines = await _lines(usecases, (printing, 10**30))

    result = await usecases.place_order.place_order(
        PlaceOrderCommand(
            customer_id=customer.customer_id.value, lines=lines, payment_mode=PaymentMode.DEFER
        )
    )

    assert isinstance(result.failure(), InvalidAmountError)
    assert (await usecases.list_orders.list_orders(ListOrdersQuery())).unwrap() == ()
    assert events.published == []


@pytest.mark.asyncio
async def test_out_of_range_charge_leaves_no_order_behind(usecases, events, printing):
    huge = "9" * 26
    created = await usecases.customers.create_customer(
        CreateCustomerCommand(
            business_id="CUS-9", name="Big Spender", opening_balance=Decimal(huge)
        )
    )
    cid = created.unwrap().customer_id.value
    lines = await _lines(usecases, (printing, 10**24))

    result = await usecases.place_order.place_order(
        PlaceOrderCommand(customer_id=cid, lines=lines, payment_mode=PaymentMode.DEFER)
    )

    assert isinstance(result.failure(), InvalidAmountError)
    assert (await usecases.list_orders.list_orders(ListOrdersQuery())).unwrap() == ()
    balance = (await usecases.customers.get_customer(cid)).unwrap().balance
    assert balance == Money.of(huge)
    assert events.published == []
