from decimal import Decimal

import pytest

from credit_ledger.core.domain.model.catalog import ItemCategory
from credit_ledger.core.domain.model.errors import ItemNotFound, ValidationError
from credit_ledger.core.domain.model.money import Money
from credit_ledger.core.ports.inbound.catalog import CreateItemCommand, UpdateItemCommand


@pytest.mark.asyncio
async def test_list_filters_by_category_and_search(usecases, printing, binding):
    bindings = (await usecases.catalog.list_items(category="binding")).unwrap()
    everything = (await usecases.catalog.list_items(category="all")).unwrap()
    by_business_id = (await usecases.catalog.list_items(search="itm-001")).unwrap()
    by_category_text = (await usecases.catalog.list_items(search="BIND")).unwrap()

    assert [i.name for i in bindings] == ["Spiral binding"]
    assert len(everything) == 2
    assert [i.item_id for i in by_business_id] == [printing.item_id]
    assert [i.item_id for i in by_category_text] == [binding.item_id]


@pytest.mark.asyncio
async def test_unknown_category_is_rejected(usecases):
    created = await usecases.catalog.create_item(
        CreateItemCommand(business_id="", name="Mug", category="ceramics", unit_price=Decimal("1"))
    )
    assert isinstance(created.failure(), ValidationError)

    listed = await usecases.catalog.list_items(category="ceramics")
    assert isinstance(listed.failure(), ValidationError)


@pytest.mark.asyncio
async def test_negative_price_is_rejected(usecases):
    created = await usecases.catalog.create_item(
        CreateItemCommand(business_id="", name="Pen", category="stationery", unit_price=Decimal("-1"))
    )
    assert isinstance(created.failure(), ValidationError)


@pytest.mark.asyncio
async def test_price_and_stock_edit_independently(usecases, printing):
    repriced = await usecases.catalog.update_item(
        UpdateItemCommand(item_id=printing.item_id.value, unit_price=Decimal("6.50"))
    )
    restocked = await usecases.catalog.update_item(
        UpdateItemCommand(item_id=printing.item_id.value, quantity_on_hand=7)
    )

    assert repriced.unwrap().unit_price == Money.of("6.50")
    assert repriced.unwrap().quantity_on_hand == 100
    assert restocked.unwrap().unit_price == Money.of("6.50")
    assert restocked.unwrap().quantity_on_hand == 7
    assert restocked.unwrap().category is ItemCategory.PRINTING


@pytest.mark.asyncio
async def test_delete_then_get_is_not_found(usecases, printing):
    await usecases.catalog.delete_item(printing.item_id.value)

    got = await usecases.catalog.get_item(printing.item_id.value)
    assert isinstance(got.failure(), ItemNotFound)
    again = await usecases.catalog.delete_item(printing.item_id.value)
    assert isinstance(again.failure(), ItemNotFound)
