from datetime import datetime, timezone

from credit_ledger.core.domain.model.catalog import CatalogItem, ItemCategory, ItemId
from credit_ledger.core.domain.model.money import Money
from credit_ledger.core.domain.service.order_lines import compute_total, merge_or_add


def _item(item_id: str, name: str, price: str) -> CatalogItem:
    return CatalogItem(
        item_id=ItemId(item_id),
        business_id=item_id.upper(),
        name=name,
        category=ItemCategory.PRINTING,
        unit_price=Money.of(price),
        quantity_on_hand=10,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


PRINT = _item("p", "Printing", "5.00")
LAMINATE = _item("l", "Lamination", "40.00")


def test_same_item_merges_into_one_line():
    lines = merge_or_add((), PRINT, 1)
    lines = merge_or_add(lines, PRINT, 2)

    assert len(lines) == 1
    assert lines[0].quantity == 3
    assert compute_total(lines) == Money.of("15.00")


def test_position_and_snapshot_are_kept():
    lines = merge_or_add((), PRINT, 1)
    lines = merge_or_add(lines, LAMINATE, 1)
    repriced = _item("p", "Printing (colour)", "9.00")

    lines = merge_or_add(lines, repriced, 1)

    assert [ln.item_id.value for ln in lines] == ["p", "l"]
    assert lines[0].item_name == "Printing"
    assert lines[0].unit_price == Money.of("5.00")
    assert lines[0].quantity == 2


def test_line_dropped_when_quantity_reaches_zero():
    lines = merge_or_add((), PRINT, 2)
    lines = merge_or_add(lines, LAMINATE, 1)

    lines = merge_or_add(lines, PRINT, -2)

    assert [ln.item_id.value for ln in lines] == ["l"]


def test_zero_delta_on_existing_line_is_noop():
    lines = merge_or_add((), PRINT, 2)
    assert merge_or_add(lines, PRINT, 0) == lines


def test_new_line_not_added_for_non_positive_delta():
    assert merge_or_add((), PRINT, 0) == ()
    assert merge_or_add((), PRINT, -1) == ()


def test_total_is_independent_of_line_order():
    a = merge_or_add(merge_or_add((), PRINT, 3), LAMINATE, 2)
    b = merge_or_add(merge_or_add((), LAMINATE, 2), PRINT, 3)
    assert compute_total(a) == compute_total(b) == Money.of("95.00")


def test_total_of_no_lines_is_zero():
    assert compute_total(()) == Money.zero()
