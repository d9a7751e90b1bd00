"""Order line aggregation: totals and draft line editing."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from credit_ledger.core.domain.model.catalog import CatalogItem
from credit_ledger.core.domain.model.money import DEFAULT_CURRENCY, Money, fold_money
from credit_ledger.core.domain.model.order import OrderLine


def compute_total(
    lines: Sequence[OrderLine], currency: str = DEFAULT_CURRENCY
) -> Money:
    """Sum of ``unit_price * quantity``; zero for no lines."""
    if lines:
        currency = lines[0].unit_price.currency
    return fold_money((ln.subtotal() for ln in lines), currency=currency)


def merge_or_add(
    lines: Sequence[OrderLine], item: CatalogItem, quantity_delta: int
) -> tuple[OrderLine, ...]:
    """Apply ``quantity_delta`` to the line for ``item``.

    An existing line keeps its position and its original name/price snapshot.
    A missing line is appended with a snapshot of ``item`` as it is now.
    Lines whose quantity ends up <= 0 are dropped.
    """
    merged: list[OrderLine] = []
    found = False
    for ln in lines:
        if ln.item_id != item.item_id:
            merged.append(ln)
            continue
        found = True
        quantity = ln.quantity + quantity_delta
        if quantity > 0:
            merged.append(replace(ln, quantity=quantity))

    if not found and quantity_delta > 0:
        merged.append(
            OrderLine(
                item_id=item.item_id,
                item_name=item.name,
                unit_price=item.unit_price,
                quantity=quantity_delta,
            )
        )
    return tuple(merged)
