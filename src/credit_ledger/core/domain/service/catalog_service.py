from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.catalog import CatalogItem, ItemCategory, ItemId
from credit_ledger.core.domain.model.errors import LedgerError, ValidationError
from credit_ledger.core.domain.model.money import DEFAULT_CURRENCY, Money
from credit_ledger.core.ports.inbound.catalog import (
    CatalogUseCase,
    CreateItemCommand,
    UpdateItemCommand,
)
from credit_ledger.core.ports.outbound.catalog import CatalogRepository, NewCatalogItem


@dataclass(frozen=True)
class CatalogDeps:
    items: CatalogRepository
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class CatalogService(CatalogUseCase):
    deps: CatalogDeps

    async def create_item(
        self, command: CreateItemCommand
    ) -> Result[CatalogItem, LedgerError]:
        if not command.name.strip():
            return Failure(ValidationError("name is required"))
        category = _parse_category(command.category)
        if isinstance(category, Failure):
            return category
        price = _parse_price(command.unit_price, self.deps.currency)
        if isinstance(price, Failure):
            return price
        if command.quantity_on_hand < 0:
            return Failure(ValidationError("quantity_on_hand must be >= 0"))

        return await self.deps.items.insert(
            NewCatalogItem(
                business_id=command.business_id.strip(),
                name=command.name.strip(),
                category=category.unwrap(),
                unit_price=price.unwrap(),
                quantity_on_hand=command.quantity_on_hand,
            )
        )

    async def get_item(self, item_id: str) -> Result[CatalogItem, LedgerError]:
        if not item_id.strip():
            return Failure(ValidationError("item_id is required"))
        return await self.deps.items.get(ItemId(item_id.strip()))

    async def list_items(
        self, search: str | None = None, category: str | None = None
    ) -> Result[Sequence[CatalogItem], LedgerError]:
        wanted: ItemCategory | None = None
        if category is not None and category.strip() and category != "all":
            parsed = _parse_category(category)
            if isinstance(parsed, Failure):
                return parsed
            wanted = parsed.unwrap()

        def keep(item: CatalogItem) -> bool:
            if wanted is not None and item.category is not wanted:
                return False
            return _matches(item, search)

        return (await self.deps.items.list_all()).map(
            lambda items: tuple(i for i in items if keep(i))
        )

    async def update_item(
        self, command: UpdateItemCommand
    ) -> Result[CatalogItem, LedgerError]:
        fields: dict[str, Any] = {}
        if command.business_id is not None:
            fields["business_id"] = command.business_id.strip()
        if command.name is not None:
            if not command.name.strip():
                return Failure(ValidationError("name cannot be empty"))
            fields["name"] = command.name.strip()
        if command.category is not None:
            category = _parse_category(command.category)
            if isinstance(category, Failure):
                return category
            fields["category"] = category.unwrap()
        if command.unit_price is not None:
            price = _parse_price(command.unit_price, self.deps.currency)
            if isinstance(price, Failure):
                return price
            fields["unit_price"] = price.unwrap()
        if command.quantity_on_hand is not None:
            if command.quantity_on_hand < 0:
                return Failure(ValidationError("quantity_on_hand must be >= 0"))
            fields["quantity_on_hand"] = command.quantity_on_hand

        return await self.deps.items.update_fields(ItemId(command.item_id.strip()), fields)

    async def delete_item(self, item_id: str) -> Result[None, LedgerError]:
        if not item_id.strip():
            return Failure(ValidationError("item_id is required"))
        return await self.deps.items.delete(ItemId(item_id.strip()))


def _parse_category(raw: str) -> Result[ItemCategory, LedgerError]:
    try:
        return Success(ItemCategory(raw.strip().lower()))
    except ValueError:
        allowed = ", ".join(c.value for c in ItemCategory)
        return Failure(ValidationError(f"category must be one of: {allowed}"))


def _parse_price(raw: Decimal, currency: str) -> Result[Money, LedgerError]:
    try:
        price = Money.of(Decimal(str(raw)), currency)
    except InvalidOperation:
        return Failure(ValidationError("unit_price is not a number"))
    if price.is_negative():
        return Failure(ValidationError("unit_price must be >= 0"))
    return Success(price)


def _matches(item: CatalogItem, search: str | None) -> bool:
    if not search or not search.strip():
        return True
    term = search.strip().lower()
    return (
        term in item.name.lower()
        or term in item.business_id.lower()
        or term in item.category.value
    )
