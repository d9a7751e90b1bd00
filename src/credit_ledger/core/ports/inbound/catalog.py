from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, Sequence

from returns.result import Result

from credit_ledger.core.domain.model.catalog import CatalogItem
from credit_ledger.core.domain.model.errors import LedgerError


@dataclass(frozen=True)
class CreateItemCommand:
    business_id: str
    name: str
    category: str
    unit_price: Decimal
    quantity_on_hand: int = 0


@dataclass(frozen=True)
class UpdateItemCommand:
    item_id: str
    business_id: str | None = None
    name: str | None = None
    category: str | None = None
    unit_price: Decimal | None = None
    quantity_on_hand: int | None = None


class CatalogUseCase(Protocol):
    async def create_item(
        self, command: CreateItemCommand
    ) -> Result[CatalogItem, LedgerError]: ...

    async def get_item(self, item_id: str) -> Result[CatalogItem, LedgerError]: ...

    async def list_items(
        self, search: str | None = None, category: str | None = None
    ) -> Result[Sequence[CatalogItem], LedgerError]: ...

    async def update_item(
        self, command: UpdateItemCommand
    ) -> Result[CatalogItem, LedgerError]: ...

    async def delete_item(self, item_id: str) -> Result[None, LedgerError]: ...
