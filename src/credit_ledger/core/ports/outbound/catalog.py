from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from returns.result import Result

from credit_ledger.core.domain.model.catalog import CatalogItem, ItemCategory, ItemId
from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.money import Money


@dataclass(frozen=True)
class NewCatalogItem:
    business_id: str
    name: str
    category: ItemCategory
    unit_price: Money
    quantity_on_hand: int


class CatalogRepository(Protocol):
    async def insert(self, item: NewCatalogItem) -> Result[CatalogItem, LedgerError]: ...

    async def get(self, item_id: ItemId) -> Result[CatalogItem, LedgerError]: ...

    async def list_all(self) -> Result[Sequence[CatalogItem], LedgerError]: ...

    async def update_fields(
        self, item_id: ItemId, fields: dict[str, Any]
    ) -> Result[CatalogItem, LedgerError]: ...

    async def delete(self, item_id: ItemId) -> Result[None, LedgerError]: ...
