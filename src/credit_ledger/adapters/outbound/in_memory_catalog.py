from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Sequence

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.catalog import CatalogItem, ItemId
from credit_ledger.core.domain.model.customer import now_utc
from credit_ledger.core.domain.model.errors import (
    ItemNotFound,
    LedgerError,
    PersistenceError,
)
from credit_ledger.core.ports.outbound.catalog import CatalogRepository, NewCatalogItem

_EDITABLE = {"business_id", "name", "category", "unit_price", "quantity_on_hand"}


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    _store: Dict[str, CatalogItem] = field(default_factory=dict)

    async def insert(self, item: NewCatalogItem) -> Result[CatalogItem, LedgerError]:
        iid = ItemId.new()
        created = CatalogItem(
            item_id=iid,
            business_id=item.business_id,
            name=item.name,
            category=item.category,
            unit_price=item.unit_price,
            quantity_on_hand=item.quantity_on_hand,
            created_at=now_utc(),
        )
        self._store[iid.value] = created
        return Success(created)

    async def get(self, item_id: ItemId) -> Result[CatalogItem, LedgerError]:
        if item_id.value not in self._store:
            return Failure(ItemNotFound(message="item not found", item_id=item_id.value))
        return Success(self._store[item_id.value])

    async def list_all(self) -> Result[Sequence[CatalogItem], LedgerError]:
        return Success(tuple(self._store.values()))

    async def update_fields(
        self, item_id: ItemId, fields: dict[str, Any]
    ) -> Result[CatalogItem, LedgerError]:
        unknown = set(fields) - _EDITABLE
        if unknown:
            return Failure(
                PersistenceError(message=f"fields not editable: {sorted(unknown)}")
            )
        got = await self.get(item_id)
        if isinstance(got, Failure):
            return got
        updated = replace(got.unwrap(), **fields)
        self._store[item_id.value] = updated
        return Success(updated)

    async def delete(self, item_id: ItemId) -> Result[None, LedgerError]:
        if self._store.pop(item_id.value, None) is None:
            return Failure(ItemNotFound(message="item not found", item_id=item_id.value))
        return Success(None)
