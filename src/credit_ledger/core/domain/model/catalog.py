from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import uuid4

from credit_ledger.core.domain.model.money import Money


class ItemCategory(str, Enum):
    PRINTING = "printing"
    STATIONERY = "stationery"
    BINDING = "binding"
    LAMINATION = "lamination"
    OTHER = "other"


@dataclass(frozen=True)
class ItemId:
    value: str

    @staticmethod
    def new() -> "ItemId":
        return ItemId(uuid4().hex)


@dataclass(frozen=True)
class CatalogItem:
    item_id: ItemId
    business_id: str
    name: str
    category: ItemCategory
    unit_price: Money
    quantity_on_hand: int
    created_at: datetime
