from __future__ import annotations

from typing import Any, Mapping, Protocol

from returns.result import Result

from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.order import Order


class BillRenderer(Protocol):
    def render_bill(self, order: Order) -> Result[bytes, LedgerError]: ...


class Notifier(Protocol):
    async def send(
        self, template_id: str, params: Mapping[str, Any]
    ) -> Result[None, LedgerError]: ...
