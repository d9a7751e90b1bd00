from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Tuple

from returns.result import Result, Success

from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.ports.outbound.notifications import Notifier

logger = logging.getLogger(__name__)


@dataclass
class LoggingNotifier(Notifier):
    """Stand-in notifier for setups without an email service; keeps what it "sent"."""

    sent: List[Tuple[str, Mapping[str, Any]]] = field(default_factory=list)

    async def send(
        self, template_id: str, params: Mapping[str, Any]
    ) -> Result[None, LedgerError]:
        self.sent.append((template_id, dict(params)))
        logger.info("notification %s -> %s", template_id, params.get("email", "<none>"))
        return Success(None)
