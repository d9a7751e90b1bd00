from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx
from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.errors import LedgerError, NotificationError
from credit_ledger.core.ports.outbound.notifications import Notifier

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.emailjs.com/api/v1.0/email/send"


@dataclass
class EmailJsNotifier(Notifier):
    """Sends template emails through the EmailJS REST API."""

    service_id: str
    public_key: str
    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = 10.0
    transport: httpx.AsyncBaseTransport | None = None

    async def send(
        self, template_id: str, params: Mapping[str, Any]
    ) -> Result[None, LedgerError]:
        payload = {
            "service_id": self.service_id,
            "template_id": template_id,
            "user_id": self.public_key,
            "template_params": dict(params),
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.post(self.api_url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("email template %s not sent: %s", template_id, e)
            return Failure(NotificationError(message=f"email service unreachable: {e}"))

        if response.status_code >= 400:
            logger.warning(
                "email template %s rejected: %s %s",
                template_id,
                response.status_code,
                response.text,
            )
            return Failure(
                NotificationError(
                    message=f"email service returned {response.status_code}: {response.text}"
                )
            )
        return Success(None)
