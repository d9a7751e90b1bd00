from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

import pytest
import pytest_asyncio
from returns.result import Failure, Success

from credit_ledger.bootstrap import build_usecases
from credit_ledger.config import Settings
from credit_ledger.core.domain.model.errors import NotificationError
from credit_ledger.core.ports.inbound.catalog import CreateItemCommand
from credit_ledger.core.ports.inbound.customers import CreateCustomerCommand

OWNER = "owner@example.com"


@dataclass
class RecordingPublisher:
    """Collects published events; ``fail=True`` makes every publish fail."""

    published: List[object] = field(default_factory=list)
    fail: bool = False

    async def publish(self, event):
        self.published.append(event)
        if self.fail:
            return Failure(NotificationError(message="mail relay unavailable"))
        return Success(None)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        allowed_emails=[OWNER],
        notifications_enabled=False,
    )


@pytest.fixture
def events():
    return RecordingPublisher()


@pytest.fixture
def usecases(settings, events):
    return build_usecases(settings, events=events)


@pytest_asyncio.fixture
async def customer(usecases):
    created = await usecases.customers.create_customer(
        CreateCustomerCommand(
            business_id="CUS-001",
            name="Nimal Perera",
            phone="0771234567",
            email="nimal@example.com",
        )
    )
    return created.unwrap()


@pytest_asyncio.fixture
async def printing(usecases):
    created = await usecases.catalog.create_item(
        CreateItemCommand(
            business_id="ITM-001",
            name="Printing",
            category="printing",
            unit_price=Decimal("5.00"),
            quantity_on_hand=100,
        )
    )
    return created.unwrap()


@pytest_asyncio.fixture
async def binding(usecases):
    created = await usecases.catalog.create_item(
        CreateItemCommand(
            business_id="ITM-002",
            name="Spiral binding",
            category="binding",
            unit_price=Decimal("120.00"),
            quantity_on_hand=20,
        )
    )
    return created.unwrap()
