from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import FastAPI

from credit_ledger.adapters.inbound.web.fastapi_app import create_app
from credit_ledger.adapters.outbound.allow_list_policy import AllowListPolicy
from credit_ledger.adapters.outbound.emailjs_notifier import EmailJsNotifier
from credit_ledger.adapters.outbound.in_memory_catalog import InMemoryCatalogRepository
from credit_ledger.adapters.outbound.in_memory_customers import (
    InMemoryCustomerRepository,
)
from credit_ledger.adapters.outbound.in_memory_orders import InMemoryOrderRepository
from credit_ledger.adapters.outbound.in_memory_payments import InMemoryPaymentRepository
from credit_ledger.adapters.outbound.logging_events import LoggingEventPublisher
from credit_ledger.adapters.outbound.logging_notifier import LoggingNotifier
from credit_ledger.adapters.outbound.notification_dispatcher import (
    NotificationDispatcher,
)
from credit_ledger.adapters.outbound.pdf_bill_renderer import PdfBillRenderer
from credit_ledger.config import Settings
from credit_ledger.core.domain.service.catalog_service import CatalogDeps, CatalogService
from credit_ledger.core.domain.service.customer_service import (
    CustomerDirectoryDeps,
    CustomerDirectoryService,
)
from credit_ledger.core.domain.service.dashboard_service import (
    DashboardDeps,
    DashboardService,
)
from credit_ledger.core.domain.service.get_order_service import (
    GetOrderDeps,
    GetOrderService,
)
from credit_ledger.core.domain.service.list_orders_service import (
    ListOrdersDeps,
    ListOrdersService,
)
from credit_ledger.core.domain.service.payment_ledger_service import (
    PaymentLedgerDeps,
    PaymentLedgerService,
)
from credit_ledger.core.domain.service.place_order_service import (
    PlaceOrderDeps,
    PlaceOrderService,
)
from credit_ledger.core.ports.outbound.events import EventPublisher
from credit_ledger.core.ports.outbound.identity import AccessPolicy
from credit_ledger.core.ports.outbound.notifications import Notifier
from credit_ledger.logging_setup import configure_logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UseCases:
    place_order: PlaceOrderService
    payments: PaymentLedgerService
    get_order: GetOrderService
    list_orders: ListOrdersService
    customers: CustomerDirectoryService
    catalog: CatalogService
    dashboard: DashboardService
    access: AccessPolicy
    currency: str


def build_notifier(settings: Settings) -> Notifier:
    if settings.emailjs_service_id:
        return EmailJsNotifier(
            service_id=settings.emailjs_service_id,
            public_key=settings.emailjs_public_key,
            api_url=settings.emailjs_api_url,
            timeout_seconds=settings.notification_timeout_seconds,
        )
    logger.info("no email service configured; notifications are only logged")
    return LoggingNotifier()


def build_event_publisher(settings: Settings, notifier: Notifier | None = None) -> EventPublisher:
    if not settings.notifications_enabled:
        return LoggingEventPublisher()
    return NotificationDispatcher(
        renderer=PdfBillRenderer(business_name=settings.business_name),
        notifier=notifier or build_notifier(settings),
        bill_template_id=settings.bill_template_id,
        payment_template_id=settings.payment_template_id,
        business_name=settings.business_name,
    )


def build_usecases(
    settings: Settings | None = None, events: EventPublisher | None = None
) -> UseCases:
    settings = settings or Settings()
    events = events or build_event_publisher(settings)

    customers = InMemoryCustomerRepository()
    catalog = InMemoryCatalogRepository()
    orders = InMemoryOrderRepository()
    payments = InMemoryPaymentRepository()

    attempts = settings.balance_update_max_attempts
    currency = settings.currency

    return UseCases(
        place_order=PlaceOrderService(
            PlaceOrderDeps(
                customers=customers,
                catalog=catalog,
                orders=orders,
                events=events,
                balance_update_max_attempts=attempts,
                currency=currency,
            )
        ),
        payments=PaymentLedgerService(
            PaymentLedgerDeps(
                customers=customers,
                payments=payments,
                events=events,
                balance_update_max_attempts=attempts,
                currency=currency,
            )
        ),
        get_order=GetOrderService(GetOrderDeps(orders=orders)),
        list_orders=ListOrdersService(ListOrdersDeps(orders=orders)),
        customers=CustomerDirectoryService(
            CustomerDirectoryDeps(customers=customers, payments=payments, currency=currency)
        ),
        catalog=CatalogService(CatalogDeps(items=catalog, currency=currency)),
        dashboard=DashboardService(
            DashboardDeps(customers=customers, orders=orders, currency=currency)
        ),
        access=AllowListPolicy.of(settings.allowed_emails),
        currency=currency,
    )


def create_app_from(usecases: UseCases, settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    return create_app(
        place_order_uc=usecases.place_order,
        payments_uc=usecases.payments,
        get_order_uc=usecases.get_order,
        list_orders_uc=usecases.list_orders,
        customers_uc=usecases.customers,
        catalog_uc=usecases.catalog,
        dashboard_uc=usecases.dashboard,
        access_policy=usecases.access,
        title=settings.app_name,
    )


def create_asgi_app() -> FastAPI:
    settings = Settings()
    configure_logging(settings.log_level)
    return create_app_from(build_usecases(settings), settings)
