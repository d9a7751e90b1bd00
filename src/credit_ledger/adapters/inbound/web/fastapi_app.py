from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Header, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from returns.result import Success

from credit_ledger.core.domain.model.catalog import CatalogItem
from credit_ledger.core.domain.model.customer import Customer
from credit_ledger.core.domain.model.errors import (
    AccessDenied,
    BalanceConflict,
    CustomerNotFound,
    ItemNotFound,
    LedgerError,
    NegativeResultError,
    OrderNotFound,
    OverpaymentError,
    PersistenceError,
    ValidationError,
)
from credit_ledger.core.domain.model.money import Money
from credit_ledger.core.domain.model.order import Order, PaymentMode
from credit_ledger.core.domain.model.payment import Payment
from credit_ledger.core.ports.inbound.catalog import (
    CatalogUseCase,
    CreateItemCommand,
    UpdateItemCommand,
)
from credit_ledger.core.ports.inbound.customers import (
    CreateCustomerCommand,
    CustomerDirectoryUseCase,
    UpdateCustomerCommand,
)
from credit_ledger.core.ports.inbound.dashboard import DashboardUseCase
from credit_ledger.core.ports.inbound.get_order import (
    GetOrderQuery,
    GetOrderUseCase,
    SetOrderStatusCommand,
)
from credit_ledger.core.ports.inbound.list_orders import (
    ListOrdersQuery,
    ListOrdersUseCase,
)
from credit_ledger.core.ports.inbound.place_order import (
    ItemSelection,
    PlaceOrderCommand,
    PlaceOrderUseCase,
)
from credit_ledger.core.ports.inbound.record_payment import (
    PaymentLedgerUseCase,
    RecordPaymentCommand,
)
from credit_ledger.core.ports.outbound.identity import AccessPolicy, Identity

logger = logging.getLogger(__name__)

# ---- HTTP DTOs (adapter layer) ---------------------------------------------

# upper bounds keep line subtotals and balances inside the Decimal context
MAX_AMOUNT = Decimal("999999999999.99")
MAX_QUANTITY = 1_000_000


class CustomerIn(BaseModel):
    business_id: str = Field("", examples=["CUS-001"])
    name: str = Field(min_length=1, examples=["Nimal Perera"])
    phone: str = Field("", examples=["0771234567"])
    email: str = Field("", examples=["nimal@example.com"])
    opening_balance: Decimal = Field(
        Decimal("0"), ge=0, le=MAX_AMOUNT, examples=["0.00"]
    )


class CustomerPatch(BaseModel):
    business_id: str | None = None
    name: str | None = None
    phone: str | None = None
    email: str | None = None


class CustomerOut(BaseModel):
    customer_id: str
    business_id: str
    name: str
    phone: str
    email: str
    balance: str
    currency: str
    created_at: str


class PaymentIn(BaseModel):
    amount: Decimal = Field(le=MAX_AMOUNT, examples=["500.00"])
    note: str = ""


class PaymentOut(BaseModel):
    payment_id: str
    customer_id: str
    customer_name: str
    amount: str
    previous_balance: str
    new_balance: str
    currency: str
    date: str
    note: str


class PaymentReceiptResponse(BaseModel):
    payment: PaymentOut
    warnings: list[str]


class PaymentHistoryResponse(BaseModel):
    customer_id: str
    items: list[PaymentOut]


class OutstandingCreditOut(BaseModel):
    customer: CustomerOut
    last_payment: PaymentOut | None


class OutstandingCreditsResponse(BaseModel):
    items: list[OutstandingCreditOut]
    total_outstanding: str
    currency: str


class ItemIn(BaseModel):
    business_id: str = Field("", examples=["ITM-001"])
    name: str = Field(min_length=1, examples=["A4 print (B/W)"])
    category: str = Field(examples=["printing"])
    unit_price: Decimal = Field(ge=0, le=MAX_AMOUNT, examples=["15.00"])
    quantity_on_hand: int = Field(0, ge=0)


class ItemPatch(BaseModel):
    business_id: str | None = None
    name: str | None = None
    category: str | None = None
    unit_price: Decimal | None = Field(None, le=MAX_AMOUNT)
    quantity_on_hand: int | None = None


class ItemOut(BaseModel):
    item_id: str
    business_id: str
    name: str
    category: str
    unit_price: str
    currency: str
    quantity_on_hand: int
    created_at: str


class ItemSelectionIn(BaseModel):
    item_id: str = Field(examples=["3f0c..."])
    quantity: int = Field(le=MAX_QUANTITY, examples=[2])


class PlaceOrderRequest(BaseModel):
    customer_id: str = Field("", examples=["9b1d..."])
    lines: list[ItemSelectionIn] = Field(default_factory=list)
    payment_mode: PaymentMode = PaymentMode.SETTLE_NOW
    description: str = ""
    send_bill: bool = False


class OrderLineOut(BaseModel):
    item_id: str
    item_name: str
    unit_price: str
    quantity: int
    subtotal: str


class OrderDetailsResponse(BaseModel):
    order_id: str
    customer_id: str
    customer_name: str
    customer_phone: str
    customer_email: str
    description: str
    payment_mode: str
    status: str
    total: str
    currency: str
    created_at: str
    lines: list[OrderLineOut]


class OrderReceiptResponse(BaseModel):
    order: OrderDetailsResponse
    new_balance: str | None
    warnings: list[str]


class OrderSummaryOut(BaseModel):
    order_id: str
    customer_id: str
    customer_name: str
    payment_mode: str
    status: str
    total: str
    currency: str
    created_at: str


class OrderListResponse(BaseModel):
    offset: int
    limit: int
    items: list[OrderSummaryOut]


class OrderStatusIn(BaseModel):
    status: str = Field(examples=["completed"])


class DashboardResponse(BaseModel):
    total_customers: int
    total_sales: str
    total_outstanding: str
    currency: str


class ErrorResponse(BaseModel):
    type: str
    message: str
    details: list[dict[str, Any]] | None = None
    retryable: bool | None = None
    sign_out: bool | None = None


def _map_error_to_http(err: LedgerError) -> tuple[int, ErrorResponse]:
    name = type(err).__name__

    if isinstance(err, AccessDenied):
        return 403, ErrorResponse(type=name, message=err.message, sign_out=True)

    if isinstance(err, (ValidationError, OverpaymentError, NegativeResultError)):
        return 400, ErrorResponse(type=name, message=str(err))

    if isinstance(err, (CustomerNotFound, ItemNotFound, OrderNotFound)):
        return 404, ErrorResponse(type=name, message=str(err))

    if isinstance(err, BalanceConflict):
        return 409, ErrorResponse(type=name, message=str(err), retryable=True)

    if isinstance(err, PersistenceError):
        return 503, ErrorResponse(type=name, message=str(err), retryable=True)

    return 500, ErrorResponse(type=name, message=str(err))


# ---- response mapping -------------------------------------------------------


def _amount(m: Money) -> str:
    return str(m.rounded_to_2_decimals())


def _customer_out(c: Customer) -> CustomerOut:
    return CustomerOut(
        customer_id=c.customer_id.value,
        business_id=c.business_id,
        name=c.name,
        phone=c.phone,
        email=c.email,
        balance=_amount(c.balance),
        currency=c.balance.currency,
        created_at=c.created_at.isoformat(),
    )


def _payment_out(p: Payment) -> PaymentOut:
    return PaymentOut(
        payment_id=str(p.payment_id.value),
        customer_id=p.customer_id.value,
        customer_name=p.customer_name,
        amount=_amount(p.amount),
        previous_balance=_amount(p.previous_balance),
        new_balance=_amount(p.new_balance),
        currency=p.amount.currency,
        date=p.paid_on.isoformat(),
        note=p.note,
    )


def _item_out(i: CatalogItem) -> ItemOut:
    return ItemOut(
        item_id=i.item_id.value,
        business_id=i.business_id,
        name=i.name,
        category=i.category.value,
        unit_price=_amount(i.unit_price),
        currency=i.unit_price.currency,
        quantity_on_hand=i.quantity_on_hand,
        created_at=i.created_at.isoformat(),
    )


def _order_details(o: Order) -> OrderDetailsResponse:
    return OrderDetailsResponse(
        order_id=str(o.order_id.value),
        customer_id=o.customer_id.value,
        customer_name=o.customer.name,
        customer_phone=o.customer.phone,
        customer_email=o.customer.email,
        description=o.description,
        payment_mode=o.payment_mode.value,
        status=o.status.value,
        total=_amount(o.total),
        currency=o.total.currency,
        created_at=o.created_at.isoformat(),
        lines=[
            OrderLineOut(
                item_id=ln.item_id.value,
                item_name=ln.item_name,
                unit_price=_amount(ln.unit_price),
                quantity=ln.quantity,
                subtotal=_amount(ln.subtotal()),
            )
            for ln in o.lines
        ],
    )


def _order_summary(o: Order) -> OrderSummaryOut:
    return OrderSummaryOut(
        order_id=str(o.order_id.value),
        customer_id=o.customer_id.value,
        customer_name=o.customer.name,
        payment_mode=o.payment_mode.value,
        status=o.status.value,
        total=_amount(o.total),
        currency=o.total.currency,
        created_at=o.created_at.isoformat(),
    )


_ERRORS_COMMON = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}
_ERRORS_WITH_404 = {**_ERRORS_COMMON, 404: {"model": ErrorResponse}}
_ERRORS_WITH_409 = {**_ERRORS_WITH_404, 409: {"model": ErrorResponse}}


def create_app(
    place_order_uc: PlaceOrderUseCase,
    payments_uc: PaymentLedgerUseCase,
    get_order_uc: GetOrderUseCase,
    list_orders_uc: ListOrdersUseCase,
    customers_uc: CustomerDirectoryUseCase,
    catalog_uc: CatalogUseCase,
    dashboard_uc: DashboardUseCase,
    access_policy: AccessPolicy,
    title: str = "credit_ledger",
) -> FastAPI:
    app = FastAPI(title=title)

    # --- access ---------------------------------------------------------------

    async def require_identity(
        user_email: str | None = Header(None, alias="X-User-Email"),
        user_name: str | None = Header(None, alias="X-User-Name"),
    ) -> Identity:
        if not user_email or not user_email.strip():
            raise AccessDenied(message="sign-in required", email="")
        identity = Identity(email=user_email.strip(), display_name=user_name or "")
        if not access_policy.is_authorized(identity):
            logger.warning("access denied for %s", identity.email)
            raise AccessDenied(
                message="you don't have access to this dashboard", email=identity.email
            )
        return identity

    api = APIRouter(dependencies=[Depends(require_identity)])

    # --- exception handlers ---------------------------------------------------

    @app.exception_handler(LedgerError)
    async def handle_domain_error(_: Request, exc: LedgerError) -> JSONResponse:
        status, body = _map_error_to_http(exc)
        return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(
            type="RequestValidationError",
            message="invalid request",
            details=[
                {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
                for e in exc.errors()
            ],
        )
        return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error")
        body = ErrorResponse(type=type(exc).__name__, message="internal server error")
        return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))

    # --- routes ---------------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # customers

    @api.get("/customers", response_model=list[CustomerOut], responses=_ERRORS_COMMON)
    async def list_customers(search: str | None = Query(None)) -> Any:
        result = await customers_uc.list_customers(search)
        if isinstance(result, Success):
            return [_customer_out(c) for c in result.unwrap()]
        raise result.failure()

    @api.post(
        "/customers",
        response_model=CustomerOut,
        status_code=201,
        responses=_ERRORS_COMMON,
    )
    async def create_customer(req: CustomerIn, response: Response) -> Any:
        result = await customers_uc.create_customer(
            CreateCustomerCommand(
                business_id=req.business_id,
                name=req.name,
                phone=req.phone,
                email=req.email,
                opening_balance=req.opening_balance,
            )
        )
        if isinstance(result, Success):
            customer = result.unwrap()
            response.headers["Location"] = f"/customers/{customer.customer_id.value}"
            return _customer_out(customer)
        raise result.failure()

    @api.get(
        "/customers/{customer_id}",
        response_model=CustomerOut,
        responses=_ERRORS_WITH_404,
    )
    async def get_customer(customer_id: str) -> Any:
        result = await customers_uc.get_customer(customer_id)
        if isinstance(result, Success):
            return _customer_out(result.unwrap())
        raise result.failure()

    @api.patch(
        "/customers/{customer_id}",
        response_model=CustomerOut,
        responses=_ERRORS_WITH_404,
    )
    async def update_customer(customer_id: str, req: CustomerPatch) -> Any:
        result = await customers_uc.update_customer(
            UpdateCustomerCommand(customer_id=customer_id, **req.model_dump())
        )
        if isinstance(result, Success):
            return _customer_out(result.unwrap())
        raise result.failure()

    @api.delete(
        "/customers/{customer_id}",
        status_code=204,
        response_class=Response,
        responses=_ERRORS_WITH_404,
    )
    async def delete_customer(customer_id: str) -> Response:
        result = await customers_uc.delete_customer(customer_id)
        if isinstance(result, Success):
            return Response(status_code=204)
        raise result.failure()

    # payments

    @api.get(
        "/customers/{customer_id}/payments",
        response_model=PaymentHistoryResponse,
        responses=_ERRORS_WITH_404,
    )
    async def payment_history(customer_id: str) -> Any:
        customer = await customers_uc.get_customer(customer_id)
        if not isinstance(customer, Success):
            raise customer.failure()
        result = await payments_uc.history_for(customer_id)
        if isinstance(result, Success):
            return PaymentHistoryResponse(
                customer_id=customer.unwrap().customer_id.value,
                items=[_payment_out(p) for p in result.unwrap()],
            )
        raise result.failure()

    @api.post(
        "/customers/{customer_id}/payments",
        response_model=PaymentReceiptResponse,
        status_code=201,
        responses=_ERRORS_WITH_409,
    )
    async def record_payment(customer_id: str, req: PaymentIn) -> Any:
        result = await payments_uc.record_payment(
            RecordPaymentCommand(customer_id=customer_id, amount=req.amount, note=req.note)
        )
        if isinstance(result, Success):
            receipt = result.unwrap()
            return PaymentReceiptResponse(
                payment=_payment_out(receipt.payment), warnings=list(receipt.warnings)
            )
        raise result.failure()

    @api.get(
        "/credits/outstanding",
        response_model=OutstandingCreditsResponse,
        responses=_ERRORS_COMMON,
    )
    async def outstanding_credits(search: str | None = Query(None)) -> Any:
        result = await customers_uc.list_outstanding(search)
        if isinstance(result, Success):
            view = result.unwrap()
            return OutstandingCreditsResponse(
                items=[
                    OutstandingCreditOut(
                        customer=_customer_out(e.customer),
                        last_payment=(
                            _payment_out(e.last_payment) if e.last_payment else None
                        ),
                    )
                    for e in view.entries
                ],
                total_outstanding=_amount(view.total_outstanding),
                currency=view.total_outstanding.currency,
            )
        raise result.failure()

    # catalog

    @api.get("/items", response_model=list[ItemOut], responses=_ERRORS_COMMON)
    async def list_items(
        search: str | None = Query(None), category: str | None = Query(None)
    ) -> Any:
        result = await catalog_uc.list_items(search, category)
        if isinstance(result, Success):
            return [_item_out(i) for i in result.unwrap()]
        raise result.failure()

    @api.post("/items", response_model=ItemOut, status_code=201, responses=_ERRORS_COMMON)
    async def create_item(req: ItemIn, response: Response) -> Any:
        result = await catalog_uc.create_item(
            CreateItemCommand(
                business_id=req.business_id,
                name=req.name,
                category=req.category,
                unit_price=req.unit_price,
                quantity_on_hand=req.quantity_on_hand,
            )
        )
        if isinstance(result, Success):
            item = result.unwrap()
            response.headers["Location"] = f"/items/{item.item_id.value}"
            return _item_out(item)
        raise result.failure()

    @api.get("/items/{item_id}", response_model=ItemOut, responses=_ERRORS_WITH_404)
    async def get_item(item_id: str) -> Any:
        result = await catalog_uc.get_item(item_id)
        if isinstance(result, Success):
            return _item_out(result.unwrap())
        raise result.failure()

    @api.patch("/items/{item_id}", response_model=ItemOut, responses=_ERRORS_WITH_404)
    async def update_item(item_id: str, req: ItemPatch) -> Any:
        result = await catalog_uc.update_item(
            UpdateItemCommand(item_id=item_id, **req.model_dump())
        )
        if isinstance(result, Success):
            return _item_out(result.unwrap())
        raise result.failure()

    @api.delete(
        "/items/{item_id}",
        status_code=204,
        response_class=Response,
        responses=_ERRORS_WITH_404,
    )
    async def delete_item(item_id: str) -> Response:
        result = await catalog_uc.delete_item(item_id)
        if isinstance(result, Success):
            return Response(status_code=204)
        raise result.failure()

    # orders

    @api.post(
        "/orders",
        response_model=OrderReceiptResponse,
        status_code=201,
        responses=_ERRORS_WITH_409,
    )
    async def place_order(req: PlaceOrderRequest, response: Response) -> Any:
        lines = await place_order_uc.build_lines(
            [ItemSelection(item_id=s.item_id, quantity=s.quantity) for s in req.lines]
        )
        if not isinstance(lines, Success):
            raise lines.failure()

        result = await place_order_uc.place_order(
            PlaceOrderCommand(
                customer_id=req.customer_id,
                lines=lines.unwrap(),
                payment_mode=req.payment_mode,
                description=req.description,
                send_bill=req.send_bill,
            )
        )
        if isinstance(result, Success):
            receipt = result.unwrap()
            response.headers["Location"] = f"/orders/{receipt.order.order_id.value}"
            return OrderReceiptResponse(
                order=_order_details(receipt.order),
                new_balance=(
                    _amount(receipt.new_balance) if receipt.new_balance is not None else None
                ),
                warnings=list(receipt.warnings),
            )
        raise result.failure()

    @api.get("/orders", response_model=OrderListResponse, responses=_ERRORS_COMMON)
    async def list_orders(
        offset: int = Query(0, ge=0),
        limit: int = Query(50, ge=1, le=100),
        customer_id: str | None = Query(None, min_length=1),
        search: str | None = Query(None),
        sort_by: str = Query("created_at"),
        sort_dir: str = Query("desc"),
    ) -> Any:
        result = await list_orders_uc.list_orders(
            ListOrdersQuery(
                offset=offset,
                limit=limit,
                customer_id=customer_id,
                search=search,
                sort_by=sort_by,
                sort_dir=sort_dir,
            )
        )
        if isinstance(result, Success):
            return OrderListResponse(
                offset=offset,
                limit=limit,
                items=[_order_summary(o) for o in result.unwrap()],
            )
        raise result.failure()

    @api.get(
        "/orders/{order_id}",
        response_model=OrderDetailsResponse,
        responses=_ERRORS_WITH_404,
    )
    async def get_order(order_id: str) -> Any:
        result = await get_order_uc.get_order(GetOrderQuery(order_id=order_id))
        if isinstance(result, Success):
            return _order_details(result.unwrap())
        raise result.failure()

    @api.post(
        "/orders/{order_id}/status",
        response_model=OrderDetailsResponse,
        responses=_ERRORS_WITH_404,
    )
    async def set_order_status(order_id: str, req: OrderStatusIn) -> Any:
        result = await get_order_uc.set_status(
            SetOrderStatusCommand(order_id=order_id, status=req.status)
        )
        if isinstance(result, Success):
            return _order_details(result.unwrap())
        raise result.failure()

    # dashboard

    @api.get("/dashboard", response_model=DashboardResponse, responses=_ERRORS_COMMON)
    async def dashboard() -> Any:
        result = await dashboard_uc.summary()
        if isinstance(result, Success):
            s = result.unwrap()
            return DashboardResponse(
                total_customers=s.total_customers,
                total_sales=_amount(s.total_sales),
                total_outstanding=_amount(s.total_outstanding),
                currency=s.total_sales.currency,
            )
        raise result.failure()

    app.include_router(api)
    return app
