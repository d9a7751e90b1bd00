from __future__ import annotations

import asyncio
import json
import sys
from decimal import Decimal
from typing import Any, Awaitable, Callable

from returns.result import Failure, Result, Success

from credit_ledger.bootstrap import UseCases, build_usecases
from credit_ledger.config import Settings
from credit_ledger.core.domain.model.errors import LedgerError
from credit_ledger.core.domain.model.order import PaymentMode
from credit_ledger.core.ports.inbound.catalog import CreateItemCommand
from credit_ledger.core.ports.inbound.customers import CreateCustomerCommand
from credit_ledger.core.ports.inbound.place_order import (
    ItemSelection,
    PlaceOrderCommand,
)
from credit_ledger.core.ports.inbound.record_payment import RecordPaymentCommand
from credit_ledger.logging_setup import configure_logging

USAGE = """\
usage: credit-ledger <command> '<json>' [<command> '<json>' ...]

commands:
  add-customer    {"ref":"c1","name":"Nimal","phone":"077...","email":"...","opening_balance":"0"}
  add-item        {"ref":"i1","name":"A4 print","category":"printing","unit_price":"15.00"}
  place-order     {"customer_id":"@c1","payment_mode":"defer",
                   "lines":[{"item_id":"@i1","quantity":2}]}
  record-payment  {"customer_id":"@c1","amount":"20.00","note":"cash"}
  history         {"customer_id":"@c1"}

Commands run in order against one in-memory ledger. "@name" refers to the id
created by an earlier command that carried "ref": "name".
"""

Refs = dict[str, str]
Handler = Callable[[UseCases, dict[str, Any], Refs], Awaitable[Result[dict[str, Any], LedgerError]]]


def _resolve(value: Any, refs: Refs) -> str:
    raw = str(value if value is not None else "")
    if raw.startswith("@"):
        if raw[1:] not in refs:
            raise KeyError(f"unknown reference {raw}")
        return refs[raw[1:]]
    return raw


async def _add_customer(
    uc: UseCases, payload: dict[str, Any], refs: Refs
) -> Result[dict[str, Any], LedgerError]:
    result = await uc.customers.create_customer(
        CreateCustomerCommand(
            business_id=str(payload.get("business_id", "")),
            name=str(payload.get("name", "")),
            phone=str(payload.get("phone", "")),
            email=str(payload.get("email", "")),
            opening_balance=Decimal(str(payload.get("opening_balance", "0"))),
        )
    )
    if isinstance(result, Success) and payload.get("ref"):
        refs[str(payload["ref"])] = result.unwrap().customer_id.value
    return result.map(
        lambda c: {
            "customer_id": c.customer_id.value,
            "name": c.name,
            "balance": str(c.balance.amount),
            "currency": c.balance.currency,
        }
    )


async def _add_item(
    uc: UseCases, payload: dict[str, Any], refs: Refs
) -> Result[dict[str, Any], LedgerError]:
    result = await uc.catalog.create_item(
        CreateItemCommand(
            business_id=str(payload.get("business_id", "")),
            name=str(payload.get("name", "")),
            category=str(payload.get("category", "other")),
            unit_price=Decimal(str(payload.get("unit_price", "0"))),
            quantity_on_hand=int(payload.get("quantity_on_hand", 0)),
        )
    )
    if isinstance(result, Success) and payload.get("ref"):
        refs[str(payload["ref"])] = result.unwrap().item_id.value
    return result.map(
        lambda i: {
            "item_id": i.item_id.value,
            "name": i.name,
            "unit_price": str(i.unit_price.amount),
        }
    )


async def _place_order(
    uc: UseCases, payload: dict[str, Any], refs: Refs
) -> Result[dict[str, Any], LedgerError]:
    selections = [
        ItemSelection(item_id=_resolve(x.get("item_id"), refs), quantity=int(x["quantity"]))
        for x in payload.get("lines", [])
    ]
    lines = await uc.place_order.build_lines(selections)
    if isinstance(lines, Failure):
        return lines

    result = await uc.place_order.place_order(
        PlaceOrderCommand(
            customer_id=_resolve(payload.get("customer_id"), refs),
            lines=lines.unwrap(),
            payment_mode=PaymentMode(str(payload.get("payment_mode", "settle_now"))),
            description=str(payload.get("description", "")),
            send_bill=bool(payload.get("send_bill", False)),
        )
    )
    return result.map(
        lambda r: {
            "order_id": str(r.order.order_id.value),
            "customer_id": r.order.customer_id.value,
            "total": str(r.total.amount),
            "currency": r.total.currency,
            "new_balance": None if r.new_balance is None else str(r.new_balance.amount),
            "warnings": list(r.warnings),
        }
    )


async def _record_payment(
    uc: UseCases, payload: dict[str, Any], refs: Refs
) -> Result[dict[str, Any], LedgerError]:
    result = await uc.payments.record_payment(
        RecordPaymentCommand(
            customer_id=_resolve(payload.get("customer_id"), refs),
            amount=Decimal(str(payload.get("amount", "0"))),
            note=str(payload.get("note", "")),
        )
    )
    return result.map(
        lambda r: {
            "payment_id": str(r.payment.payment_id.value),
            "amount": str(r.payment.amount.amount),
            "previous_balance": str(r.payment.previous_balance.amount),
            "new_balance": str(r.payment.new_balance.amount),
            "warnings": list(r.warnings),
        }
    )


async def _history(
    uc: UseCases, payload: dict[str, Any], refs: Refs
) -> Result[dict[str, Any], LedgerError]:
    customer_id = _resolve(payload.get("customer_id"), refs)
    result = await uc.payments.history_for(customer_id)
    return result.map(
        lambda payments: {
            "customer_id": customer_id,
            "payments": [
                {
                    "amount": str(p.amount.amount),
                    "new_balance": str(p.new_balance.amount),
                    "date": p.paid_on.isoformat(),
                }
                for p in payments
            ],
        }
    )


COMMANDS: dict[str, Handler] = {
    "add-customer": _add_customer,
    "add-item": _add_item,
    "place-order": _place_order,
    "record-payment": _record_payment,
    "history": _history,
}


async def run_cli(usecases: UseCases, argv: list[str]) -> int:
    """Run ``<command> <json>`` pairs in order, printing one JSON line per command.

    Exit codes: 0 all ok, 1 a command failed in the domain, 2 invalid input.
    """
    if not argv or len(argv) % 2:
        print(USAGE)
        return 2

    refs: Refs = {}
    for command, raw in zip(argv[::2], argv[1::2]):
        handler = COMMANDS.get(command)
        if handler is None:
            print(f"invalid_input: unknown command {command!r}")
            return 2
        try:
            payload = json.loads(raw)
            if not isinstance(payload, dict):
                raise ValueError("payload must be a JSON object")
            result = await handler(usecases, payload, refs)
        except (ValueError, KeyError, TypeError, ArithmeticError) as e:
            print(f"invalid_input: {command}: {e}")
            return 2

        if isinstance(result, Success):
            print(json.dumps({"command": command, "ok": True, "result": result.unwrap()}))
            continue

        err = result.failure()
        print(
            json.dumps(
                {
                    "command": command,
                    "ok": False,
                    "error": {"type": type(err).__name__, "message": str(err)},
                }
            )
        )
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    settings = Settings()
    configure_logging(settings.log_level)
    usecases = build_usecases(settings)
    return asyncio.run(run_cli(usecases, argv))


if __name__ == "__main__":
    raise SystemExit(main())
