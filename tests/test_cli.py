import json

import pytest

from credit_ledger.adapters.inbound.cli import main, run_cli


def _lines(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines() if line]


@pytest.mark.asyncio
async def test_defer_then_settle(usecases, capsys):
    code = await run_cli(
        usecases,
        [
            "add-customer", '{"ref": "c", "name": "Nimal", "phone": "0771234567"}',
            "add-item", '{"ref": "p", "name": "Printing", "category": "printing", "unit_price": "5.00"}',
            "place-order", '{"customer_id": "@c", "payment_mode": "defer", "lines": [{"item_id": "@p", "quantity": 3}]}',
            "record-payment", '{"customer_id": "@c", "amount": "15.00", "note": "cash"}',
            "history", '{"customer_id": "@c"}',
        ],
    )

    assert code == 0
    out = _lines(capsys)
    assert [o["command"] for o in out] == [
        "add-customer",
        "add-item",
        "place-order",
        "record-payment",
        "history",
    ]
    assert out[2]["result"]["total"] == "15.00"
    assert out[2]["result"]["new_balance"] == "15.00"
    assert out[3]["result"]["previous_balance"] == "15.00"
    assert out[3]["result"]["new_balance"] == "0.00"
    assert len(out[4]["result"]["payments"]) == 1


@pytest.mark.asyncio
async def test_domain_failure_stops_the_run(usecases, capsys):
    code = await run_cli(
        usecases,
        [
            "add-customer", '{"ref": "c", "name": "Nimal", "opening_balance": "10.00"}',
            "record-payment", '{"customer_id": "@c", "amount": "12.00"}',
            "history", '{"customer_id": "@c"}',
        ],
    )

    assert code == 1
    out = _lines(capsys)
    assert len(out) == 2
    assert out[1]["ok"] is False
    assert out[1]["error"]["type"] == "OverpaymentError"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "argv",
    [
        ["place-order"],
        ["refund", "{}"],
        ["place-order", "not json"],
        ["place-order", "[1, 2]"],
        ["record-payment", '{"customer_id": "@unknown", "amount": "1"}'],
        ["record-payment", '{"customer_id": "c", "amount": "ten"}'],
    ],
)
async def test_invalid_input(usecases, argv):
    assert await run_cli(usecases, argv) == 2


def test_main_without_arguments_prints_usage(capsys, monkeypatch):
    monkeypatch.setenv("CREDIT_LEDGER_NOTIFICATIONS_ENABLED", "false")
    monkeypatch.setattr("credit_ledger.adapters.inbound.cli.configure_logging", lambda level: None)

    assert main([]) == 2
    assert "usage: credit-ledger" in capsys.readouterr().out
