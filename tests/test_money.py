from decimal import Decimal

import pytest

from credit_ledger.core.domain.model.errors import NegativeResultError
from credit_ledger.core.domain.model.money import Money, fold_money


def test_of_quantizes_half_up_to_two_decimals():
    assert Money.of("1.005").amount == Decimal("1.01")
    assert Money.of("1.004").amount == Decimal("1.00")
    assert Money.of(7).amount == Decimal("7.00")


def test_float_goes_through_str():
    assert Money.of(0.1).amount == Decimal("0.10")
    assert Money.of(0.1) + Money.of(0.2) == Money.of("0.30")


def test_arithmetic():
    assert Money.of("5.00") * 3 == Money.of("15.00")
    assert Money.of("15.00") - Money.of("2.50") == Money.of("12.50")
    assert Money.of("1.10").add(Money.of("2.20")) == Money.of("3.30")


def test_subtract_non_negative_raises_below_zero():
    with pytest.raises(NegativeResultError):
        Money.of("10.00").subtract(Money.of("12.00"), non_negative=True)

    assert Money.of("10.00").subtract(Money.of("12.00")) == Money.of("-2.00")
    assert Money.of("10.00").subtract(Money.of("10.00"), non_negative=True).is_zero()


def test_ordering_and_predicates():
    assert Money.of("12.00") > Money.of("10.00")
    assert Money.of("10.00") <= Money.of("10.00")
    assert Money.zero().is_zero()
    assert Money.of("0.01").is_positive()
    assert Money.of("-0.01").is_negative()


def test_currency_mismatch_is_rejected():
    with pytest.raises(ValueError):
        Money.of("1.00", "LKR") + Money.of("1.00", "USD")
    with pytest.raises(ValueError):
        Money.of("1.00", "LKR") < Money.of("1.00", "USD")


def test_format_uses_label_and_two_digits():
    assert Money.of("15").format() == "LKR 15.00"
    assert Money.of("1234.5", "USD").format() == "USD 1234.50"


def test_fold_money_of_nothing_is_zero():
    assert fold_money([]) == Money.zero()
    assert fold_money([Money.of("1.25"), Money.of("2.75")]) == Money.of("4.00")
