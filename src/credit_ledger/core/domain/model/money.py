from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from credit_ledger.core.domain.model.errors import NegativeResultError

DEFAULT_CURRENCY = "LKR"
_CENT = Decimal("0.01")


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money:
    """Two-decimal fixed-point amount.

    Floats are converted through ``str`` so that ``Money.of(0.1)`` is exactly
    ``0.10`` rather than the nearest binary fraction.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    @staticmethod
    def of(
        amount: Decimal | int | float | str, currency: str = DEFAULT_CURRENCY
    ) -> "Money":
        return Money(_quantize(Decimal(str(amount))), currency)

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> "Money":
        return Money.of(0, currency)

    def add(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(_quantize(self.amount + other.amount), self.currency)

    def subtract(self, other: "Money", non_negative: bool = False) -> "Money":
        self._assert_same_currency(other)
        result = _quantize(self.amount - other.amount)
        if non_negative and result < 0:
            raise NegativeResultError(
                f"{self.amount} - {other.amount} would be negative"
            )
        return Money(result, self.currency)

    def multiply_by_quantity(self, n: int) -> "Money":
        return Money(_quantize(self.amount * Decimal(n)), self.currency)

    def rounded_to_2_decimals(self) -> Decimal:
        return _quantize(self.amount)

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_negative(self) -> bool:
        return self.amount < 0

    def format(self) -> str:
        return f"{self.currency} {self.rounded_to_2_decimals():.2f}"

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __mul__(self, n: int) -> "Money":
        return self.multiply_by_quantity(n)

    def __lt__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValueError(f"currency_mismatch: {self.currency} vs {other.currency}")


def fold_money(values: Iterable[Money], currency: str = DEFAULT_CURRENCY) -> Money:
    total = Money.zero(currency)
    for v in values:
        total = total + v
    return total
