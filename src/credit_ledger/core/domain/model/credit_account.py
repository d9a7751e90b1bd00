from __future__ import annotations

from dataclasses import dataclass
from decimal import InvalidOperation

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.customer import CustomerId
from credit_ledger.core.domain.model.errors import (
    InvalidAmountError,
    LedgerError,
    OverpaymentError,
)
from credit_ledger.core.domain.model.money import Money


@dataclass(frozen=True)
class CreditAccount:
    """Running pay-later balance of one customer.

    Mutators return a new account; persisting it is the caller's job.
    """

    customer_id: CustomerId
    balance: Money

    def charge(self, amount: Money) -> Result["CreditAccount", LedgerError]:
        if amount.is_negative():
            return Failure(InvalidAmountError("charge amount must be >= 0"))
        try:
            balance = self.balance + amount
        except InvalidOperation:
            return Failure(
                InvalidAmountError(
                    f"balance {self.balance.format()} + {amount.format()} is out of range"
                )
            )
        return Success(CreditAccount(self.customer_id, balance))

    def settle(self, amount: Money) -> Result["CreditAccount", LedgerError]:
        if amount > self.balance:
            return Failure(
                OverpaymentError(
                    f"payment {amount.format()} exceeds outstanding {self.balance.format()}"
                )
            )
        try:
            balance = self.balance.subtract(amount, non_negative=True)
        except InvalidOperation:
            return Failure(
                InvalidAmountError(f"payment {amount.format()} is out of range")
            )
        return Success(CreditAccount(self.customer_id, balance))
