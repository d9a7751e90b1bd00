from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from returns.result import Failure, Result, Success

from credit_ledger.core.domain.model.credit_account import CreditAccount
from credit_ledger.core.domain.model.customer import Customer, CustomerId
from credit_ledger.core.domain.model.errors import BalanceConflict, LedgerError
from credit_ledger.core.ports.outbound.customers import CustomerRepository

logger = logging.getLogger(__name__)

AccountMutation = Callable[[CreditAccount], Result[CreditAccount, LedgerError]]


@dataclass(frozen=True)
class BalanceChange:
    before: Customer
    after: Customer


async def update_balance(
    customers: CustomerRepository,
    customer_id: CustomerId,
    mutate: AccountMutation,
    max_attempts: int,
) -> Result[BalanceChange, LedgerError]:
    """Read-modify-write of a customer's balance with compare-and-set.

    On ``BalanceConflict`` the customer is re-read and ``mutate`` re-applied,
    so validation (e.g. overpayment) always runs against the latest balance.
    """
    for attempt in range(1, max_attempts + 1):
        got = await customers.get(customer_id)
        if isinstance(got, Failure):
            return got
        before = got.unwrap()

        mutated = mutate(CreditAccount(before.customer_id, before.balance))
        if isinstance(mutated, Failure):
            return mutated

        written = await customers.compare_and_set_balance(
            customer_id, expected=before.balance, new=mutated.unwrap().balance
        )
        if isinstance(written, Success):
            return Success(BalanceChange(before=before, after=written.unwrap()))

        err = written.failure()
        if not isinstance(err, BalanceConflict):
            return written
        logger.warning(
            "balance of customer %s changed concurrently (attempt %d/%d)",
            customer_id.value,
            attempt,
            max_attempts,
        )

    return Failure(
        BalanceConflict(
            message=f"balance kept changing; gave up after {max_attempts} attempts",
            customer_id=customer_id.value,
        )
    )
