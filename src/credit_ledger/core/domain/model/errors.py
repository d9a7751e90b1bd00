from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(LedgerError):
    pass


@dataclass(frozen=True)
class EmptyOrderError(ValidationError):
    pass


@dataclass(frozen=True)
class NoCustomerError(ValidationError):
    pass


@dataclass(frozen=True)
class InvalidAmountError(ValidationError):
    pass


@dataclass(frozen=True)
class InvalidStatusTransition(ValidationError):
    current: str
    requested: str

    def __str__(self) -> str:  # pragma: no cover
        return f"invalid_status_transition: {self.current} -> {self.requested} ({self.message})"


@dataclass(frozen=True)
class OutstandingBalanceError(ValidationError):
    customer_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"outstanding_balance: {self.customer_id} ({self.message})"


@dataclass(frozen=True)
class OverpaymentError(LedgerError):
    pass


@dataclass(frozen=True)
class NegativeResultError(LedgerError):
    pass


@dataclass(frozen=True)
class PersistenceError(LedgerError):
    pass


@dataclass(frozen=True)
class CustomerNotFound(PersistenceError):
    customer_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"customer_not_found: {self.customer_id} ({self.message})"


@dataclass(frozen=True)
class ItemNotFound(PersistenceError):
    item_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"item_not_found: {self.item_id} ({self.message})"


@dataclass(frozen=True)
class OrderNotFound(PersistenceError):
    order_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"order_not_found: {self.order_id} ({self.message})"


@dataclass(frozen=True)
class BalanceConflict(PersistenceError):
    customer_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"balance_conflict: {self.customer_id} ({self.message})"


@dataclass(frozen=True)
class NotificationError(LedgerError):
    pass


@dataclass(frozen=True)
class AccessDenied(LedgerError):
    email: str

    def __str__(self) -> str:  # pragma: no cover
        return f"access_denied: {self.email} ({self.message})"
