from __future__ import annotations

from enum import Enum
from typing import Optional
from uuid import UUID


class ErrorKind(str, Enum):
    INVALID_AMOUNT = "invalid_amount"
    INVALID_BALANCE = "invalid_balance"
    NOT_FOUND = "not_found"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    SAME_ACCOUNT = "same_account"
    CONCURRENCY_CONFLICT = "concurrency_conflict"
    UNKNOWN = "unknown"


class BankingError(Exception):
    """Base class for every failure the service surfaces on purpose."""

    kind: ErrorKind = ErrorKind.UNKNOWN


class ClientError(BankingError):
    """Caused by the request itself; terminal and never retried."""


class InvalidAmountError(ClientError):
    """Raised when a transfer amount is zero or negative."""

    kind = ErrorKind.INVALID_AMOUNT


class InvalidBalanceError(ClientError):
    """Raised when a balance would be negative, or a starting balance is not positive."""

    kind = ErrorKind.INVALID_BALANCE


class AccountNotFoundError(ClientError):
    """Raised when an account id is missing from the store."""

    kind = ErrorKind.NOT_FOUND


class TransactionNotFoundError(ClientError):
    kind = ErrorKind.NOT_FOUND


class InsufficientFundsError(ClientError):
    """Raised when a transfer would drop the sender's balance below zero."""

    kind = ErrorKind.INSUFFICIENT_FUNDS


class SameAccountTransferError(ClientError):
    kind = ErrorKind.SAME_ACCOUNT


class ConcurrencyConflictError(BankingError):
    """Raised when a conditional write observed a stale account version.

    Inside the transfer loop this only means "re-read and try again". It reaches
    the caller once the retry budget is spent, together with the id of the
    failed audit record.
    """

    kind = ErrorKind.CONCURRENCY_CONFLICT

    def __init__(self, message: str, transaction_id: Optional[UUID] = None) -> None:
        super().__init__(message)
        self.transaction_id = transaction_id
