from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Callable, Optional
from uuid import UUID

from sqlmodel import Session

from ..core.db import unit_of_work
from ..core.errors import (
    ConcurrencyConflictError,
    InsufficientFundsError,
    InvalidAmountError,
    SameAccountTransferError,
    TransactionNotFoundError,
)
from ..models import TransactionModel
from .accounts import AccountService
from .repository import TransactionRepository


logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 0.5


class TransferService:
    """Moves money between two accounts under optimistic concurrency control.

    Each attempt re-reads both accounts, writes both balances with their
    observed versions and appends the audit record, all in one unit of work.
    A stale version rolls the attempt back and starts over after
    ``retry_delay`` seconds. Once ``max_attempts`` are spent a failed record
    is appended and the conflict is raised to the caller.
    """

    def __init__(
        self,
        session: Session,
        accounts: Optional[AccountService] = None,
        repository: Optional[TransactionRepository] = None,
        *,
        max_attempts: int = MAX_ATTEMPTS,
        retry_delay: float = RETRY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.session = session
        self.accounts = accounts or AccountService(session)
        self.repository = repository or TransactionRepository(session)
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Transfer coordination
    # ------------------------------------------------------------------
    def create_transfer(
        self,
        amount: Decimal,
        sender_id: UUID,
        recipient_id: UUID,
    ) -> TransactionModel:
        if amount <= 0:
            raise InvalidAmountError("Transaction amount must be positive")
        if sender_id == recipient_id:
            raise SameAccountTransferError("Cannot transfer to the same account")

        for attempt in range(1, self.max_attempts + 1):
            try:
                with unit_of_work(self.session):
                    record = self._apply(amount, sender_id, recipient_id)
            except ConcurrencyConflictError:
                logger.warning(
                    "transfer.conflict",
                    extra={
                        "sender_id": str(sender_id),
                        "recipient_id": str(recipient_id),
                        "attempt": attempt,
                        "max_attempts": self.max_attempts,
                    },
                )
                if attempt < self.max_attempts:
                    self._sleep(self.retry_delay)
                continue

            logger.info(
                "transfer.completed",
                extra={
                    "transaction_id": str(record.id),
                    "sender_id": str(sender_id),
                    "recipient_id": str(recipient_id),
                    "amount": str(amount),
                    "attempt": attempt,
                },
            )
            return record

        failed = self._record_failure(amount, sender_id, recipient_id)
        raise ConcurrencyConflictError(
            "Transfer abandoned after concurrent modifications",
            transaction_id=failed.id,
        )

    def _apply(
        self,
        amount: Decimal,
        sender_id: UUID,
        recipient_id: UUID,
    ) -> TransactionModel:
        sender = self.accounts.get_account(sender_id)
        recipient = self.accounts.get_account(recipient_id)

        if amount > sender.balance:
            raise InsufficientFundsError("Insufficient funds")

        sender_balance, sender_version = sender.balance, sender.version
        recipient_balance, recipient_version = recipient.balance, recipient.version

        self.accounts.update_balance(sender_id, sender_balance - amount, sender_version)
        self.accounts.update_balance(
            recipient_id, recipient_balance + amount, recipient_version
        )
        return self.repository.append(
            amount=amount,
            sender_id=sender_id,
            recipient_id=recipient_id,
        )

    def _record_failure(
        self,
        amount: Decimal,
        sender_id: UUID,
        recipient_id: UUID,
    ) -> TransactionModel:
        # the append touches no versioned row, so only lock contention can fail it
        for attempt in range(1, self.max_attempts + 1):
            try:
                with unit_of_work(self.session):
                    record = self.repository.append(
                        amount=amount,
                        sender_id=sender_id,
                        recipient_id=recipient_id,
                        failed=True,
                    )
                break
            except ConcurrencyConflictError:
                if attempt == self.max_attempts:
                    logger.error(
                        "transfer.audit_failed",
                        extra={
                            "sender_id": str(sender_id),
                            "recipient_id": str(recipient_id),
                            "amount": str(amount),
                        },
                    )
                    raise
                self._sleep(self.retry_delay)

        logger.error(
            "transfer.exhausted",
            extra={
                "transaction_id": str(record.id),
                "sender_id": str(sender_id),
                "recipient_id": str(recipient_id),
                "amount": str(amount),
                "attempts": self.max_attempts,
            },
        )
        return record

    # ------------------------------------------------------------------
    # Audit trail
    # ------------------------------------------------------------------
    def get_transaction(self, transaction_id: UUID) -> TransactionModel:
        record = self.repository.get(transaction_id)
        if record is None:
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
        return record

    def list_transactions(self, account_id: UUID) -> list[TransactionModel]:
        self.accounts.get_account(account_id)
        return self.repository.list_for_account(account_id)
