from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlmodel import Session

from ..core.config import get_settings
from ..core.db import unit_of_work
from ..core.errors import (
    AccountNotFoundError,
    ConcurrencyConflictError,
    InvalidBalanceError,
)
from ..models import AccountModel
from ..models.db import MONEY_LIMIT
from .repository import AccountRepository


logger = logging.getLogger(__name__)


class AccountService:
    def __init__(
        self,
        session: Session,
        repository: Optional[AccountRepository] = None,
        default_starting_balance: Optional[Decimal] = None,
    ) -> None:
        self.session = session
        self.repository = repository or AccountRepository(session)
        if default_starting_balance is None:
            default_starting_balance = get_settings().default_starting_balance
        self.default_starting_balance = default_starting_balance

    def get_account(self, account_id: UUID) -> AccountModel:
        account = self.repository.get(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return account

    def get_balance(self, account_id: UUID) -> Decimal:
        return self.get_account(account_id).balance

    def update_balance(
        self,
        account_id: UUID,
        new_balance: Decimal,
        expected_version: int,
    ) -> AccountModel:
        """Write ``new_balance`` only if the stored version is still ``expected_version``.

        The caller owns the surrounding transaction. A version mismatch raises
        ``ConcurrencyConflictError`` and leaves the row untouched.
        """
        if new_balance < 0:
            raise InvalidBalanceError("Balance must not be negative")
        if new_balance >= MONEY_LIMIT:
            raise InvalidBalanceError(f"Balance must be below {MONEY_LIMIT}")

        if not self.repository.compare_and_set_balance(
            account_id, new_balance, expected_version
        ):
            # zero rows matched: either the row is gone or its version moved on
            self.get_account(account_id)
            logger.debug(
                "account.version_conflict",
                extra={"account_id": str(account_id), "expected_version": expected_version},
            )
            raise ConcurrencyConflictError(
                f"Account {account_id} was modified concurrently"
            )

        return self.get_account(account_id)

    def create_account(self, starting_balance: Optional[Decimal] = None) -> AccountModel:
        balance = self.default_starting_balance if starting_balance is None else starting_balance
        if balance <= 0:
            raise InvalidBalanceError("Account starting balance must be positive")
        if balance >= MONEY_LIMIT:
            raise InvalidBalanceError(f"Balance must be below {MONEY_LIMIT}")

        with unit_of_work(self.session):
            account = self.repository.add(balance)
        logger.info(
            "account.created",
            extra={"account_id": str(account.id), "balance": str(account.balance)},
        )
        return account
