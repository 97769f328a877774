from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import or_, update
from sqlmodel import Session, select

from ..models import AccountModel, TransactionModel


class AccountRepository:
    """Versioned account rows with a compare-and-swap balance write."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, balance: Decimal) -> AccountModel:
        account = AccountModel(balance=balance, version=0)
        self.session.add(account)
        self.session.flush()
        self.session.refresh(account)
        return account

    def get(self, account_id: UUID) -> Optional[AccountModel]:
        # populate_existing so a retry never sees a stale identity-map copy
        return self.session.get(AccountModel, account_id, populate_existing=True)

    def compare_and_set_balance(
        self,
        account_id: UUID,
        balance: Decimal,
        expected_version: int,
    ) -> bool:
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .where(AccountModel.version == expected_version)
            .values(balance=balance, version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(stmt)
        return result.rowcount == 1


class TransactionRepository:
    """Append-only log of finalized transfer attempts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def append(
        self,
        *,
        amount: Decimal,
        sender_id: UUID,
        recipient_id: UUID,
        failed: bool = False,
    ) -> TransactionModel:
        record = TransactionModel(
            amount=amount,
            sender_id=sender_id,
            recipient_id=recipient_id,
            failed=failed,
        )
        self.session.add(record)
        self.session.flush()
        self.session.refresh(record)
        return record

    def get(self, transaction_id: UUID) -> Optional[TransactionModel]:
        return self.session.get(TransactionModel, transaction_id)

    def list_for_account(self, account_id: UUID) -> list[TransactionModel]:
        stmt = (
            select(TransactionModel)
            .where(
                or_(
                    TransactionModel.sender_id == account_id,
                    TransactionModel.recipient_id == account_id,
                )
            )
            .order_by(TransactionModel.created_at.desc())
        )
        return list(self.session.exec(stmt))
