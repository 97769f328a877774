from fastapi import Depends
from sqlmodel import Session

from ..services import AccountRepository, AccountService, TransactionRepository, TransferService
from .config import Settings, get_settings
from .db import get_session

def get_account_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> AccountService:
    repository = AccountRepository(session)
    return AccountService(
        session,
        repository,
        default_starting_balance=settings.default_starting_balance,
    )

def get_transfer_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    accounts: AccountService = Depends(get_account_service),
) -> TransferService:
    return TransferService(
        session,
        accounts,
        TransactionRepository(session),
        max_attempts=settings.transfer_max_attempts,
        retry_delay=settings.transfer_retry_delay,
    )
