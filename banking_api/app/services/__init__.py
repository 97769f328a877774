from .accounts import AccountService
from .repository import AccountRepository, TransactionRepository
from .transfers import TransferService

__all__ = [
    "AccountRepository",
    "AccountService",
    "TransactionRepository",
    "TransferService",
]
