from .db import Account as AccountModel
from .db import Transaction as TransactionModel
from .schemas import (
    AccountCreate,
    AccountCreated,
    AccountResponse,
    TransactionCreate,
    TransactionResponse,
)

__all__ = [
    "AccountCreate",
    "AccountCreated",
    "AccountResponse",
    "TransactionCreate",
    "TransactionResponse",
    "AccountModel",
    "TransactionModel",
]
