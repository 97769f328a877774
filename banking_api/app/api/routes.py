from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from ..core.dependencies import get_account_service, get_transfer_service
from ..models import (
    AccountCreate,
    AccountCreated,
    AccountModel,
    AccountResponse,
    TransactionCreate,
    TransactionModel,
    TransactionResponse,
)
from ..services import AccountService, TransferService


def _account_to_response(account: AccountModel) -> AccountResponse:
    return AccountResponse(id=account.id, balance=account.balance, version=account.version)

def _transaction_to_response(record: TransactionModel) -> TransactionResponse:
    return TransactionResponse(
        id=record.id,
        amount=record.amount,
        sender=record.sender_id,
        recipient=record.recipient_id,
        failed=record.failed,
        created_at=record.created_at,
    )

def _decimal_json(value: Decimal) -> str:
    # plain JSON number without the column scale padding: 100.200000 -> 100.2
    return format(value.normalize(), "f")


router = APIRouter(prefix="/accounts", tags=["accounts"])

@router.post("", response_model=AccountCreated)
def create_account(
    payload: Optional[AccountCreate] = None,
    service: AccountService = Depends(get_account_service),
) -> AccountCreated:
    account = service.create_account(payload.balance if payload else None)
    return AccountCreated(id=account.id, balance=account.balance)

@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: UUID,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    return _account_to_response(service.get_account(account_id))

@router.get(
    "/{account_id}/balance",
    responses={200: {"content": {"application/json": {"schema": {"type": "number"}}}}},
)
def get_balance(
    account_id: UUID,
    service: AccountService = Depends(get_account_service),
) -> Response:
    return Response(
        content=_decimal_json(service.get_balance(account_id)),
        media_type="application/json",
    )

@router.get("/{account_id}/transactions", response_model=list[TransactionResponse])
def list_account_transactions(
    account_id: UUID,
    service: TransferService = Depends(get_transfer_service),
) -> list[TransactionResponse]:
    return [_transaction_to_response(record) for record in service.list_transactions(account_id)]

transaction_router = APIRouter(prefix="/transactions", tags=["transactions"])

@transaction_router.post("", response_model=TransactionResponse)
def create_transaction(
    payload: TransactionCreate,
    service: TransferService = Depends(get_transfer_service),
) -> TransactionResponse:
    record = service.create_transfer(payload.amount, payload.sender_id, payload.recipient_id)
    return _transaction_to_response(record)

@transaction_router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: UUID,
    service: TransferService = Depends(get_transfer_service),
) -> TransactionResponse:
    return _transaction_to_response(service.get_transaction(transaction_id))

__all__ = ["router", "transaction_router"]
