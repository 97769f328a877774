from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .db import MONEY_DIGITS, MONEY_SCALE

MoneyAmount = Annotated[Decimal, Field(max_digits=MONEY_DIGITS, decimal_places=MONEY_SCALE)]

class AccountCreate(BaseModel):
    balance: Optional[MoneyAmount] = Field(
        default=None,
        description="Starting balance; the configured default is used when omitted",
    )

class AccountCreated(BaseModel):
    id: UUID
    balance: Decimal

class AccountResponse(BaseModel):
    id: UUID
    balance: Decimal = Field(..., ge=0)
    version: int

class TransactionCreate(BaseModel):
    # Sign is checked by the transfer service so that it maps to invalid_amount.
    amount: MoneyAmount
    sender_id: UUID = Field(..., alias="from")
    recipient_id: UUID = Field(..., alias="to")

    model_config = ConfigDict(populate_by_name=True)

class TransactionResponse(BaseModel):
    id: UUID
    amount: Decimal
    sender: UUID
    recipient: UUID
    failed: bool
    created_at: datetime
