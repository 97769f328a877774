from __future__ import annotations
from datetime import datetime, UTC
from decimal import Decimal
from uuid import UUID, uuid4
from sqlalchemy import BigInteger, CheckConstraint, Column, Numeric
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel

# 18 digits of minor units still fit a signed 64-bit integer.
MONEY_DIGITS = 18
MONEY_SCALE = 6
MONEY_LIMIT = Decimal(10) ** (MONEY_DIGITS - MONEY_SCALE)

class Money(TypeDecorator):
    """Exact decimal column.

    SQLite has no decimal type and SQLAlchemy would bind floats, so there the
    value is kept as an integer count of 10**-MONEY_SCALE units.
    """

    impl = Numeric(MONEY_DIGITS, MONEY_SCALE)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(BigInteger())
        return dialect.type_descriptor(Numeric(MONEY_DIGITS, MONEY_SCALE, asdecimal=True))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        minor_units = Decimal(value).scaleb(MONEY_SCALE)
        if minor_units != minor_units.to_integral_value():
            raise ValueError(f"{value} has more than {MONEY_SCALE} decimal places")
        return int(minor_units)

    def process_result_value(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return Decimal(value).scaleb(-MONEY_SCALE)

class Account(SQLModel, table=True):
    __tablename__ = "accounts"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    balance: Decimal = Field(default=Decimal(0), ge=0, sa_column=Column(Money(), nullable=False))
    version: int = Field(default=0, ge=0)

class Transaction(SQLModel, table=True):
    __tablename__ = "transactions"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    amount: Decimal = Field(gt=0, sa_column=Column(Money(), nullable=False))
    sender_id: UUID = Field(foreign_key="accounts.id", index=True)
    recipient_id: UUID = Field(foreign_key="accounts.id", index=True)
    failed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)
