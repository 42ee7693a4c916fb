"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, Enum, ForeignKey, Uuid
from sqlalchemy.sql import func

from app.infrastructure.database.base import Base

OPERATION_TYPES = ("DEPOSIT", "WITHDRAW")


def generate_uuid() -> uuid.UUID:
    return uuid.uuid4()


class Wallet(Base):
    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_wallets_balance_non_negative"),
    )

    id = Column(Uuid, primary_key=True, default=generate_uuid)
    balance = Column(BigInteger, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class WalletOperation(Base):
    __tablename__ = "wallet_operations"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_wallet_operations_amount_positive"),
    )

    id = Column(Uuid, primary_key=True, default=generate_uuid)
    wallet_id = Column(Uuid, ForeignKey("wallets.id"), nullable=False, index=True)
    operation = Column(
        Enum(*OPERATION_TYPES, name="operation_type", create_constraint=True),
        nullable=False,
    )
    amount = Column(BigInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
