"""Domain models for wallet operations."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum


class OperationType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"


@dataclass(slots=True, frozen=True)
class Operation:
    """Audit record of one balance mutation."""

    wallet_id: uuid.UUID
    type: OperationType
    amount: int
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(slots=True, frozen=True)
class DepositInput:
    wallet_id: uuid.UUID
    amount: int


@dataclass(slots=True, frozen=True)
class WithdrawInput:
    wallet_id: uuid.UUID
    amount: int
