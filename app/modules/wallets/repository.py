"""Repository protocol for wallet operations."""

from __future__ import annotations

import uuid
from typing import Awaitable, Callable, Protocol, TypeVar

from .models import Operation

T = TypeVar("T")


class WalletRepository(Protocol):
    async def get_balance(self, wallet_id: uuid.UUID) -> int:
        ...

    async def get_balance_for_update(self, wallet_id: uuid.UUID) -> int:
        ...

    async def update_balance(self, wallet_id: uuid.UUID, new_balance: int) -> None:
        ...

    async def save_operation(self, operation: Operation) -> None:
        ...


class TransactionRunner(Protocol):
    async def run_in_transaction(self, unit_of_work: Callable[[], Awaitable[T]]) -> T:
        ...
