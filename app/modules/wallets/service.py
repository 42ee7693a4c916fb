"""Wallet ledger service: balance reads and atomic deposit/withdraw."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from .exceptions import InsufficientFundsError
from .models import DepositInput, Operation, OperationType, WithdrawInput
from .repository import TransactionRunner, WalletRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WalletService:
    """Composes repository calls into lock-read-check-write-log units of work.

    Amounts are assumed positive; the request boundary rejects anything else
    before it reaches the service.
    """

    repository: WalletRepository
    transactions: TransactionRunner

    async def balance(self, wallet_id: uuid.UUID) -> int:
        return await self.repository.get_balance(wallet_id)

    async def deposit(self, payload: DepositInput) -> int:
        async def unit_of_work() -> int:
            balance = await self.repository.get_balance_for_update(payload.wallet_id)
            new_balance = balance + payload.amount
            await self._apply(payload.wallet_id, new_balance, OperationType.DEPOSIT, payload.amount)
            return new_balance

        new_balance = await self.transactions.run_in_transaction(unit_of_work)
        logger.info("deposit wallet=%s amount=%d balance=%d", payload.wallet_id, payload.amount, new_balance)
        return new_balance

    async def withdraw(self, payload: WithdrawInput) -> int:
        async def unit_of_work() -> int:
            balance = await self.repository.get_balance_for_update(payload.wallet_id)
            if balance < payload.amount:
                raise InsufficientFundsError(str(payload.wallet_id))
            new_balance = balance - payload.amount
            await self._apply(payload.wallet_id, new_balance, OperationType.WITHDRAW, payload.amount)
            return new_balance

        new_balance = await self.transactions.run_in_transaction(unit_of_work)
        logger.info("withdraw wallet=%s amount=%d balance=%d", payload.wallet_id, payload.amount, new_balance)
        return new_balance

    async def _apply(self, wallet_id: uuid.UUID, new_balance: int, type: OperationType, amount: int) -> None:
        await self.repository.update_balance(wallet_id, new_balance)
        await self.repository.save_operation(Operation(wallet_id=wallet_id, type=type, amount=amount))
