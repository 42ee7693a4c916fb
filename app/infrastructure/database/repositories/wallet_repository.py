"""SQLAlchemy implementation for wallet domain"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import Select, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.models import Wallet, WalletOperation
from app.infrastructure.database.transaction import TransactionRequiredError, current_session
from app.modules.wallets.exceptions import WalletNotFoundError, WalletStorageError
from app.modules.wallets.models import Operation


def balance_statement(wallet_id: uuid.UUID, *, for_update: bool = False) -> Select:
    """Balance lookup; ``for_update`` adds a row lock held until the transaction ends."""
    stmt = select(Wallet.balance).where(Wallet.id == wallet_id)
    if for_update:
        stmt = stmt.with_for_update()
    return stmt


class SqlWalletRepository:
    """Wallet queries that run in the ambient transaction when one is bound.

    Every query goes through :meth:`_session`, which yields the session of the
    transaction bound to the current context or, failing that, a short-lived
    pooled session.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        session = current_session()
        if session is not None:
            yield session
            return
        async with self._session_factory() as session:
            yield session

    async def get_balance(self, wallet_id: uuid.UUID) -> int:
        """Current balance without locking; the value may be stale on return."""
        return await self._scan_balance(wallet_id, for_update=False)

    async def get_balance_for_update(self, wallet_id: uuid.UUID) -> int:
        """Current balance, locking the wallet row until the transaction ends.

        Must run inside ``TransactionManager.run_in_transaction``: outside a
        transaction the lock would be released as soon as the read returns.
        """
        if current_session() is None:
            raise TransactionRequiredError("get_balance_for_update requires an active transaction")
        return await self._scan_balance(wallet_id, for_update=True)

    async def _scan_balance(self, wallet_id: uuid.UUID, *, for_update: bool) -> int:
        stmt = balance_statement(wallet_id, for_update=for_update)
        try:
            async with self._session() as session:
                result = await session.execute(stmt)
                balance = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise WalletStorageError(f"scan balance: {exc}") from exc

        if balance is None:
            raise WalletNotFoundError(str(wallet_id))
        return balance

    async def update_balance(self, wallet_id: uuid.UUID, new_balance: int) -> None:
        # called after get_balance_for_update in the same transaction
        stmt = (
            update(Wallet)
            .where(Wallet.id == wallet_id)
            .values(balance=new_balance, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._session() as session:
                await session.execute(stmt)
        except SQLAlchemyError as exc:
            raise WalletStorageError(f"update balance: {exc}") from exc

    async def save_operation(self, operation: Operation) -> None:
        row = WalletOperation(
            id=operation.id,
            wallet_id=operation.wallet_id,
            operation=operation.type.value,
            amount=operation.amount,
        )
        try:
            async with self._session() as session:
                session.add(row)
                await session.flush()
        except SQLAlchemyError as exc:
            raise WalletStorageError(f"save operation: {exc}") from exc

    async def create_wallet(self, wallet_id: uuid.UUID | None = None, balance: int = 0) -> uuid.UUID:
        """Insert a wallet row. Provisioning only; run it inside a transaction."""
        if current_session() is None:
            raise TransactionRequiredError("create_wallet requires an active transaction")
        wallet = Wallet(id=wallet_id or uuid.uuid4(), balance=balance)
        try:
            async with self._session() as session:
                session.add(wallet)
                await session.flush()
        except SQLAlchemyError as exc:
            raise WalletStorageError(f"create wallet: {exc}") from exc
        return wallet.id
