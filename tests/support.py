"""Helpers for tests running against throwaway SQLite ledgers."""
from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from sqlalchemy import func, select

from app.core.config import DatabaseSettings, Settings
from app.core.container import ApplicationContainer
from app.db.models import WalletOperation
from app.infrastructure.database.session import init_db


def make_settings(db_path: Path) -> Settings:
    return Settings(
        environment="test",
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{db_path}"),
    )


@asynccontextmanager
async def open_ledger(settings: Settings) -> AsyncIterator[ApplicationContainer]:
    container = ApplicationContainer.from_settings(settings)
    await init_db(container.engine)
    try:
        yield container
    finally:
        await container.engine.dispose()


async def create_wallet(container: ApplicationContainer, balance: int = 0) -> uuid.UUID:
    repository = container.wallet_repository
    return await container.transactions.run_in_transaction(
        lambda: repository.create_wallet(balance=balance)
    )


async def count_operations(container: ApplicationContainer, wallet_id: uuid.UUID, **filters) -> int:
    stmt = select(func.count()).select_from(WalletOperation).where(WalletOperation.wallet_id == wallet_id)
    for column, value in filters.items():
        stmt = stmt.where(getattr(WalletOperation, column) == value)
    async with container.session_factory() as session:
        result = await session.execute(stmt)
        return result.scalar_one()
