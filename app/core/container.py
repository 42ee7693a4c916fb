"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.core.config import Settings, get_settings
from app.infrastructure.database.repositories import SqlWalletRepository
from app.infrastructure.database import session as _db_session
from app.infrastructure.database.session import (
    build_engine,
    dispose_engine,
    get_engine,
    get_session_factory,
    isolation_level_for,
    make_session_factory,
)
from app.infrastructure.database.transaction import TransactionManager
from app.modules.wallets import WalletService


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    transactions: TransactionManager
    wallet_repository: SqlWalletRepository
    wallet_service: WalletService

    @classmethod
    def from_engine(
        cls,
        settings: Settings,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> "ApplicationContainer":
        session_factory = session_factory or make_session_factory(engine)
        transactions = TransactionManager(
            session_factory,
            isolation_level=isolation_level_for(engine, settings.database.isolation_level),
        )
        repository = SqlWalletRepository(session_factory)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=session_factory,
            transactions=transactions,
            wallet_repository=repository,
            wallet_service=WalletService(repository, transactions),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApplicationContainer":
        """Container with its own engine, independent of the process-wide one."""
        return cls.from_engine(settings, build_engine(settings.database, debug=settings.debug))

    async def shutdown(self) -> None:
        if self.engine is _db_session._engine:
            await dispose_engine()
        else:
            await self.engine.dispose()


@lru_cache()
def get_container() -> ApplicationContainer:
    settings = get_settings()
    return ApplicationContainer.from_engine(settings, get_engine(), get_session_factory())


__all__ = ["ApplicationContainer", "get_container"]
