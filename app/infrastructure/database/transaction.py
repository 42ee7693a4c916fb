"""Transaction manager running units of work inside one database transaction.

The active session is bound to a ``ContextVar`` for the duration of the unit
of work, so repositories called from inside it pick up the transaction
without it being threaded through every call.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

T = TypeVar("T")

_current_session: ContextVar[AsyncSession | None] = ContextVar("wallet_tx_session", default=None)


def current_session() -> AsyncSession | None:
    """Session of the transaction bound to the current context, if any."""
    return _current_session.get()


class TransactionError(Exception):
    """Base class for transaction lifecycle failures."""


class NestedTransactionError(TransactionError):
    """Raised when a transaction is started inside another one."""


class TransactionRequiredError(TransactionError):
    """Raised when an operation that needs an active transaction runs without one."""


class TransactionCommitError(TransactionError):
    """Raised when the final commit fails; the work must be assumed lost."""


class TransactionRollbackError(TransactionError):
    """Raised when rolling back after a failed unit of work fails too."""

    def __init__(self, rollback_error: BaseException, original: BaseException) -> None:
        super().__init__(f"rollback failed: {rollback_error} (original: {original})")
        self.rollback_error = rollback_error
        self.original = original


class TransactionManager:
    """Runs a unit of work in a single transaction, committing or rolling back."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        isolation_level: str | None = "READ COMMITTED",
    ) -> None:
        self._session_factory = session_factory
        self._isolation_level = isolation_level

    async def run_in_transaction(self, unit_of_work: Callable[[], Awaitable[T]]) -> T:
        if _current_session.get() is not None:
            raise NestedTransactionError("a transaction is already active in this context")

        async with self._session_factory() as session:
            await self._begin(session)

            token = _current_session.set(session)
            try:
                result = await unit_of_work()
            except BaseException as exc:
                # cancellation lands here too: never leave the transaction open
                try:
                    await session.rollback()
                except Exception as rollback_exc:
                    logger.error("rollback failed: %s (original: %s)", rollback_exc, exc)
                    raise TransactionRollbackError(rollback_exc, exc) from exc
                raise
            finally:
                _current_session.reset(token)

            try:
                await session.commit()
            except SQLAlchemyError as exc:
                raise TransactionCommitError(f"commit transaction: {exc}") from exc
            return result

    async def _begin(self, session: AsyncSession) -> None:
        options = {"isolation_level": self._isolation_level} if self._isolation_level else None
        try:
            await session.connection(execution_options=options)
        except SQLAlchemyError as exc:
            raise TransactionError(f"begin transaction: {exc}") from exc


__all__ = [
    "NestedTransactionError",
    "TransactionCommitError",
    "TransactionError",
    "TransactionManager",
    "TransactionRequiredError",
    "TransactionRollbackError",
    "current_session",
]
