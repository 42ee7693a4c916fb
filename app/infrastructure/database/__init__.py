"""Database infrastructure helpers (engine, sessions, transactions, migrations)."""

from .base import Base
from .session import (
    build_engine,
    dispose_engine,
    get_engine,
    get_session_factory,
    init_db,
    isolation_level_for,
    make_session_factory,
)
from .transaction import (
    NestedTransactionError,
    TransactionCommitError,
    TransactionError,
    TransactionManager,
    TransactionRequiredError,
    TransactionRollbackError,
    current_session,
)

__all__ = [
    "Base",
    "NestedTransactionError",
    "TransactionCommitError",
    "TransactionError",
    "TransactionManager",
    "TransactionRequiredError",
    "TransactionRollbackError",
    "build_engine",
    "current_session",
    "dispose_engine",
    "get_engine",
    "get_session_factory",
    "init_db",
    "isolation_level_for",
    "make_session_factory",
]
