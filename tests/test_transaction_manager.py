"""Tests for TransactionManager: begin/commit/rollback bookkeeping."""
from __future__ import annotations

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from app.infrastructure.database.transaction import (
    NestedTransactionError,
    TransactionCommitError,
    TransactionManager,
    TransactionRollbackError,
    current_session,
)
from app.modules.wallets import WalletNotFoundError

from .support import create_wallet


class FakeSession:
    """Records the transaction calls made by the manager."""

    def __init__(self, *, fail_rollback: bool = False, fail_commit: bool = False) -> None:
        self.calls: list[object] = []
        self._fail_rollback = fail_rollback
        self._fail_commit = fail_commit

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.calls.append("close")

    async def connection(self, execution_options=None):
        self.calls.append(("begin", execution_options))

    async def rollback(self) -> None:
        self.calls.append("rollback")
        if self._fail_rollback:
            raise OperationalError("ROLLBACK", {}, Exception("connection lost"))

    async def commit(self) -> None:
        self.calls.append("commit")
        if self._fail_commit:
            raise OperationalError("COMMIT", {}, Exception("connection lost"))


def _manager(session: FakeSession, isolation_level: str | None = "READ COMMITTED") -> TransactionManager:
    return TransactionManager(lambda: session, isolation_level=isolation_level)


class TestTransactionLifecycle:
    def test_success_commits_once(self) -> None:
        session = FakeSession()

        async def work() -> str:
            assert current_session() is session
            return "done"

        result = asyncio.run(_manager(session).run_in_transaction(work))

        assert result == "done"
        assert session.calls == [("begin", {"isolation_level": "READ COMMITTED"}), "commit", "close"]
        assert current_session() is None

    def test_no_isolation_option_when_unset(self) -> None:
        session = FakeSession()

        async def work() -> None:
            return None

        asyncio.run(_manager(session, isolation_level=None).run_in_transaction(work))
        assert session.calls[0] == ("begin", None)

    def test_failure_rolls_back_and_reraises(self) -> None:
        session = FakeSession()

        async def work() -> None:
            raise WalletNotFoundError("missing")

        with pytest.raises(WalletNotFoundError):
            asyncio.run(_manager(session).run_in_transaction(work))

        assert session.calls[1:] == ["rollback", "close"]
        assert "commit" not in session.calls

    def test_rollback_failure_reports_both_errors(self) -> None:
        session = FakeSession(fail_rollback=True)
        original = WalletNotFoundError("missing")

        async def work() -> None:
            raise original

        with pytest.raises(TransactionRollbackError) as exc_info:
            asyncio.run(_manager(session).run_in_transaction(work))

        err = exc_info.value
        assert err.original is original
        assert isinstance(err.rollback_error, OperationalError)
        assert err.__cause__ is original
        assert "rollback failed" in str(err)
        assert "missing" in str(err)

    def test_commit_failure_is_surfaced(self) -> None:
        session = FakeSession(fail_commit=True)

        async def work() -> None:
            return None

        with pytest.raises(TransactionCommitError) as exc_info:
            asyncio.run(_manager(session).run_in_transaction(work))

        assert "commit transaction" in str(exc_info.value)
        assert session.calls.count("commit") == 1
        assert "rollback" not in session.calls

    def test_nested_transaction_is_refused(self) -> None:
        session = FakeSession()
        manager = _manager(session)

        async def inner() -> None:
            return None

        async def outer() -> None:
            await manager.run_in_transaction(inner)

        with pytest.raises(NestedTransactionError):
            asyncio.run(manager.run_in_transaction(outer))

        assert session.calls.count(("begin", {"isolation_level": "READ COMMITTED"})) == 1
        assert "rollback" in session.calls

    def test_cancellation_rolls_back(self) -> None:
        session = FakeSession()
        started = asyncio.Event()

        async def work() -> None:
            started.set()
            await asyncio.sleep(60)

        async def run() -> None:
            task = asyncio.create_task(_manager(session).run_in_transaction(work))
            await started.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(run())
        assert session.calls[1:] == ["rollback", "close"]


class TestTransactionsOnSqlite:
    def test_committed_work_is_visible(self, ledger) -> None:
        async def run() -> None:
            async with ledger() as container:
                wallet_id = await create_wallet(container, balance=42)
                assert await container.wallet_repository.get_balance(wallet_id) == 42

        asyncio.run(run())

    def test_failed_work_leaves_no_trace(self, ledger) -> None:
        async def run() -> None:
            async with ledger() as container:
                repository = container.wallet_repository
                wallet_id = await create_wallet(container, balance=10)

                async def work() -> None:
                    await repository.update_balance(wallet_id, 99)
                    raise RuntimeError("boom")

                with pytest.raises(RuntimeError):
                    await container.transactions.run_in_transaction(work)

                assert await repository.get_balance(wallet_id) == 10

        asyncio.run(run())

    def test_timeout_rolls_back_open_transaction(self, ledger) -> None:
        async def run() -> None:
            async with ledger() as container:
                repository = container.wallet_repository
                wallet_id = await create_wallet(container, balance=10)

                async def slow() -> None:
                    await repository.update_balance(wallet_id, 0)
                    await asyncio.sleep(60)

                with pytest.raises(asyncio.TimeoutError):
                    await asyncio.wait_for(container.transactions.run_in_transaction(slow), timeout=0.2)

                assert await repository.get_balance(wallet_id) == 10

        asyncio.run(run())
