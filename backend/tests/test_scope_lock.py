"""
TaskBoard Backend — Scope Lock Tests
======================================

What we test:
    ✅ writers of one scope are serialized, other scopes run concurrently
    ✅ multi-scope holds cannot deadlock in opposite orders
    ✅ registry entries disappear once unused
    ✅ run_locked commits inside the lock and retries transient DB failures
    ✅ deadlocks and serialization failures reported as DBAPIError are retried
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import DBAPIError, OperationalError

from taskboard.config import settings
from taskboard.exceptions import IndexOutOfBoundsError
from taskboard.services.scope_lock import (
    ScopeLockRegistry,
    is_transient_db_error,
    run_locked,
    scope_locks,
)


class DriverError(Exception):
    """Stands in for a driver exception carrying a SQLSTATE, like asyncpg's."""

    def __init__(self, message, sqlstate):
        super().__init__(message)
        self.sqlstate = sqlstate


def transient_failure() -> OperationalError:
    return OperationalError("UPDATE cards ...", {}, Exception("deadlock detected"))


def driver_failure(sqlstate: str) -> DBAPIError:
    # asyncpg errors reach the application as a plain DBAPIError
    return DBAPIError.instance(
        "UPDATE cards ...", {}, DriverError("driver failure", sqlstate), Exception
    )


class TestScopeLockRegistry:

    @pytest.mark.asyncio
    async def test_same_scope_is_serialized(self):
        registry = ScopeLockRegistry()
        events = []

        async def writer(name):
            async with registry.hold(("cards", "list-1")):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        await asyncio.gather(writer("first"), writer("second"))

        assert events in (
            ["first-start", "first-end", "second-start", "second-end"],
            ["second-start", "second-end", "first-start", "first-end"],
        )

    @pytest.mark.asyncio
    async def test_different_scopes_overlap(self):
        registry = ScopeLockRegistry()
        inside = asyncio.Event()

        async def holder():
            async with registry.hold(("cards", "list-1")):
                inside.set()
                await asyncio.sleep(0.05)

        task = asyncio.create_task(holder())
        await inside.wait()
        async with registry.hold(("cards", "list-2")):
            assert registry.is_locked(("cards", "list-1"))
        await task

    @pytest.mark.asyncio
    async def test_opposite_acquisition_orders_do_not_deadlock(self):
        registry = ScopeLockRegistry()

        async def move(src, dst):
            for _ in range(20):
                async with registry.hold(("cards", src), ("cards", dst)):
                    await asyncio.sleep(0)

        await asyncio.wait_for(
            asyncio.gather(move("A", "B"), move("B", "A")),
            timeout=5,
        )

    @pytest.mark.asyncio
    async def test_entries_released_after_use(self):
        registry = ScopeLockRegistry()
        async with registry.hold(("lists", "board-1"), ("lists", "board-1")):
            assert len(registry) == 1
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_lock_released_when_block_raises(self):
        registry = ScopeLockRegistry()
        with pytest.raises(RuntimeError):
            async with registry.hold(("cards", "list-1")):
                raise RuntimeError("boom")
        assert not registry.is_locked(("cards", "list-1"))
        assert len(registry) == 0


class TestRunLocked:

    @pytest.mark.asyncio
    async def test_commits_while_holding_the_lock(self, mock_db_session):
        key = ("cards", "list-commit")
        seen = {}

        async def on_commit():
            seen["locked_at_commit"] = scope_locks.is_locked(key)

        mock_db_session.commit = AsyncMock(side_effect=on_commit)
        operation = AsyncMock(return_value="moved")

        result = await run_locked(mock_db_session, [key], operation)

        assert result == "moved"
        assert seen["locked_at_commit"] is True
        assert not scope_locks.is_locked(key)

    @pytest.mark.asyncio
    async def test_transient_failure_is_retried(self, mock_db_session):
        operation = AsyncMock(side_effect=[transient_failure(), "moved"])

        result = await run_locked(mock_db_session, [("cards", "list-retry")], operation)

        assert result == "moved"
        assert operation.await_count == 2
        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, mock_db_session):
        operation = AsyncMock(side_effect=transient_failure())

        with pytest.raises(OperationalError):
            await run_locked(mock_db_session, [("cards", "list-fail")], operation)

        assert operation.await_count == settings.retry_max_attempts
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ordering_errors_are_not_retried(self, mock_db_session):
        operation = AsyncMock(side_effect=IndexOutOfBoundsError(9, 2))

        with pytest.raises(IndexOutOfBoundsError):
            await run_locked(mock_db_session, [("cards", "list-bad")], operation)

        assert operation.await_count == 1
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_driver_deadlock_is_retried(self, mock_db_session):
        deadlock = driver_failure("40P01")
        assert type(deadlock) is DBAPIError
        operation = AsyncMock(side_effect=[deadlock, "moved"])

        result = await run_locked(mock_db_session, [("cards", "list-deadlock")], operation)

        assert result == "moved"
        assert operation.await_count == 2
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_driver_serialization_failure_is_retried(self, mock_db_session):
        operation = AsyncMock(side_effect=[driver_failure("40001"), driver_failure("40001"), "moved"])

        result = await run_locked(mock_db_session, [("cards", "list-serial")], operation)

        assert result == "moved"
        assert operation.await_count == 3

    @pytest.mark.asyncio
    async def test_other_driver_errors_are_not_retried(self, mock_db_session):
        operation = AsyncMock(side_effect=driver_failure("23505"))

        with pytest.raises(DBAPIError):
            await run_locked(mock_db_session, [("cards", "list-unique")], operation)

        assert operation.await_count == 1
        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()


class TestIsTransientDbError:

    def test_operational_error(self):
        assert is_transient_db_error(transient_failure())

    def test_sqlstates(self):
        assert is_transient_db_error(driver_failure("40P01"))
        assert is_transient_db_error(driver_failure("40001"))
        assert not is_transient_db_error(driver_failure("23505"))

    def test_psycopg2_pgcode(self):
        orig = Exception("could not serialize access")
        orig.pgcode = "40001"
        assert is_transient_db_error(DBAPIError("UPDATE lists ...", {}, orig))

    def test_unrelated_exception(self):
        assert not is_transient_db_error(IndexOutOfBoundsError(3, 1))
