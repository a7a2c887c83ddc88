"""
TaskBoard Backend — Scope Critical Sections
=============================================

What:  One asyncio.Lock per sibling scope so that "read sibling keys →
       compute new key → write" runs atomically against other writers of
       the same scope inside this process.
How:   Scopes are keyed by tuples such as ("cards", list_id). ``hold()``
       takes several keys at once, always in sorted order, so a card moved
       between two lists cannot deadlock against a move in the opposite
       direction. Entries are removed once no coroutine holds or waits on
       them, so the registry does not grow with every scope ever touched.

Across processes the services additionally lock the parent row with
SELECT ... FOR UPDATE inside the request transaction.

Thread Safety:
    Safe for a single-process async server (uvicorn). Each worker process
    has its own registry; the row locks cover the multi-worker case.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Dict, Hashable, Sequence, Tuple, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from taskboard.config import settings

logger = logging.getLogger(__name__)

ScopeKey = Tuple[str, Hashable]
T = TypeVar("T")

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


class ScopeLockRegistry:
    """Per-scope asyncio locks with reference counting."""

    def __init__(self) -> None:
        self._locks: Dict[ScopeKey, asyncio.Lock] = {}
        self._users: Dict[ScopeKey, int] = {}

    def _checkout(self, key: ScopeKey) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        return lock

    def _release(self, key: ScopeKey) -> None:
        remaining = self._users[key] - 1
        if remaining:
            self._users[key] = remaining
        else:
            del self._users[key]
            del self._locks[key]

    @asynccontextmanager
    async def hold(self, *keys: ScopeKey) -> AsyncIterator[None]:
        """
        Hold the locks of every given scope for the duration of the block.

        Usage:
            async with scope_locks.hold(("cards", src_list), ("cards", dst_list)):
                ...
        """
        ordered = sorted(set(keys), key=lambda k: (k[0], str(k[1])))
        acquired = []
        try:
            for key in ordered:
                lock = self._checkout(key)
                try:
                    await lock.acquire()
                except BaseException:
                    self._release(key)
                    raise
                acquired.append((key, lock))
            yield
        finally:
            for key, lock in reversed(acquired):
                lock.release()
                self._release(key)

    def is_locked(self, key: ScopeKey) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)


scope_locks = ScopeLockRegistry()


def is_transient_db_error(exc: BaseException) -> bool:
    """
    True for failures that succeed when the transaction is simply run again.

    asyncpg and psycopg report deadlocks and serialization failures as a
    plain DBAPIError; the SQLSTATE on the driver exception tells them apart.
    """
    if isinstance(exc, OperationalError):
        return True
    if isinstance(exc, DBAPIError):
        orig = exc.orig
        sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        return sqlstate in RETRYABLE_SQLSTATES
    return False


async def run_locked(
    db: AsyncSession,
    keys: Sequence[ScopeKey],
    operation: Callable[[], Awaitable[T]],
) -> T:
    """
    Run ``operation`` inside the scopes' critical section and commit before
    the locks are released.

    What:    The read → compute → write sequence of a move or reorder.
    How:     Locks the scopes, awaits the operation (which loads its own
             snapshot and flushes its writes), then commits. A transient
             database failure (see is_transient_db_error) rolls back and
             retries the whole unit with exponential backoff; everything else
             propagates.

    The operation must load every ORM object it touches itself, since a
    rollback expires instances loaded before the retry.
    """
    retrying = AsyncRetrying(
        retry=retry_if_exception(is_transient_db_error),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential(multiplier=settings.retry_min_wait, max=settings.retry_max_wait)
        + wait_random(0, settings.retry_min_wait),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            async with scope_locks.hold(*keys):
                try:
                    result = await operation()
                    await db.commit()
                except DBAPIError:
                    await db.rollback()
                    raise
    return result
