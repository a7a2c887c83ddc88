"""
TaskBoard Backend — Ownership Service Unit Tests
==================================================

What:  Lookups through the containment chain with a mocked session.

What we test:
    ✅ found target is returned
    ✅ missing or foreign target raises NotFoundError (never a 403)
    ✅ the query filters on the owning user through the chain
    ✅ for_update adds a row lock on the target table only
    ✅ sibling rows are locked in id order
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from taskboard.exceptions import NotFoundError
from taskboard.models import TaskList
from taskboard.services.ownership_service import OwnershipService
from taskboard.services.scope_snapshot import lock_scope_statement


def compiled(mock_db_session) -> str:
    stmt = mock_db_session.execute.call_args[0][0]
    return str(stmt.compile(dialect=postgresql.dialect()))


def returns(mock_db_session, target):
    result = MagicMock()
    result.scalar_one_or_none.return_value = target
    mock_db_session.execute.return_value = result


class TestOwnershipLookups:

    def setup_method(self):
        self.service = OwnershipService()
        self.user_id = uuid4()

    @pytest.mark.asyncio
    async def test_board_found(self, mock_db_session):
        board = MagicMock()
        returns(mock_db_session, board)

        result = await self.service.board(mock_db_session, self.user_id, uuid4())

        assert result is board
        assert "boards.user_id" in compiled(mock_db_session)

    @pytest.mark.asyncio
    async def test_board_not_found(self, mock_db_session):
        returns(mock_db_session, None)
        board_id = uuid4()

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.board(mock_db_session, self.user_id, board_id)

        assert exc_info.value.resource == "Board"
        assert str(board_id) in exc_info.value.message

    @pytest.mark.asyncio
    async def test_card_lookup_joins_up_to_board(self, mock_db_session):
        returns(mock_db_session, MagicMock())

        await self.service.card(mock_db_session, self.user_id, uuid4())

        sql = compiled(mock_db_session)
        assert "JOIN lists" in sql
        assert "JOIN boards" in sql
        assert "boards.user_id" in sql

    @pytest.mark.asyncio
    async def test_checklist_item_chain(self, mock_db_session):
        returns(mock_db_session, None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.checklist_item(mock_db_session, self.user_id, uuid4())

        sql = compiled(mock_db_session)
        for table in ("checklists", "cards", "lists", "boards"):
            assert f"JOIN {table}" in sql
        assert exc_info.value.resource == "Checklist item"

    @pytest.mark.asyncio
    async def test_for_update_locks_target_row(self, mock_db_session):
        returns(mock_db_session, MagicMock())

        await self.service.task_list(mock_db_session, self.user_id, uuid4(), for_update=True)

        assert "FOR UPDATE OF lists" in compiled(mock_db_session)

    @pytest.mark.asyncio
    async def test_plain_lookup_takes_no_lock(self, mock_db_session):
        returns(mock_db_session, MagicMock())

        await self.service.label(mock_db_session, self.user_id, uuid4())

        assert "FOR UPDATE" not in compiled(mock_db_session)

    @pytest.mark.asyncio
    async def test_unknown_user(self, mock_db_session):
        returns(mock_db_session, None)

        with pytest.raises(NotFoundError):
            await self.service.user(mock_db_session, self.user_id)


class TestScopeRowLocks:

    def test_lists_of_a_board_locked_in_id_order(self):
        stmt = lock_scope_statement(TaskList, TaskList.board_id, uuid4())
        sql = str(stmt.compile(dialect=postgresql.dialect()))

        assert "WHERE lists.board_id = " in sql
        assert "ORDER BY lists.id" in sql
        assert sql.rstrip().endswith("FOR UPDATE")
