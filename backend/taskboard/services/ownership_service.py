"""
TaskBoard Backend — Ownership-Chain Authorization
===================================================

What:  Resolves a target (board, list, card, label, checklist, checklist item)
       for the acting user, or fails with NotFoundError.
How:   One query per lookup joins the containment chain up to the board and
       filters on ``Board.user_id``:

           ChecklistItem → Checklist → Card → TaskList → Board → user_id

       A target that does not exist and a target owned by someone else
       produce the same 404, so the API never confirms that another user's
       resource exists.
Who:   Every service runs this before reading or mutating anything, and
       before any call into the positioning service.

With ``for_update=True`` the target row is locked (SELECT ... FOR UPDATE OF
<target>) until the transaction ends and reloaded over any stale copy in the
session; SQLite ignores the lock clause.
"""

import logging
import uuid
from typing import Any, Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.exceptions import NotFoundError
from taskboard.models import Board, Card, Checklist, ChecklistItem, Label, TaskList, User

logger = logging.getLogger(__name__)


class OwnershipService:
    """Loads targets through their ownership chain."""

    async def _one(
        self,
        db: AsyncSession,
        stmt: Select,
        model: Any,
        resource: str,
        resource_id: uuid.UUID,
        user_id: uuid.UUID,
        for_update: bool,
        options: Sequence[Any],
    ) -> Any:
        if options:
            stmt = stmt.options(*options)
        if for_update:
            stmt = stmt.with_for_update(of=model).execution_options(
                populate_existing=True
            )
        result = await db.execute(stmt)
        target = result.scalar_one_or_none()
        if target is None:
            logger.debug(
                "%s %s not reachable for user %s", resource, resource_id, user_id
            )
            raise NotFoundError(resource=resource, resource_id=str(resource_id))
        return target

    async def user(
        self, db: AsyncSession, user_id: uuid.UUID, for_update: bool = False
    ) -> User:
        stmt = select(User).where(User.id == user_id)
        return await self._one(db, stmt, User, "User", user_id, user_id, for_update, ())

    async def board(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        board_id: uuid.UUID,
        for_update: bool = False,
        options: Sequence[Any] = (),
    ) -> Board:
        stmt = select(Board).where(Board.id == board_id, Board.user_id == user_id)
        return await self._one(db, stmt, Board, "Board", board_id, user_id, for_update, options)

    async def task_list(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        list_id: uuid.UUID,
        for_update: bool = False,
        options: Sequence[Any] = (),
    ) -> TaskList:
        stmt = (
            select(TaskList)
            .join(Board, TaskList.board_id == Board.id)
            .where(TaskList.id == list_id, Board.user_id == user_id)
        )
        return await self._one(db, stmt, TaskList, "List", list_id, user_id, for_update, options)

    async def card(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        card_id: uuid.UUID,
        for_update: bool = False,
        options: Sequence[Any] = (),
    ) -> Card:
        stmt = (
            select(Card)
            .join(TaskList, Card.list_id == TaskList.id)
            .join(Board, TaskList.board_id == Board.id)
            .where(Card.id == card_id, Board.user_id == user_id)
        )
        return await self._one(db, stmt, Card, "Card", card_id, user_id, for_update, options)

    async def label(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        label_id: uuid.UUID,
        for_update: bool = False,
        options: Sequence[Any] = (),
    ) -> Label:
        stmt = (
            select(Label)
            .join(Board, Label.board_id == Board.id)
            .where(Label.id == label_id, Board.user_id == user_id)
        )
        return await self._one(db, stmt, Label, "Label", label_id, user_id, for_update, options)

    async def checklist(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        checklist_id: uuid.UUID,
        for_update: bool = False,
        options: Sequence[Any] = (),
    ) -> Checklist:
        stmt = (
            select(Checklist)
            .join(Card, Checklist.card_id == Card.id)
            .join(TaskList, Card.list_id == TaskList.id)
            .join(Board, TaskList.board_id == Board.id)
            .where(Checklist.id == checklist_id, Board.user_id == user_id)
        )
        return await self._one(
            db, stmt, Checklist, "Checklist", checklist_id, user_id, for_update, options
        )

    async def checklist_item(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        for_update: bool = False,
        options: Sequence[Any] = (),
    ) -> ChecklistItem:
        stmt = (
            select(ChecklistItem)
            .join(Checklist, ChecklistItem.checklist_id == Checklist.id)
            .join(Card, Checklist.card_id == Card.id)
            .join(TaskList, Card.list_id == TaskList.id)
            .join(Board, TaskList.board_id == Board.id)
            .where(ChecklistItem.id == item_id, Board.user_id == user_id)
        )
        return await self._one(
            db, stmt, ChecklistItem, "Checklist item", item_id, user_id, for_update, options
        )


ownership_service = OwnershipService()
