"""
TaskBoard Backend — List Service
==================================

What:  Business logic for the lists (columns) of a board.
How:   A list's ordering scope is its board. Creation appends after the
       board's last list; moves either land at an index or apply a complete
       client-side order. Deleting a list leaves a gap in the board's keys,
       which later inserts simply reuse.
"""

import logging
import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models import TaskList
from taskboard.schemas.common import MessageResponse, MoveResponse, ReorderResponse
from taskboard.schemas.task_list import ListCreate, ListResponse, ListUpdate
from taskboard.services.ownership_service import ownership_service
from taskboard.services.positioning_service import positioning_service
from taskboard.services.scope_lock import run_locked
from taskboard.services.scope_snapshot import apply_positions, load_scope, snapshot

logger = logging.getLogger(__name__)


class ListService:

    async def create_list(
        self, db: AsyncSession, user_id: uuid.UUID, board_id: uuid.UUID, data: ListCreate
    ) -> ListResponse:
        await ownership_service.board(db, user_id, board_id)

        async def create() -> ListResponse:
            await ownership_service.board(db, user_id, board_id, for_update=True)
            siblings = await load_scope(db, TaskList, TaskList.board_id, board_id)
            task_list = TaskList(
                board_id=board_id,
                title=data.title,
                position=positioning_service.assign_append_key(board_id, snapshot(siblings)),
            )
            db.add(task_list)
            await db.flush()
            logger.info("List created: %s on board %s", task_list.id, board_id)
            return ListResponse.model_validate(task_list)

        return await run_locked(db, [("lists", board_id)], create)

    async def update_list(
        self, db: AsyncSession, user_id: uuid.UUID, list_id: uuid.UUID, data: ListUpdate
    ) -> ListResponse:
        task_list = await ownership_service.task_list(db, user_id, list_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(task_list, field, value)
        await db.flush()
        return ListResponse.model_validate(task_list)

    async def delete_list(
        self, db: AsyncSession, user_id: uuid.UUID, list_id: uuid.UUID
    ) -> MessageResponse:
        task_list = await ownership_service.task_list(db, user_id, list_id)
        await db.delete(task_list)
        await db.flush()
        logger.info("List deleted: %s", list_id)
        return MessageResponse(message="List deleted successfully")

    async def move_list(
        self, db: AsyncSession, user_id: uuid.UUID, list_id: uuid.UUID, index: int
    ) -> MoveResponse:
        """Move a list to ``index`` among the other lists of its board."""
        board_id = (await ownership_service.task_list(db, user_id, list_id)).board_id

        async def move() -> MoveResponse:
            await ownership_service.board(db, user_id, board_id, for_update=True)
            task_list = await ownership_service.task_list(db, user_id, list_id)
            siblings = await load_scope(db, TaskList, TaskList.board_id, board_id)
            placement = positioning_service.move_item(
                list_id, board_id, board_id, index, snapshot(siblings)
            )
            task_list.position = placement.key
            apply_positions(siblings, placement.rebalanced)
            await db.flush()
            return MoveResponse(
                id=list_id, position=placement.key, rebalanced=placement.did_rebalance
            )

        return await run_locked(db, [("lists", board_id)], move)

    async def reorder_lists(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        board_id: uuid.UUID,
        ordered_ids: List[uuid.UUID],
    ) -> ReorderResponse:
        await ownership_service.board(db, user_id, board_id)

        async def reorder() -> ReorderResponse:
            await ownership_service.board(db, user_id, board_id, for_update=True)
            lists = await load_scope(db, TaskList, TaskList.board_id, board_id)
            positions = positioning_service.reorder_scope(board_id, ordered_ids, snapshot(lists))
            apply_positions(lists, positions)
            await db.flush()
            return ReorderResponse(positions=positions)

        return await run_locked(db, [("lists", board_id)], reorder)


list_service = ListService()
