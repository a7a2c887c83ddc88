"""
TaskBoard Backend — Board Service
===================================

What:  Business logic for boards: CRUD, board ordering on the dashboard and
       the maintenance rebalance of a board's lists and cards.
How:   Ownership is checked first (OwnershipService); ordering goes through
       the positioning service while the user's board scope is locked.

Ordering scopes touched here:
    ("boards", user_id)   the dashboard order of one user's boards
    ("lists", board_id)   the columns of one board      (rebalance only)
    ("cards", list_id)    the cards of one column        (rebalance only)
"""

import logging
import uuid
from typing import List, Set

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskboard.config import settings
from taskboard.exceptions import ConflictError, DatabaseError
from taskboard.models import Board, Card, TaskList
from taskboard.models.board import DEFAULT_BACKGROUND_COLOR
from taskboard.schemas.board import (
    BoardCreate,
    BoardDetailResponse,
    BoardResponse,
    BoardUpdate,
)
from taskboard.schemas.common import (
    MessageResponse,
    MoveResponse,
    RebalanceResponse,
    ReorderResponse,
)
from taskboard.services.ownership_service import ownership_service
from taskboard.services.positioning_service import positioning_service
from taskboard.services.scope_lock import run_locked
from taskboard.services.scope_snapshot import apply_positions, load_scope, lock_scope, snapshot

logger = logging.getLogger(__name__)


class _BoardListsChanged(Exception):
    """A list was added to the board after its list ids were read."""


class BoardService:
    """
    Responsibilities:
        - list_boards() / get_board(): reads, ordered by position
        - create_board(): append to the end of the user's boards
        - update_board() / delete_board()
        - move_board() / reorder_boards(): the two move shapes
        - rebalance_board(): respace lists and cards on demand
    """

    async def list_boards(self, db: AsyncSession, user_id: uuid.UUID) -> List[BoardResponse]:
        try:
            boards = await load_scope(db, Board, Board.user_id, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error listing boards: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve boards. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [BoardResponse.model_validate(board) for board in boards]

    async def create_board(
        self, db: AsyncSession, user_id: uuid.UUID, data: BoardCreate
    ) -> BoardResponse:
        async def create() -> BoardResponse:
            await ownership_service.user(db, user_id, for_update=True)
            siblings = await load_scope(db, Board, Board.user_id, user_id)
            board = Board(
                user_id=user_id,
                title=data.title,
                background_color=data.background_color or DEFAULT_BACKGROUND_COLOR,
                position=positioning_service.assign_append_key(user_id, snapshot(siblings)),
            )
            db.add(board)
            await db.flush()
            logger.info("Board created: %s (position=%s)", board.id, board.position)
            return BoardResponse.model_validate(board)

        return await run_locked(db, [("boards", user_id)], create)

    async def get_board(
        self, db: AsyncSession, user_id: uuid.UUID, board_id: uuid.UUID
    ) -> BoardDetailResponse:
        """
        Board with its lists, each list's cards (with labels) and the board's
        labels. Relationship ``order_by`` keeps lists and cards in position
        order.
        """
        board = await ownership_service.board(
            db,
            user_id,
            board_id,
            options=(
                selectinload(Board.lists)
                .selectinload(TaskList.cards)
                .selectinload(Card.labels),
                selectinload(Board.labels),
            ),
        )
        return BoardDetailResponse.model_validate(board)

    async def update_board(
        self, db: AsyncSession, user_id: uuid.UUID, board_id: uuid.UUID, data: BoardUpdate
    ) -> BoardResponse:
        board = await ownership_service.board(db, user_id, board_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(board, field, value)
        await db.flush()
        await db.refresh(board)
        return BoardResponse.model_validate(board)

    async def delete_board(
        self, db: AsyncSession, user_id: uuid.UUID, board_id: uuid.UUID
    ) -> MessageResponse:
        board = await ownership_service.board(db, user_id, board_id)
        await db.delete(board)
        await db.flush()
        logger.info("Board deleted: %s", board_id)
        return MessageResponse(message="Board deleted successfully")

    # ── Ordering ──────────────────────────────────────────────────────────

    async def move_board(
        self, db: AsyncSession, user_id: uuid.UUID, board_id: uuid.UUID, index: int
    ) -> MoveResponse:
        async def move() -> MoveResponse:
            await ownership_service.user(db, user_id, for_update=True)
            board = await ownership_service.board(db, user_id, board_id)
            siblings = await load_scope(db, Board, Board.user_id, user_id)
            placement = positioning_service.move_item(
                board.id, user_id, user_id, index, snapshot(siblings)
            )
            board.position = placement.key
            apply_positions(siblings, placement.rebalanced)
            await db.flush()
            return MoveResponse(
                id=board.id, position=placement.key, rebalanced=placement.did_rebalance
            )

        return await run_locked(db, [("boards", user_id)], move)

    async def reorder_boards(
        self, db: AsyncSession, user_id: uuid.UUID, ordered_ids: List[uuid.UUID]
    ) -> ReorderResponse:
        async def reorder() -> ReorderResponse:
            await ownership_service.user(db, user_id, for_update=True)
            boards = await load_scope(db, Board, Board.user_id, user_id)
            positions = positioning_service.reorder_scope(user_id, ordered_ids, snapshot(boards))
            apply_positions(boards, positions)
            await db.flush()
            return ReorderResponse(positions=positions)

        return await run_locked(db, [("boards", user_id)], reorder)

    async def rebalance_board(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        board_id: uuid.UUID,
        force: bool = False,
    ) -> RebalanceResponse:
        """
        Maintenance pass over one board.

        Respaces the board's lists and every list's cards, keeping their
        current order. Without ``force`` only scopes whose keys are out of
        order or too close to subdivide are rewritten.

        Card writers elsewhere only lock their list, so the pass holds the
        in-process lock and the row lock of every list it rewrites. A list
        created between reading the list ids and locking them restarts the
        pass.
        """
        await ownership_service.board(db, user_id, board_id)

        for _ in range(settings.retry_max_attempts):
            list_ids = (
                await db.execute(select(TaskList.id).where(TaskList.board_id == board_id))
            ).scalars().all()
            keys = [("lists", board_id)] + [("cards", list_id) for list_id in list_ids]
            try:
                return await run_locked(
                    db,
                    keys,
                    lambda: self._rebalance_locked(db, user_id, board_id, set(list_ids), force),
                )
            except _BoardListsChanged:
                await db.rollback()
                logger.info("Board %s gained lists during maintenance, retrying", board_id)

        raise ConflictError(
            message="Board is being changed by another request. Please try again.",
            context={"board_id": str(board_id)},
        )

    async def _rebalance_locked(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        board_id: uuid.UUID,
        locked_list_ids: Set[uuid.UUID],
        force: bool,
    ) -> RebalanceResponse:
        await ownership_service.board(db, user_id, board_id, for_update=True)
        locked = await lock_scope(db, TaskList, TaskList.board_id, board_id)
        if any(task_list.id not in locked_list_ids for task_list in locked):
            raise _BoardListsChanged()

        scopes = 0
        updated = 0

        lists = await load_scope(db, TaskList, TaskList.board_id, board_id)
        scope_items = [(board_id, lists)]
        for task_list in lists:
            cards = await load_scope(db, Card, Card.list_id, task_list.id)
            scope_items.append((task_list.id, cards))

        for scope_id, items in scope_items:
            siblings = snapshot(items)
            if not force and not positioning_service.needs_rebalance(siblings):
                continue
            positions = positioning_service.rebalance_scope(scope_id, siblings)
            updated += apply_positions(items, positions)
            scopes += 1

        await db.flush()
        logger.info(
            "Board %s maintenance: %d scopes rebalanced, %d items updated",
            board_id,
            scopes,
            updated,
        )
        return RebalanceResponse(scopes_rebalanced=scopes, items_updated=updated)


board_service = BoardService()
