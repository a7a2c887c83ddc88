"""
TaskBoard Backend — Board Route Handlers
==========================================

What:  Board CRUD, dashboard ordering and the board maintenance rebalance.
How:   Thin handlers over BoardService. ``PUT /boards/order`` is declared
       before ``/boards/{board_id}`` so "order" is never parsed as an id.

Move endpoints:
    PATCH /api/boards/{id}/move   {"index": 0}          one board to an index
    PUT   /api/boards/order       {"ids": [...]}        full dashboard order
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth import get_current_user_id
from taskboard.database import get_db_session
from taskboard.schemas.board import (
    BoardCreate,
    BoardDetailResponse,
    BoardResponse,
    BoardUpdate,
)
from taskboard.schemas.common import (
    ErrorResponse,
    MessageResponse,
    MoveRequest,
    MoveResponse,
    RebalanceResponse,
    ReorderRequest,
    ReorderResponse,
)
from taskboard.services.board_service import board_service

router = APIRouter(prefix="/api/boards", tags=["Boards"])

_NOT_FOUND = {404: {"description": "Board not found", "model": ErrorResponse}}
_ORDERING = {400: {"description": "Invalid move or order", "model": ErrorResponse}}


@router.get("", response_model=List[BoardResponse], summary="List the user's boards")
async def list_boards(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[BoardResponse]:
    return await board_service.list_boards(db, user_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=BoardResponse,
    summary="Create a board at the end of the dashboard",
)
async def create_board(
    data: BoardCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> BoardResponse:
    return await board_service.create_board(db, user_id, data)


@router.put(
    "/order",
    response_model=ReorderResponse,
    responses=_ORDERING,
    summary="Set the complete order of the user's boards",
)
async def reorder_boards(
    data: ReorderRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ReorderResponse:
    return await board_service.reorder_boards(db, user_id, data.ids)


@router.get(
    "/{board_id}",
    response_model=BoardDetailResponse,
    responses=_NOT_FOUND,
    summary="Get a board with its lists, cards and labels",
)
async def get_board(
    board_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> BoardDetailResponse:
    return await board_service.get_board(db, user_id, board_id)


@router.put(
    "/{board_id}",
    response_model=BoardResponse,
    responses=_NOT_FOUND,
    summary="Update title or background colour",
)
async def update_board(
    board_id: uuid.UUID,
    data: BoardUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> BoardResponse:
    return await board_service.update_board(db, user_id, board_id, data)


@router.delete(
    "/{board_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Delete a board with everything on it",
)
async def delete_board(
    board_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await board_service.delete_board(db, user_id, board_id)


@router.patch(
    "/{board_id}/move",
    response_model=MoveResponse,
    responses={**_NOT_FOUND, **_ORDERING},
    summary="Move a board to an index on the dashboard",
)
async def move_board(
    board_id: uuid.UUID,
    data: MoveRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MoveResponse:
    return await board_service.move_board(db, user_id, board_id, data.index)


@router.post(
    "/{board_id}/rebalance",
    response_model=RebalanceResponse,
    responses=_NOT_FOUND,
    summary="Respace the keys of the board's lists and cards",
)
async def rebalance_board(
    board_id: uuid.UUID,
    force: bool = Query(
        default=False,
        description="Rewrite every scope, not only those that ran out of room",
    ),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> RebalanceResponse:
    return await board_service.rebalance_board(db, user_id, board_id, force=force)
