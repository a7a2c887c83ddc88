"""
TaskBoard Backend — List Route Handlers
=========================================

What:  Lists (columns) of a board and their ordering.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth import get_current_user_id
from taskboard.database import get_db_session
from taskboard.schemas.common import (
    ErrorResponse,
    MessageResponse,
    MoveRequest,
    MoveResponse,
    ReorderRequest,
    ReorderResponse,
)
from taskboard.schemas.task_list import ListCreate, ListResponse, ListUpdate
from taskboard.services.list_service import list_service

router = APIRouter(prefix="/api", tags=["Lists"])

_NOT_FOUND = {404: {"description": "List or board not found", "model": ErrorResponse}}
_ORDERING = {400: {"description": "Invalid move or order", "model": ErrorResponse}}


@router.post(
    "/boards/{board_id}/lists",
    status_code=status.HTTP_201_CREATED,
    response_model=ListResponse,
    responses=_NOT_FOUND,
    summary="Create a list at the end of a board",
)
async def create_list(
    board_id: uuid.UUID,
    data: ListCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ListResponse:
    return await list_service.create_list(db, user_id, board_id, data)


@router.put(
    "/boards/{board_id}/lists/order",
    response_model=ReorderResponse,
    responses={**_NOT_FOUND, **_ORDERING},
    summary="Set the complete order of a board's lists",
)
async def reorder_lists(
    board_id: uuid.UUID,
    data: ReorderRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ReorderResponse:
    return await list_service.reorder_lists(db, user_id, board_id, data.ids)


@router.put(
    "/lists/{list_id}",
    response_model=ListResponse,
    responses=_NOT_FOUND,
    summary="Rename a list",
)
async def update_list(
    list_id: uuid.UUID,
    data: ListUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ListResponse:
    return await list_service.update_list(db, user_id, list_id, data)


@router.delete(
    "/lists/{list_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Delete a list and its cards",
)
async def delete_list(
    list_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await list_service.delete_list(db, user_id, list_id)


@router.patch(
    "/lists/{list_id}/move",
    response_model=MoveResponse,
    responses={**_NOT_FOUND, **_ORDERING},
    summary="Move a list to an index on its board",
)
async def move_list(
    list_id: uuid.UUID,
    data: MoveRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MoveResponse:
    return await list_service.move_list(db, user_id, list_id, data.index)
