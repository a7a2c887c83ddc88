"""
TaskBoard Backend — Checklist Route Handlers
==============================================

What:  Checklists on cards and their ordered items.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth import get_current_user_id
from taskboard.database import get_db_session
from taskboard.schemas.checklist import (
    ChecklistCreate,
    ChecklistItemCreate,
    ChecklistItemResponse,
    ChecklistItemUpdate,
    ChecklistResponse,
)
from taskboard.schemas.common import (
    ErrorResponse,
    MessageResponse,
    MoveRequest,
    MoveResponse,
    ReorderRequest,
    ReorderResponse,
)
from taskboard.services.checklist_service import checklist_service

router = APIRouter(prefix="/api", tags=["Checklists"])

_NOT_FOUND = {404: {"description": "Checklist, item or card not found", "model": ErrorResponse}}
_ORDERING = {400: {"description": "Invalid move or order", "model": ErrorResponse}}


@router.post(
    "/cards/{card_id}/checklists",
    status_code=status.HTTP_201_CREATED,
    response_model=ChecklistResponse,
    responses=_NOT_FOUND,
    summary="Create a checklist on a card",
)
async def create_checklist(
    card_id: uuid.UUID,
    data: ChecklistCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ChecklistResponse:
    return await checklist_service.create_checklist(db, user_id, card_id, data)


@router.delete(
    "/checklists/{checklist_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
)
async def delete_checklist(
    checklist_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await checklist_service.delete_checklist(db, user_id, checklist_id)


@router.post(
    "/checklists/{checklist_id}/items",
    status_code=status.HTTP_201_CREATED,
    response_model=ChecklistItemResponse,
    responses=_NOT_FOUND,
    summary="Add an item at the end of a checklist",
)
async def create_item(
    checklist_id: uuid.UUID,
    data: ChecklistItemCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ChecklistItemResponse:
    return await checklist_service.create_item(db, user_id, checklist_id, data)


@router.put(
    "/checklists/{checklist_id}/items/order",
    response_model=ReorderResponse,
    responses={**_NOT_FOUND, **_ORDERING},
    summary="Set the complete order of a checklist's items",
)
async def reorder_items(
    checklist_id: uuid.UUID,
    data: ReorderRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ReorderResponse:
    return await checklist_service.reorder_items(db, user_id, checklist_id, data.ids)


@router.put(
    "/checklist-items/{item_id}",
    response_model=ChecklistItemResponse,
    responses=_NOT_FOUND,
    summary="Edit an item or tick it off",
)
async def update_item(
    item_id: uuid.UUID,
    data: ChecklistItemUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ChecklistItemResponse:
    return await checklist_service.update_item(db, user_id, item_id, data)


@router.delete(
    "/checklist-items/{item_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
)
async def delete_item(
    item_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await checklist_service.delete_item(db, user_id, item_id)


@router.patch(
    "/checklist-items/{item_id}/move",
    response_model=MoveResponse,
    responses={**_NOT_FOUND, **_ORDERING},
    summary="Move an item to an index in its checklist",
)
async def move_item(
    item_id: uuid.UUID,
    data: MoveRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MoveResponse:
    return await checklist_service.move_item(db, user_id, item_id, data.index)
