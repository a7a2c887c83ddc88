"""
TaskBoard Backend — Label Route Handlers
==========================================

What:  Board labels and attaching them to cards.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth import get_current_user_id
from taskboard.database import get_db_session
from taskboard.schemas.common import ErrorResponse, MessageResponse
from taskboard.schemas.label import LabelCreate, LabelResponse, LabelUpdate
from taskboard.services.label_service import label_service

router = APIRouter(prefix="/api", tags=["Labels"])

_NOT_FOUND = {404: {"description": "Label, card or board not found", "model": ErrorResponse}}


@router.get(
    "/boards/{board_id}/labels",
    response_model=List[LabelResponse],
    responses=_NOT_FOUND,
    summary="List a board's labels",
)
async def list_labels(
    board_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[LabelResponse]:
    return await label_service.list_labels(db, user_id, board_id)


@router.post(
    "/boards/{board_id}/labels",
    status_code=status.HTTP_201_CREATED,
    response_model=LabelResponse,
    responses=_NOT_FOUND,
    summary="Create a label on a board",
)
async def create_label(
    board_id: uuid.UUID,
    data: LabelCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> LabelResponse:
    return await label_service.create_label(db, user_id, board_id, data)


@router.put("/labels/{label_id}", response_model=LabelResponse, responses=_NOT_FOUND)
async def update_label(
    label_id: uuid.UUID,
    data: LabelUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> LabelResponse:
    return await label_service.update_label(db, user_id, label_id, data)


@router.delete("/labels/{label_id}", response_model=MessageResponse, responses=_NOT_FOUND)
async def delete_label(
    label_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await label_service.delete_label(db, user_id, label_id)


@router.post(
    "/cards/{card_id}/labels/{label_id}",
    response_model=MessageResponse,
    responses={
        **_NOT_FOUND,
        400: {"description": "Label belongs to another board", "model": ErrorResponse},
    },
    summary="Attach a label to a card",
)
async def attach_label(
    card_id: uuid.UUID,
    label_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await label_service.attach_label(db, user_id, card_id, label_id)


@router.delete(
    "/cards/{card_id}/labels/{label_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Detach a label from a card",
)
async def detach_label(
    card_id: uuid.UUID,
    label_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await label_service.detach_label(db, user_id, card_id, label_id)
