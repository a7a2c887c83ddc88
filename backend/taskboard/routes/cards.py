"""
TaskBoard Backend — Card Route Handlers
=========================================

What:  Cards of a list, the card detail modal and card moves.

Move endpoints:
    PATCH /api/cards/{id}/move          {"list_id": "...", "index": 3}
                                        list_id omitted = same list
    PUT   /api/lists/{list_id}/cards/order   {"ids": [...]}
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth import get_current_user_id
from taskboard.database import get_db_session
from taskboard.schemas.card import (
    CardCreate,
    CardDetailResponse,
    CardMoveRequest,
    CardResponse,
    CardUpdate,
)
from taskboard.schemas.common import (
    ErrorResponse,
    MessageResponse,
    MoveResponse,
    ReorderRequest,
    ReorderResponse,
)
from taskboard.services.card_service import card_service

router = APIRouter(prefix="/api", tags=["Cards"])

_NOT_FOUND = {404: {"description": "Card or list not found", "model": ErrorResponse}}
_ORDERING = {400: {"description": "Invalid move or order", "model": ErrorResponse}}


@router.post(
    "/lists/{list_id}/cards",
    status_code=status.HTTP_201_CREATED,
    response_model=CardResponse,
    responses=_NOT_FOUND,
    summary="Create a card at the end of a list",
)
async def create_card(
    list_id: uuid.UUID,
    data: CardCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> CardResponse:
    return await card_service.create_card(db, user_id, list_id, data)


@router.put(
    "/lists/{list_id}/cards/order",
    response_model=ReorderResponse,
    responses={**_NOT_FOUND, **_ORDERING},
    summary="Set the complete order of a list's cards",
)
async def reorder_cards(
    list_id: uuid.UUID,
    data: ReorderRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ReorderResponse:
    return await card_service.reorder_cards(db, user_id, list_id, data.ids)


@router.get(
    "/cards/{card_id}",
    response_model=CardDetailResponse,
    responses=_NOT_FOUND,
    summary="Get a card with labels and checklists",
)
async def get_card(
    card_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> CardDetailResponse:
    return await card_service.get_card(db, user_id, card_id)


@router.put(
    "/cards/{card_id}",
    response_model=CardResponse,
    responses=_NOT_FOUND,
    summary="Update title, description or due date",
)
async def update_card(
    card_id: uuid.UUID,
    data: CardUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> CardResponse:
    return await card_service.update_card(db, user_id, card_id, data)


@router.delete(
    "/cards/{card_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Delete a card",
)
async def delete_card(
    card_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await card_service.delete_card(db, user_id, card_id)


@router.patch(
    "/cards/{card_id}/move",
    response_model=MoveResponse,
    responses={**_NOT_FOUND, **_ORDERING},
    summary="Move a card within its list or to another list",
)
async def move_card(
    card_id: uuid.UUID,
    data: CardMoveRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MoveResponse:
    return await card_service.move_card(db, user_id, card_id, data.index, list_id=data.list_id)
