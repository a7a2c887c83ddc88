"""
TaskBoard Backend — User Route Handlers
=========================================

What:  Registers users and returns the acting user.
How:   Registration is open (no X-User-ID needed); ``/users/me`` resolves the
       caller through taskboard.auth.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth import get_current_user_id
from taskboard.database import get_db_session
from taskboard.schemas.common import ErrorResponse
from taskboard.schemas.user import UserCreate, UserResponse
from taskboard.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
    responses={409: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Register a user",
)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.create_user(db, data)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "Missing or unknown X-User-ID", "model": ErrorResponse}},
    summary="Get the acting user",
)
async def get_me(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.get_user(db, user_id)
