"""
TaskBoard Backend — User Service
==================================

What:  Creates and reads users, the root of every ownership chain.
How:   Emails are unique (stored lower-cased); a duplicate is a ConflictError.
       Credentials and sessions are handled by the upstream gateway.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.exceptions import ConflictError
from taskboard.models import User
from taskboard.schemas.user import UserCreate, UserResponse
from taskboard.services.ownership_service import ownership_service

logger = logging.getLogger(__name__)


class UserService:

    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        existing = await db.execute(select(User.id).where(User.email == data.email))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(
                message="A user with this email already exists",
                context={"field": "email"},
            )

        user = User(email=data.email, display_name=data.display_name)
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race against a concurrent registration with the same email
            raise ConflictError(
                message="A user with this email already exists",
                context={"field": "email"},
            )
        logger.info("User created: %s", user.id)
        return UserResponse.model_validate(user)

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> UserResponse:
        user = await ownership_service.user(db, user_id)
        return UserResponse.model_validate(user)

    async def exists(self, db: AsyncSession, user_id: uuid.UUID) -> bool:
        result = await db.execute(select(User.id).where(User.id == user_id))
        return result.scalar_one_or_none() is not None


user_service = UserService()
