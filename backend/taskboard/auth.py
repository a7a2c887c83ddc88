"""
TaskBoard Backend — Acting Principal
======================================

What:  FastAPI dependency that identifies the user behind a request.
How:   The upstream gateway authenticates the caller and forwards the user's
       id in the ``X-User-ID`` header. The id must parse as a UUID and name
       an existing user; otherwise the request fails with 401.
"""

import logging
import uuid
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.database import get_db_session
from taskboard.exceptions import AuthenticationError
from taskboard.services.user_service import user_service

logger = logging.getLogger(__name__)


async def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-ID"),
    db: AsyncSession = Depends(get_db_session),
) -> uuid.UUID:
    if not x_user_id:
        raise AuthenticationError(message="X-User-ID header is required")
    try:
        user_id = uuid.UUID(x_user_id.strip())
    except ValueError:
        raise AuthenticationError(message="X-User-ID header must be a UUID")

    if not await user_service.exists(db, user_id):
        logger.warning("Request with unknown user id %s", user_id)
        raise AuthenticationError(message="Unknown user")
    return user_id
