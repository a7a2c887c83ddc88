"""
TaskBoard Backend — Label Service
===================================

What:  Board labels and their attachment to cards.
How:   Labels belong to a board; a card may only carry labels of the board
       it currently sits on. Attaching is idempotent and detaching a label
       that is not attached is not an error.
"""

import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskboard.exceptions import DatabaseError, ValidationError
from taskboard.models import Card, Label, TaskList
from taskboard.schemas.common import MessageResponse
from taskboard.schemas.label import LabelCreate, LabelResponse, LabelUpdate
from taskboard.services.ownership_service import ownership_service

logger = logging.getLogger(__name__)


class LabelService:

    async def list_labels(
        self, db: AsyncSession, user_id: uuid.UUID, board_id: uuid.UUID
    ) -> List[LabelResponse]:
        await ownership_service.board(db, user_id, board_id)
        try:
            result = await db.execute(
                select(Label).where(Label.board_id == board_id).order_by(Label.name)
            )
        except SQLAlchemyError as e:
            logger.error("Database error listing labels: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve labels. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [LabelResponse.model_validate(label) for label in result.scalars().all()]

    async def create_label(
        self, db: AsyncSession, user_id: uuid.UUID, board_id: uuid.UUID, data: LabelCreate
    ) -> LabelResponse:
        await ownership_service.board(db, user_id, board_id)
        label = Label(board_id=board_id, name=data.name, color=data.color)
        db.add(label)
        await db.flush()
        logger.info("Label created: %s on board %s", label.id, board_id)
        return LabelResponse.model_validate(label)

    async def update_label(
        self, db: AsyncSession, user_id: uuid.UUID, label_id: uuid.UUID, data: LabelUpdate
    ) -> LabelResponse:
        label = await ownership_service.label(db, user_id, label_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(label, field, value)
        await db.flush()
        return LabelResponse.model_validate(label)

    async def delete_label(
        self, db: AsyncSession, user_id: uuid.UUID, label_id: uuid.UUID
    ) -> MessageResponse:
        label = await ownership_service.label(db, user_id, label_id)
        await db.delete(label)
        await db.flush()
        return MessageResponse(message="Label deleted successfully")

    async def attach_label(
        self, db: AsyncSession, user_id: uuid.UUID, card_id: uuid.UUID, label_id: uuid.UUID
    ) -> MessageResponse:
        """
        Put ``label_id`` on ``card_id``.

        Raises:
            NotFoundError:   card or label not owned by the user
            ValidationError: the label belongs to another board than the card
        """
        card = await ownership_service.card(
            db, user_id, card_id, options=(selectinload(Card.labels),)
        )
        label = await ownership_service.label(db, user_id, label_id)
        board_id = (
            await db.execute(select(TaskList.board_id).where(TaskList.id == card.list_id))
        ).scalar_one()
        if label.board_id != board_id:
            raise ValidationError(
                message="Label does not belong to the same board as the card",
                field="label_id",
                context={"card_id": str(card_id), "label_id": str(label_id)},
            )

        if label not in card.labels:
            card.labels.append(label)
            await db.flush()
            logger.debug("Label %s attached to card %s", label_id, card_id)
        return MessageResponse(message="Label added to card")

    async def detach_label(
        self, db: AsyncSession, user_id: uuid.UUID, card_id: uuid.UUID, label_id: uuid.UUID
    ) -> MessageResponse:
        card = await ownership_service.card(
            db, user_id, card_id, options=(selectinload(Card.labels),)
        )
        remaining = [label for label in card.labels if label.id != label_id]
        if len(remaining) != len(card.labels):
            card.labels = remaining
            await db.flush()
        return MessageResponse(message="Label removed from card")


label_service = LabelService()
