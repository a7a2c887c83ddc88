"""
TaskBoard Backend — Card Service
==================================

What:  Business logic for cards: CRUD plus moves within and across lists.
How:   A card's ordering scope is its list. A cross-list move locks both
       lists (in a fixed order, see scope_lock.py), assigns a key in the
       destination only and changes ``list_id``; the source list keeps its
       remaining keys.

Cross-list move flow:

    resolve card ──▶ source list S, destination list D (both owned)
        │
        ▼
    lock ("cards", S) + ("cards", D)
        │
        ├── card no longer in S (moved concurrently) ──▶ retry with new S
        │
        └── snapshot D ──▶ positioning_service.move_item ──▶ write, commit

Moving to a list on another of the user's boards drops the labels that
belong to the old board.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskboard.config import settings
from taskboard.exceptions import ConflictError, NotFoundError
from taskboard.models import Card, Checklist
from taskboard.schemas.card import (
    CardCreate,
    CardDetailResponse,
    CardResponse,
    CardUpdate,
)
from taskboard.schemas.common import MessageResponse, MoveResponse, ReorderResponse
from taskboard.services.ownership_service import ownership_service
from taskboard.services.positioning_service import positioning_service
from taskboard.services.scope_lock import run_locked
from taskboard.services.scope_snapshot import apply_positions, load_scope, snapshot

logger = logging.getLogger(__name__)


class _SourceListChanged(Exception):
    """The card left its list between resolving and locking."""

    def __init__(self, list_id: uuid.UUID):
        super().__init__(str(list_id))
        self.list_id = list_id


class CardService:

    async def create_card(
        self, db: AsyncSession, user_id: uuid.UUID, list_id: uuid.UUID, data: CardCreate
    ) -> CardResponse:
        await ownership_service.task_list(db, user_id, list_id)

        async def create() -> CardResponse:
            await ownership_service.task_list(db, user_id, list_id, for_update=True)
            siblings = await load_scope(db, Card, Card.list_id, list_id)
            card = Card(
                list_id=list_id,
                title=data.title,
                position=positioning_service.assign_append_key(list_id, snapshot(siblings)),
            )
            db.add(card)
            await db.flush()
            logger.info("Card created: %s in list %s", card.id, list_id)
            return CardResponse.model_validate(card)

        return await run_locked(db, [("cards", list_id)], create)

    async def get_card(
        self, db: AsyncSession, user_id: uuid.UUID, card_id: uuid.UUID
    ) -> CardDetailResponse:
        card = await ownership_service.card(
            db,
            user_id,
            card_id,
            options=(
                selectinload(Card.labels),
                selectinload(Card.checklists).selectinload(Checklist.items),
            ),
        )
        return CardDetailResponse.model_validate(card)

    async def update_card(
        self, db: AsyncSession, user_id: uuid.UUID, card_id: uuid.UUID, data: CardUpdate
    ) -> CardResponse:
        """Apply only the fields the client sent; null clears description or due date."""
        card = await ownership_service.card(db, user_id, card_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(card, field, value)
        await db.flush()
        return CardResponse.model_validate(card)

    async def delete_card(
        self, db: AsyncSession, user_id: uuid.UUID, card_id: uuid.UUID
    ) -> MessageResponse:
        card = await ownership_service.card(db, user_id, card_id)
        await db.delete(card)
        await db.flush()
        logger.info("Card deleted: %s", card_id)
        return MessageResponse(message="Card deleted successfully")

    # ── Ordering ──────────────────────────────────────────────────────────

    async def move_card(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        card_id: uuid.UUID,
        index: int,
        list_id: Optional[uuid.UUID] = None,
    ) -> MoveResponse:
        """
        Move a card to ``index`` of ``list_id`` (default: its current list).

        Raises:
            NotFoundError:         card or destination list not owned by the user
            IndexOutOfBoundsError: index past the end of the destination
            ConflictError:         the card kept moving between other requests
        """
        card = await ownership_service.card(db, user_id, card_id)
        source_id = card.list_id
        target_id = list_id or source_id
        if target_id != source_id:
            await ownership_service.task_list(db, user_id, target_id)

        for _ in range(settings.retry_max_attempts):
            try:
                return await run_locked(
                    db,
                    [("cards", source_id), ("cards", target_id)],
                    lambda: self._move_locked(db, user_id, card_id, source_id, target_id, index),
                )
            except _SourceListChanged as changed:
                await db.rollback()
                logger.info(
                    "Card %s left list %s concurrently, retrying from %s",
                    card_id,
                    source_id,
                    changed.list_id,
                )
                if list_id is None:
                    target_id = changed.list_id
                source_id = changed.list_id

        raise ConflictError(
            message="Card is being moved by another request. Please try again.",
            context={"card_id": str(card_id)},
        )

    async def _move_locked(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        card_id: uuid.UUID,
        source_id: uuid.UUID,
        target_id: uuid.UUID,
        index: int,
    ) -> MoveResponse:
        # Row locks: list rows in id order, then the card.
        lists = {}
        for list_id in sorted({source_id, target_id}):
            try:
                lists[list_id] = await ownership_service.task_list(
                    db, user_id, list_id, for_update=True
                )
            except NotFoundError:
                if list_id != source_id:
                    raise
                # source list deleted after the card moved elsewhere
                card = await ownership_service.card(db, user_id, card_id)
                raise _SourceListChanged(card.list_id)
        source, target = lists[source_id], lists[target_id]

        card = await ownership_service.card(db, user_id, card_id, for_update=True)
        if card.list_id != source_id:
            raise _SourceListChanged(card.list_id)

        siblings = await load_scope(db, Card, Card.list_id, target_id)
        placement = positioning_service.move_item(
            card_id, source_id, target_id, index, snapshot(siblings)
        )

        if target_id != source_id:
            if target.board_id != source.board_id:
                await db.refresh(card, attribute_names=["labels"])
                card.labels = [label for label in card.labels if label.board_id == target.board_id]
            card.list_id = target_id
        card.position = placement.key
        apply_positions(siblings, placement.rebalanced)
        await db.flush()
        return MoveResponse(id=card_id, position=placement.key, rebalanced=placement.did_rebalance)

    async def reorder_cards(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        list_id: uuid.UUID,
        ordered_ids: List[uuid.UUID],
    ) -> ReorderResponse:
        await ownership_service.task_list(db, user_id, list_id)

        async def reorder() -> ReorderResponse:
            await ownership_service.task_list(db, user_id, list_id, for_update=True)
            cards = await load_scope(db, Card, Card.list_id, list_id)
            positions = positioning_service.reorder_scope(list_id, ordered_ids, snapshot(cards))
            apply_positions(cards, positions)
            await db.flush()
            return ReorderResponse(positions=positions)

        return await run_locked(db, [("cards", list_id)], reorder)


card_service = CardService()
