"""
TaskBoard Backend — Checklist Service
=======================================

What:  Checklists on a card and their ordered items.
How:   Items are ordered by integer keys (1, 2, 3, ...) within their
       checklist, through ``checklist_positioning``. Integer keys leave no
       room between neighbours, so dropping an item between two adjacent
       keys renumbers the whole checklist.
"""

import logging
import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models import Checklist, ChecklistItem
from taskboard.schemas.checklist import (
    ChecklistCreate,
    ChecklistItemCreate,
    ChecklistItemResponse,
    ChecklistItemUpdate,
    ChecklistResponse,
)
from taskboard.schemas.common import MessageResponse, MoveResponse, ReorderResponse
from taskboard.services.ownership_service import ownership_service
from taskboard.services.positioning_service import checklist_positioning
from taskboard.services.scope_lock import run_locked
from taskboard.services.scope_snapshot import apply_positions, load_scope, snapshot

logger = logging.getLogger(__name__)


class ChecklistService:

    # ── Checklists ────────────────────────────────────────────────────────

    async def create_checklist(
        self, db: AsyncSession, user_id: uuid.UUID, card_id: uuid.UUID, data: ChecklistCreate
    ) -> ChecklistResponse:
        await ownership_service.card(db, user_id, card_id)
        checklist = Checklist(card_id=card_id, title=data.title, items=[])
        db.add(checklist)
        await db.flush()
        logger.info("Checklist created: %s on card %s", checklist.id, card_id)
        return ChecklistResponse.model_validate(checklist)

    async def delete_checklist(
        self, db: AsyncSession, user_id: uuid.UUID, checklist_id: uuid.UUID
    ) -> MessageResponse:
        checklist = await ownership_service.checklist(db, user_id, checklist_id)
        await db.delete(checklist)
        await db.flush()
        return MessageResponse(message="Checklist deleted successfully")

    # ── Items ─────────────────────────────────────────────────────────────

    async def create_item(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        checklist_id: uuid.UUID,
        data: ChecklistItemCreate,
    ) -> ChecklistItemResponse:
        await ownership_service.checklist(db, user_id, checklist_id)

        async def create() -> ChecklistItemResponse:
            await ownership_service.checklist(db, user_id, checklist_id, for_update=True)
            siblings = await load_scope(db, ChecklistItem, ChecklistItem.checklist_id, checklist_id)
            item = ChecklistItem(
                checklist_id=checklist_id,
                content=data.content,
                is_checked=False,
                position=checklist_positioning.assign_append_key(
                    checklist_id, snapshot(siblings)
                ),
            )
            db.add(item)
            await db.flush()
            return ChecklistItemResponse.model_validate(item)

        return await run_locked(db, [("items", checklist_id)], create)

    async def update_item(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        data: ChecklistItemUpdate,
    ) -> ChecklistItemResponse:
        item = await ownership_service.checklist_item(db, user_id, item_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(item, field, value)
        await db.flush()
        return ChecklistItemResponse.model_validate(item)

    async def delete_item(
        self, db: AsyncSession, user_id: uuid.UUID, item_id: uuid.UUID
    ) -> MessageResponse:
        item = await ownership_service.checklist_item(db, user_id, item_id)
        await db.delete(item)
        await db.flush()
        return MessageResponse(message="Checklist item deleted successfully")

    async def move_item(
        self, db: AsyncSession, user_id: uuid.UUID, item_id: uuid.UUID, index: int
    ) -> MoveResponse:
        checklist_id = (await ownership_service.checklist_item(db, user_id, item_id)).checklist_id

        async def move() -> MoveResponse:
            await ownership_service.checklist(db, user_id, checklist_id, for_update=True)
            item = await ownership_service.checklist_item(db, user_id, item_id)
            siblings = await load_scope(db, ChecklistItem, ChecklistItem.checklist_id, checklist_id)
            placement = checklist_positioning.move_item(
                item_id, checklist_id, checklist_id, index, snapshot(siblings)
            )
            item.position = placement.key
            apply_positions(siblings, placement.rebalanced)
            await db.flush()
            return MoveResponse(
                id=item_id, position=placement.key, rebalanced=placement.did_rebalance
            )

        return await run_locked(db, [("items", checklist_id)], move)

    async def reorder_items(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        checklist_id: uuid.UUID,
        ordered_ids: List[uuid.UUID],
    ) -> ReorderResponse:
        await ownership_service.checklist(db, user_id, checklist_id)

        async def reorder() -> ReorderResponse:
            await ownership_service.checklist(db, user_id, checklist_id, for_update=True)
            items = await load_scope(db, ChecklistItem, ChecklistItem.checklist_id, checklist_id)
            positions = checklist_positioning.reorder_scope(
                checklist_id, ordered_ids, snapshot(items)
            )
            apply_positions(items, positions)
            await db.flush()
            return ReorderResponse(positions=positions)

        return await run_locked(db, [("items", checklist_id)], reorder)


checklist_service = ChecklistService()
