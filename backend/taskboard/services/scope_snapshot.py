"""
TaskBoard Backend — Scope Snapshots
=====================================

What:  Glue between ORM rows and the positioning service's
       ``[(item_id, key), ...]`` snapshots.
How:   ``load_scope`` reads every sibling of one parent ordered by
       (position, id); ``apply_positions`` writes a returned key map back
       onto the loaded rows so the caller's flush persists it in the same
       transaction. ``lock_scope`` row-locks every sibling in id order for
       writers that rewrite several scopes at once.
"""

from typing import Any, Dict, Hashable, List, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.services.order_keys import OrderKey


async def load_scope(db: AsyncSession, model: Any, parent_column: Any, parent_id: Any) -> List[Any]:
    result = await db.execute(
        select(model).where(parent_column == parent_id).order_by(model.position, model.id)
    )
    return list(result.scalars().all())


def lock_scope_statement(model: Any, parent_column: Any, parent_id: Any):
    return (
        select(model)
        .where(parent_column == parent_id)
        .order_by(model.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


async def lock_scope(db: AsyncSession, model: Any, parent_column: Any, parent_id: Any) -> List[Any]:
    result = await db.execute(lock_scope_statement(model, parent_column, parent_id))
    return list(result.scalars().all())


def snapshot(items: Sequence[Any]) -> List[Tuple[Hashable, OrderKey]]:
    return [(item.id, item.position) for item in items]


def apply_positions(items: Sequence[Any], positions: Dict[Hashable, OrderKey]) -> int:
    """Set ``position`` on every item named in ``positions``; returns how many changed."""
    changed = 0
    for item in items:
        key = positions.get(item.id)
        if key is not None and item.position != key:
            item.position = key
            changed += 1
    return changed
