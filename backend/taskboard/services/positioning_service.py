"""
TaskBoard Backend — Positioning Service
=========================================

What:  The public ordering API used by every create/move/reorder operation
       on boards, lists, cards and checklist items.
How:   Stateless. Each call receives a snapshot of the destination scope,
       ``[(item_id, key), ...]`` ascending by key, and returns the key(s)
       the caller must persist. Key arithmetic lives in order_keys.py and
       whole-scope renumbering in rebalancer.py.
Who:   Called by the board/list/card/checklist services while they hold the
       scope's critical section (see scope_lock.py).

Two move modes are supported:

    index-based   compute_insert_key / move_item
                  "put this item at position N among the others"
    full-order    reorder_scope
                  "here is the complete final order of the scope"

Move flow (index-based):

    siblings (moved item excluded) ──▶ neighbours at target_index
        │
        ├── room between neighbours ──▶ Placement(key=midpoint)
        │
        └── too close ──▶ rebalance whole scope with the item inserted
                          ──▶ Placement(key=..., rebalanced={id: key, ...})
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

from taskboard.config import settings
from taskboard.exceptions import (
    DuplicateItemError,
    IndexOutOfBoundsError,
    InvalidRangeError,
    RebalanceRequiredError,
)
from taskboard.services.order_keys import (
    FractionalKeyStrategy,
    KeyStrategy,
    OrderKey,
    integer_keys,
)
from taskboard.services.rebalancer import Rebalancer

logger = logging.getLogger(__name__)

Sibling = Tuple[Hashable, OrderKey]


class _MovedItem:
    """Placeholder id for the moved item when the caller did not name it."""

    def __repr__(self) -> str:
        return "<moved item>"


@dataclass(frozen=True)
class Placement:
    """
    Result of an index-based move.

    Attributes:
        key:         new key for the moved item
        rebalanced:  new keys for every other sibling of the scope when the
                     insert forced a rebalance; empty otherwise
    """

    key: OrderKey
    rebalanced: Dict[Hashable, OrderKey] = field(default_factory=dict)

    @property
    def did_rebalance(self) -> bool:
        return bool(self.rebalanced)


class PositioningService:
    """
    Assigns, recomputes and rebalances sibling order keys.

    Args:
        strategy:        fractional (default) or integer key arithmetic
        auto_rebalance:  default for ``allow_rebalance`` on index-based moves
    """

    def __init__(self, strategy: Optional[KeyStrategy] = None, auto_rebalance: bool = True):
        self.strategy = strategy or FractionalKeyStrategy(
            gap=settings.order_gap,
            min_relative_gap=settings.order_min_relative_gap,
        )
        self.rebalancer = Rebalancer(self.strategy)
        self.auto_rebalance = auto_rebalance

    # ── Snapshot validation ───────────────────────────────────────────────

    @staticmethod
    def _split(siblings: Sequence[Sibling]) -> Tuple[List[Hashable], List[OrderKey]]:
        """Unzip and validate a snapshot: unique ids, strictly ascending keys."""
        ids: List[Hashable] = []
        keys: List[OrderKey] = []
        seen = set()
        for item_id, key in siblings:
            if item_id in seen:
                raise DuplicateItemError(item_id)
            seen.add(item_id)
            if keys and not keys[-1] < key:
                raise InvalidRangeError(keys[-1], key)
            ids.append(item_id)
            keys.append(key)
        return ids, keys

    # ── Operations ────────────────────────────────────────────────────────

    def assign_append_key(self, scope_id: Hashable, siblings: Sequence[Sibling]) -> OrderKey:
        """
        Key for a newly created item at the end of the scope.

        Example:
            assign_append_key(list_id, [])                    → 1000.0
            assign_append_key(list_id, [(a, 1000), (b, 5000)]) → 6000.0
        """
        _, keys = self._split(siblings)
        key = self.strategy.append(keys[-1] if keys else None)
        logger.debug("Append key for scope %s: %s", scope_id, key)
        return key

    def compute_insert_key(
        self,
        scope_id: Hashable,
        target_index: int,
        siblings: Sequence[Sibling],
        item_id: Optional[Hashable] = None,
        allow_rebalance: Optional[bool] = None,
    ) -> Placement:
        """
        Key for an item dropped at ``target_index`` among ``siblings``.

        Args:
            scope_id:        destination scope (logging and error context)
            target_index:    0-based index among the *other* items, in [0, len]
            siblings:        destination snapshot without the moved item
            item_id:         the moved item; needed to report it in a rebalance
            allow_rebalance: override ``auto_rebalance`` for this call

        Returns:
            Placement with the new key, plus the other siblings' keys if the
            neighbours were too close and the scope got rebalanced.

        Raises:
            IndexOutOfBoundsError:  target_index outside [0, len(siblings)]
            DuplicateItemError:     item_id already present in siblings
            InvalidRangeError:      snapshot keys not strictly ascending
            RebalanceRequiredError: too close and rebalancing not allowed
        """
        ids, keys = self._split(siblings)
        if item_id is not None and item_id in ids:
            raise DuplicateItemError(item_id)
        if target_index < 0 or target_index > len(ids):
            raise IndexOutOfBoundsError(target_index, len(ids))

        low = keys[target_index - 1] if target_index > 0 else None
        high = keys[target_index] if target_index < len(keys) else None

        if not self.strategy.too_close(low, high):
            return Placement(key=self.strategy.between(low, high))

        allow = self.auto_rebalance if allow_rebalance is None else allow_rebalance
        if not allow:
            raise RebalanceRequiredError(scope_id=scope_id, low=low, high=high)

        moved = item_id if item_id is not None else _MovedItem()
        ordered = ids[:target_index] + [moved] + ids[target_index:]
        new_keys = self.rebalancer.rebalance(ordered, scope_id=scope_id)
        key = new_keys.pop(moved)
        logger.info(
            "Scope %s rebalanced on insert at index %d (%d siblings)",
            scope_id,
            target_index,
            len(new_keys),
        )
        return Placement(key=key, rebalanced=new_keys)

    def move_item(
        self,
        item_id: Hashable,
        from_scope_id: Hashable,
        to_scope_id: Hashable,
        target_index: int,
        to_siblings: Sequence[Sibling],
        allow_rebalance: Optional[bool] = None,
    ) -> Placement:
        """
        Move an item to ``target_index`` of ``to_scope_id``.

        Within one scope the item is dropped from the snapshot first, so the
        caller may pass the scope as loaded. Across scopes the source keeps
        its keys untouched and the destination snapshot must not contain the
        item yet.
        """
        if from_scope_id == to_scope_id:
            to_siblings = [s for s in to_siblings if s[0] != item_id]
        placement = self.compute_insert_key(
            to_scope_id,
            target_index,
            to_siblings,
            item_id=item_id,
            allow_rebalance=allow_rebalance,
        )
        logger.info(
            "Moved %s from scope %s to scope %s index %d → key %s",
            item_id,
            from_scope_id,
            to_scope_id,
            target_index,
            placement.key,
        )
        return placement

    def reorder_scope(
        self,
        scope_id: Hashable,
        ordered_item_ids: Sequence[Hashable],
        siblings: Optional[Sequence[Sibling]] = None,
    ) -> Dict[Hashable, OrderKey]:
        """
        Full-order move: rebalance the scope into the caller's final order.

        When ``siblings`` is given the ordering must name exactly the items
        in it (IncompleteScopeError otherwise). The current keys themselves
        are not checked; a corrupt scope can always be reordered.
        """
        scope_item_ids = None
        if siblings is not None:
            scope_item_ids = [item_id for item_id, _ in siblings]
        return self.rebalancer.rebalance(ordered_item_ids, scope_item_ids, scope_id=scope_id)

    def rebalance_scope(
        self, scope_id: Hashable, siblings: Sequence[Sibling]
    ) -> Dict[Hashable, OrderKey]:
        """Maintenance pass: respace the scope, keeping its current order."""
        ordered = [item_id for item_id, _ in sorted(siblings, key=lambda s: s[1])]
        logger.info("Rebalancing scope %s (%d items)", scope_id, len(ordered))
        return self.rebalancer.rebalance(ordered, scope_id=scope_id)

    def needs_rebalance(self, siblings: Sequence[Sibling]) -> bool:
        return self.rebalancer.needs_rebalance([key for _, key in siblings])


# ── Singleton Instances ───────────────────────────────────────────────────
# Boards, lists and cards use fractional keys; checklist items use integers
positioning_service = PositioningService(auto_rebalance=settings.auto_rebalance)
checklist_positioning = PositioningService(integer_keys, auto_rebalance=True)
