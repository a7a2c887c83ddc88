"""
TaskBoard Backend — Scope Rebalancer
======================================

What:  Recomputes evenly spaced keys for a whole sibling scope without
       changing the relative order of any item.
How:   The i-th item (0-based) of the caller's ordering gets ``(i + 1) * gap``
       (1000, 2000, 3000, ... for fractional keys; 1, 2, 3, ... for integer
       keys). The caller writes the returned map back in one transaction.
When:  When an insert-between lands on neighbours that are too close, on a
       full client-side reorder, or during a maintenance pass.

A rebalance touches every sibling's stored key, which is a wider write than
a single move; the positioning service only triggers it when the caller
allows it.
"""

import logging
from typing import Dict, Hashable, Iterable, Optional, Sequence

from taskboard.exceptions import DuplicateItemError, IncompleteScopeError
from taskboard.services.order_keys import (
    KeyStrategy,
    OrderKey,
    fractional_keys,
    is_strictly_ascending,
)

logger = logging.getLogger(__name__)


class Rebalancer:
    """Assigns evenly spaced keys to an ordered sibling set."""

    def __init__(self, strategy: KeyStrategy = fractional_keys):
        self.strategy = strategy

    def rebalance(
        self,
        ordered_item_ids: Sequence[Hashable],
        scope_item_ids: Optional[Iterable[Hashable]] = None,
        scope_id: Optional[Hashable] = None,
    ) -> Dict[Hashable, OrderKey]:
        """
        Assign ``nth(i)`` to the i-th id of ``ordered_item_ids``.

        Args:
            ordered_item_ids: every item of the scope, in the desired order
            scope_item_ids:   the scope's current membership; when given the
                              ordering must contain exactly these ids
            scope_id:         only used for error context and logging

        Returns:
            Ordered mapping item id → new key (iteration follows the input order)

        Raises:
            DuplicateItemError:   an id appears twice
            IncompleteScopeError: ids missing from or foreign to the scope
        """
        seen = set()
        for item_id in ordered_item_ids:
            if item_id in seen:
                raise DuplicateItemError(item_id)
            seen.add(item_id)

        if scope_item_ids is not None:
            expected = set(scope_item_ids)
            if seen != expected:
                raise IncompleteScopeError(
                    missing=expected - seen,
                    unexpected=seen - expected,
                    scope_id=scope_id,
                )

        keys = {
            item_id: self.strategy.nth(index)
            for index, item_id in enumerate(ordered_item_ids)
        }
        logger.debug("Rebalanced scope %s: %d items", scope_id, len(keys))
        return keys

    def needs_rebalance(self, keys: Sequence[OrderKey]) -> bool:
        """
        Maintenance check over a scope's keys in ascending order.

        True when keys repeat or are out of order, when the first key has no
        room left for a prepend, or when any adjacent pair is too close to
        subdivide.
        """
        if not is_strictly_ascending(keys):
            return True
        if keys and self.strategy.too_close(None, keys[0]):
            return True
        return any(self.strategy.too_close(low, high) for low, high in zip(keys, keys[1:]))


rebalancer = Rebalancer()
