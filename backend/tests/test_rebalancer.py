"""
TaskBoard Backend — Rebalancer Tests
======================================

What we test:
    ✅ i-th item gets (i + 1) * 1000, order preserved
    ✅ membership checks: duplicates, missing and foreign ids
    ✅ needs_rebalance on healthy, crowded and corrupt scopes
"""

import pytest

from taskboard.exceptions import DuplicateItemError, IncompleteScopeError
from taskboard.services.order_keys import integer_keys
from taskboard.services.rebalancer import Rebalancer, rebalancer


class TestRebalance:

    def test_even_spacing_in_given_order(self):
        keys = rebalancer.rebalance(["c", "a", "b"])
        assert keys == {"c": 1000.0, "a": 2000.0, "b": 3000.0}
        assert list(keys) == ["c", "a", "b"]

    def test_empty_scope(self):
        assert rebalancer.rebalance([]) == {}

    def test_preserves_existing_order(self):
        current = [("a", 1.0), ("b", 1.0000000001), ("c", 1.0000000002), ("d", 9e9)]
        ordered = [item_id for item_id, _ in current]
        keys = rebalancer.rebalance(ordered)
        assert sorted(keys, key=keys.get) == ordered
        assert len(set(keys.values())) == len(ordered)

    def test_integer_strategy(self):
        keys = Rebalancer(integer_keys).rebalance(["x", "y", "z"])
        assert keys == {"x": 1, "y": 2, "z": 3}

    def test_duplicate_id_rejected(self):
        with pytest.raises(DuplicateItemError):
            rebalancer.rebalance(["a", "b", "a"])

    def test_missing_id_rejected(self):
        with pytest.raises(IncompleteScopeError) as exc_info:
            rebalancer.rebalance(["a", "b"], scope_item_ids=["a", "b", "c"], scope_id="list-1")
        assert exc_info.value.missing == ["c"]
        assert exc_info.value.context["scope_id"] == "list-1"

    def test_foreign_id_rejected(self):
        with pytest.raises(IncompleteScopeError) as exc_info:
            rebalancer.rebalance(["a", "b", "z"], scope_item_ids=["a", "b"])
        assert exc_info.value.unexpected == ["z"]


class TestNeedsRebalance:

    def test_evenly_spaced_scope_is_healthy(self):
        assert not rebalancer.needs_rebalance([1000, 2000, 3000])

    def test_empty_scope_is_healthy(self):
        assert not rebalancer.needs_rebalance([])

    def test_crowded_pair(self):
        assert rebalancer.needs_rebalance([1000, 1000.0000000001, 3000])

    def test_duplicate_keys(self):
        assert rebalancer.needs_rebalance([1000, 1000, 2000])

    def test_no_room_for_prepend(self):
        assert rebalancer.needs_rebalance([1e-12, 1000])

    def test_integer_scope_has_no_room_between_adjacent_keys(self):
        integers = Rebalancer(integer_keys)
        assert integers.needs_rebalance([1, 2, 3])
        assert not integers.needs_rebalance([2, 4, 6])
