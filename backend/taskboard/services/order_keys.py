"""
TaskBoard Backend — Order Key Arithmetic
==========================================

What:  Pure numeric helpers for sibling order keys: append, insert-between
       and the "too close to subdivide" check.
How:   Keys are plain numbers compared ascending. New items go GAP after
       the last key; a moved item takes the midpoint of its new neighbours.
       Nothing here touches the database or keeps state between calls.

Two strategies share one interface:

    FractionalKeyStrategy   float keys, gap 1000, midpoint subdivision
                            (boards, lists, cards)
    IntegerKeyStrategy      int keys, gap 1, subdivides only while an integer
                            fits between the neighbours (checklist items)

Example (fractional):
    append(None)          → 1000.0
    append(5000)          → 6000.0
    between(None, 1000)   → 500.0
    between(1000, 2000)   → 1500.0
    between(3000, None)   → 4000.0
"""

import math
from typing import Optional, Sequence, Union

from taskboard.exceptions import InvalidRangeError, RebalanceRequiredError

OrderKey = Union[float, int]

GAP = 1000.0
INITIAL_GAP = 1000.0
MIN_RELATIVE_GAP = 1e-9


def _ensure_finite(*keys: Optional[OrderKey]) -> None:
    for key in keys:
        if key is not None and not math.isfinite(key):
            raise InvalidRangeError(message=f"Order key {key!r} is not a finite number")


class FractionalKeyStrategy:
    """
    Float keys with midpoint subdivision.

    Attributes:
        gap:               distance between keys after append/rebalance
        min_relative_gap:  neighbours closer than this fraction of their
                           magnitude are considered exhausted
    """

    def __init__(self, gap: float = GAP, min_relative_gap: float = MIN_RELATIVE_GAP):
        if gap <= 0:
            raise ValueError("gap must be positive")
        self.gap = float(gap)
        self.min_relative_gap = min_relative_gap

    @property
    def initial(self) -> float:
        return self.gap

    def nth(self, index: int) -> float:
        """Key of the ``index``-th (0-based) item of an evenly spaced scope."""
        return (index + 1) * self.gap

    def append(self, last_key: Optional[OrderKey]) -> float:
        """Key for a new trailing item; ``INITIAL_GAP`` for an empty scope."""
        if last_key is None:
            return self.initial
        _ensure_finite(last_key)
        return float(last_key) + self.gap

    def between(self, low: Optional[OrderKey], high: Optional[OrderKey]) -> float:
        """
        Key strictly between ``low`` and ``high``.

        An absent side means "open end": prepending halves the first key
        (falling back to ``high - gap`` once that would not stay positive),
        appending adds one gap.

        Raises:
            InvalidRangeError: both present and ``low >= high``
        """
        _ensure_finite(low, high)
        if low is None and high is None:
            return self.initial
        if low is None:
            half = high / 2
            if half <= 0:
                return float(high) - self.gap
            return half
        if high is None:
            return float(low) + self.gap
        if low >= high:
            raise InvalidRangeError(low, high)
        return low + (high - low) / 2

    def too_close(self, low: Optional[OrderKey], high: Optional[OrderKey]) -> bool:
        """
        True when the interval between the neighbours is too small to split.

        An open low end is measured from zero while the first key is
        positive, since repeated prepends halve toward it. An open high end
        always has room.
        """
        if high is None:
            return False
        if low is None:
            if high <= 0:
                return False
            low = 0.0
        scale = max(abs(low), abs(high), 1.0)
        return (high - low) < scale * self.min_relative_gap


class IntegerKeyStrategy:
    """
    Integer keys: 1, 2, 3, ... with rebalance-by-renumbering.

    Used where fractional insertion is rarely needed (checklist items). A
    move only fits between two neighbours when an integer lies strictly
    between them; otherwise the scope is renumbered.
    """

    gap = 1
    initial = 1

    def nth(self, index: int) -> int:
        return index + 1

    def append(self, last_key: Optional[OrderKey]) -> int:
        if last_key is None:
            return self.initial
        _ensure_finite(last_key)
        return int(last_key) + self.gap

    def between(self, low: Optional[OrderKey], high: Optional[OrderKey]) -> int:
        _ensure_finite(low, high)
        if low is None and high is None:
            return self.initial
        if low is None:
            half = int(high) // 2
            if half <= 0:
                return int(high) - self.gap
            return half
        if high is None:
            return int(low) + self.gap
        if low >= high:
            raise InvalidRangeError(low, high)
        mid = (int(low) + int(high)) // 2
        if mid <= low:
            raise RebalanceRequiredError(low=low, high=high)
        return mid

    def too_close(self, low: Optional[OrderKey], high: Optional[OrderKey]) -> bool:
        if low is None or high is None:
            return False
        return high - low < 2


KeyStrategy = Union[FractionalKeyStrategy, IntegerKeyStrategy]

# Module-level default used by the plain functions below
fractional_keys = FractionalKeyStrategy()
integer_keys = IntegerKeyStrategy()


def append(last_key: Optional[OrderKey]) -> float:
    """Fractional ``append``; see :meth:`FractionalKeyStrategy.append`."""
    return fractional_keys.append(last_key)


def between(low: Optional[OrderKey], high: Optional[OrderKey]) -> float:
    """Fractional ``between``; see :meth:`FractionalKeyStrategy.between`."""
    return fractional_keys.between(low, high)


def too_close(low: Optional[OrderKey], high: Optional[OrderKey]) -> bool:
    """Fractional ``too_close``; see :meth:`FractionalKeyStrategy.too_close`."""
    return fractional_keys.too_close(low, high)


def is_strictly_ascending(keys: Sequence[OrderKey]) -> bool:
    return all(a < b for a, b in zip(keys, keys[1:]))
