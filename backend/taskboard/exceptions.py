"""
TaskBoard Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for every error scenario.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) map them to
       structured JSON error responses with the right HTTP status code.
Who:   Raised by the ordering core, services and dependencies; caught by
       the global handlers.

Exception Hierarchy:
    TaskBoardError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found (also ownership failures)
    ├── ConflictError            → 409 Conflict
    ├── OrderingError            → 400 Bad Request (caller contract violation)
    │   ├── InvalidRangeError        neighbour keys out of order / not finite
    │   ├── IncompleteScopeError     rebalance given a partial sibling set
    │   ├── IndexOutOfBoundsError    target index outside [0, sibling_count]
    │   ├── DuplicateItemError       the same id listed twice
    │   └── RebalanceRequiredError   neighbours too close, caller opted out
    └── DatabaseError            → 500 Internal Server Error

The ordering errors are deterministic: they are raised by pure code and are
never retried. An absent neighbour is not an error; append/between handle it.
"""

from typing import Any, Dict, Iterable, Optional


class TaskBoardError(Exception):
    """
    Base exception for all TaskBoard application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the
                  handler decides it is safe)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TaskBoardError):
    """
    Raised when client input fails a business rule.

    When:    Empty titles after trimming, bad hex colours, a label attached
             to a card on another board.
    HTTP:    400 Bad Request (schema-level problems stay FastAPI's 422)
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(TaskBoardError):
    """Missing, malformed or unknown acting principal (HTTP 401)."""

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TaskBoardError):
    """
    Raised when a requested resource does not exist or is not reachable.

    What:    The target is missing, or its ownership chain does not end at
             the acting user. Both cases look the same to the client so the
             API never reveals that someone else's board exists.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class ConflictError(TaskBoardError):
    """A uniqueness rule was violated, e.g. an email already registered (HTTP 409)."""

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ══════════════════════════════════════════════════════════════════════════
# Ordering errors
# ══════════════════════════════════════════════════════════════════════════


class OrderingError(TaskBoardError):
    """
    Base class for ordering-core contract violations.

    What:    The caller handed the positioning core inconsistent input.
    HTTP:    400 Bad Request
    """

    error_code = "ordering_error"

    def __init__(
        self,
        message: str = "Invalid ordering request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidRangeError(OrderingError):
    """Neighbour keys are not strictly ascending (or not finite numbers)."""

    error_code = "invalid_range"

    def __init__(self, low: Any = None, high: Any = None, message: Optional[str] = None):
        super().__init__(
            message=message or f"Lower key {low!r} must be strictly less than upper key {high!r}",
            context={
                "low": None if low is None else str(low),
                "high": None if high is None else str(high),
            },
        )
        self.low = low
        self.high = high


class IncompleteScopeError(OrderingError):
    """A rebalance or reorder did not list exactly the items of the scope."""

    error_code = "incomplete_scope"

    def __init__(
        self,
        missing: Iterable[Any] = (),
        unexpected: Iterable[Any] = (),
        scope_id: Any = None,
    ):
        missing = sorted(str(m) for m in missing)
        unexpected = sorted(str(u) for u in unexpected)
        super().__init__(
            message="Ordering must list every item of the scope exactly once",
            context={
                "scope_id": None if scope_id is None else str(scope_id),
                "missing": missing,
                "unexpected": unexpected,
            },
        )
        self.missing = missing
        self.unexpected = unexpected


class IndexOutOfBoundsError(OrderingError):
    """Target index outside ``[0, sibling_count]``."""

    error_code = "index_out_of_bounds"

    def __init__(self, index: int, sibling_count: int):
        super().__init__(
            message=f"Target index {index} is outside [0, {sibling_count}]",
            context={"index": index, "sibling_count": sibling_count},
        )
        self.index = index
        self.sibling_count = sibling_count


class DuplicateItemError(OrderingError):
    """The same item id appears more than once in an ordering input."""

    error_code = "duplicate_item"

    def __init__(self, item_id: Any):
        super().__init__(
            message=f"Item '{item_id}' is listed more than once",
            context={"item_id": str(item_id)},
        )
        self.item_id = item_id


class RebalanceRequiredError(OrderingError):
    """
    The neighbours of an insertion point are too close to subdivide, and the
    caller did not allow the service to rebalance the whole scope.
    """

    error_code = "rebalance_required"

    def __init__(self, scope_id: Any = None, low: Any = None, high: Any = None):
        super().__init__(
            message="Neighbouring positions are too close; the scope must be rebalanced",
            context={
                "scope_id": None if scope_id is None else str(scope_id),
                "low": low,
                "high": high,
            },
        )
        self.scope_id = scope_id


class DatabaseError(TaskBoardError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error
    The client always gets a generic message; details are logged only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
