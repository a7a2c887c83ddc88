"""
TaskBoard Backend — Shared Pydantic Schemas
=============================================

What:  Error/health envelopes and the two move request shapes every ordered
       resource accepts.

Move API shapes:
    MoveRequest     {"index": 2}                 single item, index-based
    ReorderRequest  {"ids": ["…", "…", "…"]}     complete final order of a scope

Different drag-and-drop libraries report moves one way or the other, so
boards, lists, cards and checklist items accept both.
"""

import re
import uuid
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

HEX_COLOR_RE = re.compile(r"^#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")


def clean_required_text(value: Optional[str], field_name: str) -> str:
    """Strip surrounding whitespace; reject null or blank values."""
    if value is None or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value.strip()


def check_hex_color(value: Optional[str]) -> str:
    if value is None or not HEX_COLOR_RE.match(value):
        raise ValueError("color must be a valid hex color string (e.g. #FF5630)")
    return value


# ══════════════════════════════════════════════════════════════════════════
# Ordering
# ══════════════════════════════════════════════════════════════════════════


class MoveRequest(BaseModel):
    """Index-based move within the item's current scope."""
    index: int = Field(ge=0, description="0-based target index among the other items")


class ReorderRequest(BaseModel):
    """Full-order move: every item of the scope, in the desired order."""
    ids: List[uuid.UUID] = Field(description="All item ids of the scope in their new order")


class MoveResponse(BaseModel):
    id: uuid.UUID = Field(description="Moved item")
    position: Union[int, float] = Field(description="New order key of the moved item")
    rebalanced: bool = Field(
        default=False,
        description="True when the whole scope got new keys to make room",
    )


class ReorderResponse(BaseModel):
    positions: Dict[uuid.UUID, Union[int, float]] = Field(description="New order key per item id")


class RebalanceResponse(BaseModel):
    scopes_rebalanced: int = Field(description="Number of sibling scopes that got new keys")
    items_updated: int = Field(description="Number of items whose key was rewritten")


# ══════════════════════════════════════════════════════════════════════════
# Envelopes
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "index_out_of_bounds",
            "message": "Target index 7 is outside [0, 3]",
            "details": {"index": 7, "sibling_count": 3},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
