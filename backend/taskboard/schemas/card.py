"""
TaskBoard Backend — Card Schemas
==================================

What:  Request/response contracts for cards.
How:   CardUpdate is applied with ``exclude_unset`` so only the fields the
       client sent are changed; ``description`` and ``due_date`` may be set
       to null explicitly, ``title`` may not.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from taskboard.schemas.checklist import ChecklistResponse
from taskboard.schemas.common import clean_required_text
from taskboard.schemas.label import LabelResponse


class CardCreate(BaseModel):
    title: str = Field(max_length=255)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return clean_required_text(v, "title")


class CardUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    due_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        return clean_required_text(v, "title")


class CardMoveRequest(BaseModel):
    """
    Index-based card move.

    ``list_id`` omitted (or equal to the current list) reorders within the
    list; otherwise the card moves to ``list_id`` at ``index``.
    """
    list_id: Optional[uuid.UUID] = Field(default=None, description="Destination list")
    index: int = Field(ge=0, description="0-based index among the destination's other cards")


class CardResponse(BaseModel):
    id: uuid.UUID
    list_id: uuid.UUID
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    position: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CardSummaryResponse(CardResponse):
    """Card as shown on the board: core fields plus its labels."""
    labels: List[LabelResponse] = Field(default_factory=list)


class CardDetailResponse(CardSummaryResponse):
    """Card modal: labels plus checklists with their items."""
    checklists: List[ChecklistResponse] = Field(default_factory=list)
