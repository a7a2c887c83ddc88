"""
TaskBoard Backend — Board Schemas
===================================

What:  Request/response contracts for boards.
Who:   BoardDetailResponse is the payload of GET /api/boards/{id}: the board
       with its lists and each list's cards, all in position order.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from taskboard.schemas.common import check_hex_color, clean_required_text
from taskboard.schemas.label import LabelResponse
from taskboard.schemas.task_list import ListWithCardsResponse


class BoardCreate(BaseModel):
    title: str = Field(max_length=255)
    background_color: Optional[str] = Field(
        default=None,
        description="Hex colour; defaults to #0052CC",
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return clean_required_text(v, "title")

    @field_validator("background_color")
    @classmethod
    def validate_background_color(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return check_hex_color(v)


class BoardUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    background_color: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        return clean_required_text(v, "title")

    @field_validator("background_color")
    @classmethod
    def validate_background_color(cls, v: Optional[str]) -> str:
        return check_hex_color(v)


class BoardResponse(BaseModel):
    id: uuid.UUID
    title: str
    background_color: str
    position: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BoardDetailResponse(BoardResponse):
    lists: List[ListWithCardsResponse] = Field(default_factory=list)
    labels: List[LabelResponse] = Field(default_factory=list)
