"""Pydantic schemas for lists."""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from taskboard.schemas.card import CardSummaryResponse
from taskboard.schemas.common import clean_required_text


class ListCreate(BaseModel):
    title: str = Field(max_length=255)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return clean_required_text(v, "title")


class ListUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        return clean_required_text(v, "title")


class ListResponse(BaseModel):
    id: uuid.UUID
    board_id: uuid.UUID
    title: str
    position: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ListWithCardsResponse(ListResponse):
    cards: List[CardSummaryResponse] = Field(default_factory=list)
