"""Pydantic schemas for checklists and checklist items."""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, StrictBool, field_validator

from taskboard.schemas.common import clean_required_text


class ChecklistCreate(BaseModel):
    title: str = Field(max_length=255)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return clean_required_text(v, "title")


class ChecklistItemCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return clean_required_text(v, "content")


class ChecklistItemUpdate(BaseModel):
    content: Optional[str] = None
    is_checked: Optional[StrictBool] = None

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: Optional[str]) -> str:
        return clean_required_text(v, "content")


class ChecklistItemResponse(BaseModel):
    id: uuid.UUID
    checklist_id: uuid.UUID
    content: str
    is_checked: bool
    position: int

    model_config = {"from_attributes": True}


class ChecklistResponse(BaseModel):
    id: uuid.UUID
    card_id: uuid.UUID
    title: str
    created_at: datetime
    items: List[ChecklistItemResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}
