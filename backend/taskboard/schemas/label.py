"""Pydantic schemas for board labels."""

import uuid
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from taskboard.schemas.common import check_hex_color, clean_required_text


class LabelCreate(BaseModel):
    name: str = Field(max_length=100)
    color: str = Field(description="Hex colour, #RGB or #RRGGBB")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_required_text(v, "name")

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return check_hex_color(v)


class LabelUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        return clean_required_text(v, "name")

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> str:
        return check_hex_color(v)


class LabelResponse(BaseModel):
    id: uuid.UUID
    board_id: uuid.UUID
    name: str
    color: str

    model_config = {"from_attributes": True}
