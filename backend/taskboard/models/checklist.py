"""
TaskBoard Backend — Checklist Models
======================================

What:  Checklists on a card and their items.
How:   Items use integer positions (1, 2, 3, ...) within their checklist
       (scope = checklist_id); see IntegerKeyStrategy.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.database import Base


class Checklist(Base):
    __tablename__ = "checklists"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    card_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("cards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    card: Mapped["Card"] = relationship(back_populates="checklists")

    items: Mapped[List["ChecklistItem"]] = relationship(
        back_populates="checklist",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ChecklistItem.position",
    )

    def __repr__(self) -> str:
        return f"<Checklist(id={self.id}, title='{self.title}')>"


class ChecklistItem(Base):
    __tablename__ = "checklist_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    checklist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("checklists.id", ondelete="CASCADE"),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    is_checked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    position: Mapped[int] = mapped_column(Integer, nullable=False)

    checklist: Mapped["Checklist"] = relationship(back_populates="items")

    __table_args__ = (
        Index("idx_checklist_items_checklist_position", "checklist_id", "position"),
    )

    def __repr__(self) -> str:
        return f"<ChecklistItem(id={self.id}, position={self.position}, checked={self.is_checked})>"
