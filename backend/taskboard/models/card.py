"""
TaskBoard Backend — Card Model
================================

What:  A task inside a list, with optional description and due date.
How:   ``position`` orders the cards of one list (scope = list_id). Moving
       a card to another list changes ``list_id`` and assigns a key in the
       destination; the source list keeps its keys.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.database import Base

# Many-to-many: cards ↔ labels of the same board
card_labels = Table(
    "card_labels",
    Base.metadata,
    Column("card_id", Uuid, ForeignKey("cards.id", ondelete="CASCADE"), primary_key=True),
    Column("label_id", Uuid, ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True),
)


class Card(Base):
    __tablename__ = "cards"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    list_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("lists.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    due_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    position: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    task_list: Mapped["TaskList"] = relationship(back_populates="cards")

    labels: Mapped[List["Label"]] = relationship(
        secondary=card_labels,
        back_populates="cards",
        order_by="Label.name",
    )

    checklists: Mapped[List["Checklist"]] = relationship(
        back_populates="card",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Checklist.created_at",
    )

    __table_args__ = (
        Index("idx_cards_list_position", "list_id", "position"),
    )

    def __repr__(self) -> str:
        return f"<Card(id={self.id}, title='{self.title}', position={self.position})>"
