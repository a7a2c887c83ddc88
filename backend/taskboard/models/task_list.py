"""
TaskBoard Backend — List Model
================================

What:  A column of cards on a board. The class is named TaskList so it does
       not shadow the ``list`` builtin; the table is ``lists``.
How:   ``position`` orders the lists of one board (scope = board_id).
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.database import Base


class TaskList(Base):
    __tablename__ = "lists"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    board_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("boards.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

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

    board: Mapped["Board"] = relationship(back_populates="lists")

    cards: Mapped[List["Card"]] = relationship(
        back_populates="task_list",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Card.position",
    )

    __table_args__ = (
        Index("idx_lists_board_position", "board_id", "position"),
    )

    def __repr__(self) -> str:
        return f"<TaskList(id={self.id}, title='{self.title}', position={self.position})>"
