"""
TaskBoard Backend — Board Model
=================================

What:  A board owned by one user; the parent of lists and labels.
How:   ``position`` orders the boards of one user (scope = user_id).

Query Patterns:
    - Dashboard: SELECT ... WHERE user_id = :uid ORDER BY position
      → idx_boards_user_position
    - Ownership: SELECT ... WHERE id = :id AND user_id = :uid (primary key)
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.database import Base

DEFAULT_BACKGROUND_COLOR = "#0052CC"


class Board(Base):
    """
    Lifecycle:
        1. Created at the end of the owner's board order
        2. Renamed / recoloured / moved any number of times
        3. Deleted together with its lists, cards and labels (CASCADE)
    """

    __tablename__ = "boards"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # #RGB or #RRGGBB
    background_color: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        default=DEFAULT_BACKGROUND_COLOR,
    )

    # Order key within the owner's boards
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

    owner: Mapped["User"] = relationship(back_populates="boards")

    lists: Mapped[List["TaskList"]] = relationship(
        back_populates="board",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TaskList.position",
    )

    labels: Mapped[List["Label"]] = relationship(
        back_populates="board",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Label.name",
    )

    __table_args__ = (
        Index("idx_boards_user_position", "user_id", "position"),
    )

    def __repr__(self) -> str:
        return f"<Board(id={self.id}, title='{self.title}', position={self.position})>"
