"""
TaskBoard Backend — Label Model
=================================

What:  A coloured tag defined per board and attachable to that board's cards.
"""

import uuid
from typing import List

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.database import Base
from taskboard.models.card import card_labels


class Label(Base):
    __tablename__ = "labels"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    board_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("boards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # #RGB or #RRGGBB
    color: Mapped[str] = mapped_column(String(7), nullable=False)

    board: Mapped["Board"] = relationship(back_populates="labels")

    cards: Mapped[List["Card"]] = relationship(
        secondary=card_labels,
        back_populates="labels",
    )

    def __repr__(self) -> str:
        return f"<Label(id={self.id}, name='{self.name}', color='{self.color}')>"
