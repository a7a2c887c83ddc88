"""
TaskBoard Backend — User Model
================================

What:  The acting principal at the root of every ownership chain.
How:   Credentials are handled upstream; the backend only stores identity.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Stored lower-cased; unique across the installation
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    display_name: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    boards: Mapped[List["Board"]] = relationship(
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Board.position",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
