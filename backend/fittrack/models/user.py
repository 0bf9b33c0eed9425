"""
FitTrack Backend — User SQLAlchemy Model
==========================================

What:  ORM model for the `users` table.
Who:   Used only by UserStore.

password_hash holds the raw bcrypt output as bytes. No column anywhere
stores a plaintext password.
"""

from datetime import datetime

from sqlalchemy import DateTime, LargeBinary, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from fittrack.database import Base
from fittrack.models.workout import IdType


class UserRow(Base):
    """One row of `users`."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False, server_default=text("''"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __mapper_args__ = {"eager_defaults": True}

    def __repr__(self) -> str:
        # Never include password_hash
        return f"<UserRow(id={self.id}, username='{self.username}')>"
