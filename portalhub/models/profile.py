"""SQLAlchemy ORM model for public social profiles."""
from __future__ import annotations

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from portalhub.database import Base
from .base import TimestampMixin


class Profile(TimestampMixin, Base):
    """Identity record created when a user completes account setup."""

    __tablename__ = "profiles"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    username = Column(String(30), unique=True, nullable=False, index=True)
    display_name = Column(String(150), nullable=True)
    full_name = Column(String(150), nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    is_private = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    followers_count = Column(Integer, nullable=False, default=0, server_default="0")
    following_count = Column(Integer, nullable=False, default=0, server_default="0")
    dob = Column(Date, nullable=True)
    nutech_id = Column(String(16), nullable=True)
    department = Column(String(120), nullable=True)
    phone_number = Column(String(20), nullable=True)

    user = relationship("User", back_populates="profile")


__all__ = ["Profile"]
