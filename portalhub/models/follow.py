"""SQLAlchemy ORM model for directed follow edges."""
from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from portalhub.constants import FollowStatus
from portalhub.database import Base
from .base import TimestampMixin


class Follow(TimestampMixin, Base):
    __tablename__ = "follows"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    follower_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    following_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(16), nullable=False, default=FollowStatus.ACCEPTED.value)

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        CheckConstraint("follower_id <> following_id", name="ck_follows_not_self"),
        CheckConstraint("status IN ('pending', 'accepted')", name="ck_follows_status"),
    )

    @property
    def is_accepted(self) -> bool:
        return self.status == FollowStatus.ACCEPTED


__all__ = ["Follow"]
