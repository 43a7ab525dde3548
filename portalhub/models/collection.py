"""SQLAlchemy ORM models for saved-post collections."""
from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from portalhub.database import Base
from .base import TimestampMixin, utcnow


class Collection(TimestampMixin, Base):
    __tablename__ = "collections"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_private = Column(Boolean, nullable=False, default=False, server_default=expression.false())

    items = relationship(
        "CollectionItem", back_populates="collection", cascade="all, delete-orphan", passive_deletes=True
    )


class CollectionItem(Base):
    __tablename__ = "collection_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    collection_id = Column(
        UUID(as_uuid=True), ForeignKey("collections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    post_id = Column(UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    added_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    collection = relationship("Collection", back_populates="items")
    post = relationship("Post", back_populates="collection_items")

    __table_args__ = (UniqueConstraint("collection_id", "post_id", name="uq_collection_items_collection_post"),)


__all__ = ["Collection", "CollectionItem"]
