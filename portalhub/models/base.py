"""Utility mixins shared across ORM models."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, select
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

# JSON everywhere, JSONB on PostgreSQL
JSONType = JSON().with_variant(JSONB, "postgresql")


def json_array_has(dialect: str, column, value: str, *, ignore_case: bool = False):
    """``EXISTS`` clause for rows whose JSON array ``column`` holds ``value`` as an element.

    Elements are unpacked server side, so escaped non-ASCII text compares by
    its decoded value. With ``ignore_case`` both sides are case-folded; SQLite
    relies on the ``casefold`` function registered in :mod:`portalhub.database`.
    """

    if dialect == "postgresql":
        elements = func.jsonb_array_elements_text(column).table_valued("value")
        fold = func.lower
    else:
        elements = func.json_each(column).table_valued("value")
        fold = func.casefold

    element = elements.c.value
    if ignore_case:
        return select(element).where(fold(element) == value.casefold()).exists()
    return select(element).where(element == value).exists()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TimestampMixin:
    """Reusable timestamp columns with timezone-aware defaults."""

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )


__all__ = ["JSONType", "TimestampMixin", "ensure_aware", "json_array_has", "utcnow"]
