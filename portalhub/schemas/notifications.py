"""Schemas for the notification centre."""
from __future__ import annotations

from pydantic import BaseModel

from .feeds import ActivityItem
from .follow import FollowEdgeResponse


class NotificationSummaryResponse(BaseModel):
    """Pending follow requests alongside recent activity on the user's content."""

    pending_requests: list[FollowEdgeResponse]
    activity: list[ActivityItem]
    pending_count: int


__all__ = ["NotificationSummaryResponse"]
