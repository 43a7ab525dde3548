"""Follow-relationship state machine.

Per ordered (follower, following) pair there is either no edge, a pending
edge or an accepted edge. Edges are deleted rather than archived, so every
path ends in "no edge". Profile counters move only when an accepted edge
appears or disappears.
"""
from __future__ import annotations

import logging
from typing import Literal
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import FollowState, FollowStatus
from ..models import Follow, Profile, User
from ..models.counters import adjust_follow_counters
from ..schemas import FollowEdgeResponse
from .hydration import load_profile_summaries
from .realtime import change_feed

logger = logging.getLogger(__name__)


def _get_edge(db: Session, follower_id: UUID, following_id: UUID) -> Follow | None:
    return db.scalar(
        select(Follow).where(Follow.follower_id == follower_id, Follow.following_id == following_id)
    )


def _commit(db: Session, detail: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(detail)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail) from exc


def _edge_payload(edge: Follow) -> dict[str, str]:
    return {
        "id": str(edge.id),
        "follower_id": str(edge.follower_id),
        "following_id": str(edge.following_id),
        "status": str(edge.status),
        "created_at": edge.created_at.isoformat(),
    }


def follow_user(db: Session, *, follower: User, target_id: UUID) -> Follow:
    """Create an edge, pending when the target profile is private."""

    if follower.id == target_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot follow yourself")
    if db.get(User, target_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if _get_edge(db, follower.id, target_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already following this user")

    target_profile = db.get(Profile, target_id)
    is_private = bool(target_profile and target_profile.is_private)
    edge = Follow(
        follower_id=follower.id,
        following_id=target_id,
        status=FollowStatus.PENDING.value if is_private else FollowStatus.ACCEPTED.value,
    )
    db.add(edge)
    try:
        db.flush()
        if not is_private:
            adjust_follow_counters(db, follower_id=follower.id, following_id=target_id, delta=1)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already following this user") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Unable to follow user %s", target_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to follow user") from exc

    db.refresh(edge)
    if is_private:
        change_feed.publish_insert("follows", target_id, _edge_payload(edge))
    return edge


def unfollow_user(db: Session, *, follower: User, target_id: UUID) -> bool:
    """Delete the edge in whatever state it is; missing edges are a no-op."""

    edge = _get_edge(db, follower.id, target_id)
    if edge is None:
        return False

    was_accepted = edge.status == FollowStatus.ACCEPTED
    db.delete(edge)
    if was_accepted:
        adjust_follow_counters(db, follower_id=follower.id, following_id=target_id, delta=-1)
    _commit(db, "Unable to unfollow user")
    return True


def _pending_edge_or_404(db: Session, follower_id: UUID, following_id: UUID) -> Follow:
    edge = _get_edge(db, follower_id, following_id)
    if edge is None or edge.status != FollowStatus.PENDING:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Follow request not found")
    return edge


def accept_follow_request(db: Session, *, user: User, follower_id: UUID) -> Follow:
    edge = _pending_edge_or_404(db, follower_id, user.id)
    edge.status = FollowStatus.ACCEPTED.value
    adjust_follow_counters(db, follower_id=follower_id, following_id=user.id, delta=1)
    _commit(db, "Unable to accept follow request")
    db.refresh(edge)
    return edge


def reject_follow_request(db: Session, *, user: User, follower_id: UUID) -> None:
    edge = _pending_edge_or_404(db, follower_id, user.id)
    db.delete(edge)
    _commit(db, "Unable to reject follow request")


def get_follow_status(db: Session, *, viewer_id: UUID, target_id: UUID) -> FollowState:
    edge = _get_edge(db, viewer_id, target_id)
    if edge is None:
        return FollowState.NOT_FOLLOWING
    if edge.status == FollowStatus.ACCEPTED:
        return FollowState.FOLLOWING
    return FollowState.PENDING


def is_accepted_follower(db: Session, *, follower_id: UUID, following_id: UUID) -> bool:
    edge = _get_edge(db, follower_id, following_id)
    return edge is not None and edge.status == FollowStatus.ACCEPTED


def accepted_following_ids(db: Session, user_id: UUID) -> list[UUID]:
    return list(
        db.scalars(
            select(Follow.following_id).where(
                Follow.follower_id == user_id, Follow.status == FollowStatus.ACCEPTED.value
            )
        ).all()
    )


def _hydrate_edges(
    db: Session, edges: list[Follow], *, counterpart: Literal["follower", "following"]
) -> list[FollowEdgeResponse]:
    def _other(edge: Follow) -> UUID:
        return edge.follower_id if counterpart == "follower" else edge.following_id

    profiles = load_profile_summaries(db, (_other(edge) for edge in edges))
    return [
        FollowEdgeResponse.model_validate(edge).model_copy(update={"profile": profiles.get(_other(edge))})
        for edge in edges
    ]


def get_followers(db: Session, *, user_id: UUID) -> list[FollowEdgeResponse]:
    edges = db.scalars(
        select(Follow)
        .where(Follow.following_id == user_id, Follow.status == FollowStatus.ACCEPTED.value)
        .order_by(Follow.created_at.desc())
    ).all()
    return _hydrate_edges(db, list(edges), counterpart="follower")


def get_following(db: Session, *, user_id: UUID) -> list[FollowEdgeResponse]:
    edges = db.scalars(
        select(Follow)
        .where(Follow.follower_id == user_id, Follow.status == FollowStatus.ACCEPTED.value)
        .order_by(Follow.created_at.desc())
    ).all()
    return _hydrate_edges(db, list(edges), counterpart="following")


def get_pending_requests(db: Session, *, user_id: UUID) -> list[FollowEdgeResponse]:
    edges = db.scalars(
        select(Follow)
        .where(Follow.following_id == user_id, Follow.status == FollowStatus.PENDING.value)
        .order_by(Follow.created_at.desc())
    ).all()
    return _hydrate_edges(db, list(edges), counterpart="follower")


def get_pending_request(db: Session, edge_id: UUID) -> FollowEdgeResponse | None:
    """Re-read one pending edge for realtime delivery; None once it was resolved."""

    edge = db.get(Follow, edge_id)
    if edge is None or edge.status != FollowStatus.PENDING:
        return None
    return _hydrate_edges(db, [edge], counterpart="follower")[0]


__all__ = [
    "follow_user",
    "unfollow_user",
    "accept_follow_request",
    "reject_follow_request",
    "get_follow_status",
    "is_accepted_follower",
    "accepted_following_ids",
    "get_followers",
    "get_following",
    "get_pending_requests",
    "get_pending_request",
]
