"""Profile setup, lookup, editing and discovery."""
from __future__ import annotations

import logging
from typing import Sequence
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import SEARCH_LIMIT, SUGGESTION_LIMIT
from ..models import Follow, Profile, User
from ..schemas import ProfileSetupRequest, ProfileUpdateRequest

logger = logging.getLogger(__name__)


def _username_taken(db: Session, username: str, *, exclude_user_id: UUID | None = None) -> bool:
    stmt = select(Profile.user_id).where(Profile.username == username)
    if exclude_user_id is not None:
        stmt = stmt.where(Profile.user_id != exclude_user_id)
    return db.scalar(stmt) is not None


def _strip(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _commit_profile(db: Session, profile: Profile, *, failure: str) -> Profile:
    try:
        db.commit()
        db.refresh(profile)
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(failure)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure) from exc
    return profile


def setup_profile(db: Session, *, user: User, payload: ProfileSetupRequest) -> Profile:
    """Complete account setup by creating the user's public profile."""

    if db.get(Profile, user.id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Profile already exists")
    if _username_taken(db, payload.username):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")

    profile = Profile(
        user_id=user.id,
        username=payload.username,
        full_name=payload.full_name.strip(),
        display_name=payload.display_name.strip(),
        dob=payload.dob,
        nutech_id=payload.nutech_id,
        department=_strip(payload.department),
        bio=_strip(payload.bio),
        phone_number=payload.phone_number,
        avatar_url=payload.avatar_url,
        is_private=payload.is_private,
    )
    db.add(profile)
    return _commit_profile(db, profile, failure="Unable to create profile")


def get_profile(db: Session, user_id: UUID) -> Profile:
    profile = db.get(Profile, user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


def get_profile_by_username(db: Session, username: str) -> Profile:
    profile = db.scalar(select(Profile).where(Profile.username == username.strip().lower()))
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


def update_profile(db: Session, *, user: User, payload: ProfileUpdateRequest) -> Profile:
    profile = get_profile(db, user.id)
    updates = payload.model_dump(exclude_unset=True)

    username = updates.get("username")
    if username and username != profile.username and _username_taken(db, username, exclude_user_id=user.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")

    for field, value in updates.items():
        if field == "is_private":
            if value is not None:
                profile.is_private = value
            continue
        if field in {"username", "full_name", "display_name"} and value is None:
            continue
        setattr(profile, field, _strip(value) if isinstance(value, str) else value)

    return _commit_profile(db, profile, failure="Unable to update profile")


def search_profiles(db: Session, query: str, *, limit: int = SEARCH_LIMIT) -> Sequence[Profile]:
    """Case-insensitive substring match on username, display name and full name."""

    term = (query or "").strip()
    if not term:
        return []
    pattern = f"%{term}%"
    stmt = (
        select(Profile)
        .where(
            or_(
                Profile.username.ilike(pattern),
                Profile.display_name.ilike(pattern),
                Profile.full_name.ilike(pattern),
            )
        )
        .order_by(Profile.username)
        .limit(limit)
    )
    return db.scalars(stmt).all()


def suggest_profiles(db: Session, *, viewer_id: UUID, limit: int = SUGGESTION_LIMIT) -> Sequence[Profile]:
    """Popular profiles the viewer has no follow edge towards."""

    followed = select(Follow.following_id).where(Follow.follower_id == viewer_id)
    stmt = (
        select(Profile)
        .where(Profile.user_id != viewer_id, Profile.user_id.not_in(followed))
        .order_by(Profile.followers_count.desc(), Profile.created_at.desc())
        .limit(limit)
    )
    return db.scalars(stmt).all()


__all__ = [
    "setup_profile",
    "get_profile",
    "get_profile_by_username",
    "update_profile",
    "search_profiles",
    "suggest_profiles",
]
