"""Profile API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    OwnProfileResponse,
    PostFeedResponse,
    ProfileListResponse,
    ProfileResponse,
    ProfileSetupRequest,
    ProfileUpdateRequest,
)
from ..services import (
    get_current_user,
    get_optional_user,
    get_profile,
    get_profile_by_username,
    profile_posts,
    search_profiles,
    setup_profile,
    suggest_profiles,
    update_profile,
)

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("", response_model=OwnProfileResponse, status_code=status.HTTP_201_CREATED)
async def setup_profile_endpoint(
    payload: ProfileSetupRequest,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> OwnProfileResponse:
    profile = setup_profile(db, user=current_user, payload=payload)
    return OwnProfileResponse.model_validate(profile)


@router.get("/me", response_model=OwnProfileResponse)
async def my_profile_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> OwnProfileResponse:
    return OwnProfileResponse.model_validate(get_profile(db, current_user.id))


@router.patch("/me", response_model=OwnProfileResponse)
async def update_profile_endpoint(
    payload: ProfileUpdateRequest,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> OwnProfileResponse:
    profile = update_profile(db, user=current_user, payload=payload)
    return OwnProfileResponse.model_validate(profile)


@router.get("/search", response_model=ProfileListResponse)
async def search_profiles_endpoint(
    q: str = Query(default="", max_length=100),
    db: Session = Depends(get_session),
) -> ProfileListResponse:
    return ProfileListResponse(items=[ProfileResponse.model_validate(item) for item in search_profiles(db, q)])


@router.get("/suggestions", response_model=ProfileListResponse)
async def suggested_profiles_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ProfileListResponse:
    profiles = suggest_profiles(db, viewer_id=current_user.id)
    return ProfileListResponse(items=[ProfileResponse.model_validate(item) for item in profiles])


@router.get("/username/{username}", response_model=ProfileResponse)
async def profile_by_username_endpoint(username: str, db: Session = Depends(get_session)) -> ProfileResponse:
    return ProfileResponse.model_validate(get_profile_by_username(db, username))


@router.get("/username/{username}/posts", response_model=PostFeedResponse)
async def profile_posts_endpoint(
    username: str,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> PostFeedResponse:
    profile = get_profile_by_username(db, username)
    items = profile_posts(db, owner_id=profile.user_id, viewer_id=viewer.id if viewer else None)
    return PostFeedResponse(items=items)


@router.get("/{user_id}", response_model=ProfileResponse)
async def profile_endpoint(user_id: UUID, db: Session = Depends(get_session)) -> ProfileResponse:
    return ProfileResponse.model_validate(get_profile(db, user_id))
