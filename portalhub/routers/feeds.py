"""Composed feed API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..constants import TRENDING_LIMIT
from ..database import get_session
from ..models import User
from ..schemas import (
    ActivityFeedResponse,
    ExploreResponse,
    PostFeedResponse,
    ProfileResponse,
    SearchResponse,
    TrendingHashtagsResponse,
)
from ..services import (
    activity_feed,
    following_feed,
    get_current_user,
    get_optional_user,
    home_feed,
    latest_posts,
    posts_by_hashtag,
    posts_by_mention,
    profile_posts,
    search,
    suggest_profiles,
    trending_hashtags,
    trending_posts,
)

router = APIRouter(prefix="/feeds", tags=["feeds"])


@router.get("/home", response_model=PostFeedResponse)
async def home_feed_endpoint(
    limit: int | None = Query(default=None, ge=1, le=200),
    db: Session = Depends(get_session),
) -> PostFeedResponse:
    return PostFeedResponse(items=home_feed(db, limit=limit))


@router.get("/following", response_model=PostFeedResponse)
async def following_feed_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostFeedResponse:
    return PostFeedResponse(items=following_feed(db, viewer=current_user))


@router.get("/trending", response_model=PostFeedResponse)
async def trending_endpoint(
    limit: int = Query(default=TRENDING_LIMIT, ge=1, le=100),
    db: Session = Depends(get_session),
) -> PostFeedResponse:
    return PostFeedResponse(items=trending_posts(db, limit=limit))


@router.get("/latest", response_model=PostFeedResponse)
async def latest_endpoint(
    limit: int = Query(default=TRENDING_LIMIT, ge=1, le=100),
    db: Session = Depends(get_session),
) -> PostFeedResponse:
    return PostFeedResponse(items=latest_posts(db, limit=limit))


@router.get("/explore", response_model=ExploreResponse)
async def explore_endpoint(
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ExploreResponse:
    suggested = suggest_profiles(db, viewer_id=viewer.id) if viewer else []
    return ExploreResponse(
        trending=trending_posts(db),
        latest=latest_posts(db),
        suggested_users=[ProfileResponse.model_validate(profile) for profile in suggested],
        trending_hashtags=trending_hashtags(db),
    )


@router.get("/hashtags/trending", response_model=TrendingHashtagsResponse)
async def trending_hashtags_endpoint(
    limit: int = Query(default=10, ge=1, le=50),
    db: Session = Depends(get_session),
) -> TrendingHashtagsResponse:
    return TrendingHashtagsResponse(items=trending_hashtags(db, limit=limit))


@router.get("/hashtag/{tag}", response_model=PostFeedResponse)
async def hashtag_feed_endpoint(tag: str, db: Session = Depends(get_session)) -> PostFeedResponse:
    return PostFeedResponse(items=posts_by_hashtag(db, tag))


@router.get("/mention/{username}", response_model=PostFeedResponse)
async def mention_feed_endpoint(username: str, db: Session = Depends(get_session)) -> PostFeedResponse:
    return PostFeedResponse(items=posts_by_mention(db, username))


@router.get("/profile/{user_id}", response_model=PostFeedResponse)
async def profile_feed_endpoint(
    user_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> PostFeedResponse:
    return PostFeedResponse(items=profile_posts(db, owner_id=user_id, viewer_id=viewer.id if viewer else None))


@router.get("/activity", response_model=ActivityFeedResponse)
async def activity_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ActivityFeedResponse:
    return ActivityFeedResponse(items=activity_feed(db, user=current_user))


@router.get("/search", response_model=SearchResponse)
async def search_endpoint(
    q: str = Query(default="", max_length=100),
    db: Session = Depends(get_session),
) -> SearchResponse:
    posts, users = search(db, q)
    return SearchResponse(posts=posts, users=users)
