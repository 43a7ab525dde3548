"""Story API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import StoryCreate, StoryListResponse, StoryResponse
from ..services import create_story, get_current_user, list_stories, share_post_to_story
from ..services.story_service import serialize_stories

router = APIRouter(prefix="/stories", tags=["stories"])


@router.get("", response_model=StoryListResponse)
async def list_stories_endpoint(
    active_only: bool = Query(default=False),
    user_id: UUID | None = Query(default=None),
    db: Session = Depends(get_session),
) -> StoryListResponse:
    return StoryListResponse(items=list_stories(db, active_only=active_only, user_id=user_id))


@router.post("", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def create_story_endpoint(
    payload: StoryCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> StoryResponse:
    story = create_story(db, author=current_user, payload=payload)
    return serialize_stories(db, [story])[0]


@router.post("/share/{post_id}", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def share_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> StoryResponse:
    story = share_post_to_story(db, user=current_user, post_id=post_id)
    return serialize_stories(db, [story])[0]
