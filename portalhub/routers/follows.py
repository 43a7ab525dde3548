"""Follow management API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..constants import FollowState
from ..database import get_session
from ..models import User
from ..schemas import FollowListResponse, FollowResponse, FollowStatusResponse
from ..services import (
    accept_follow_request,
    follow_user,
    get_current_user,
    get_follow_status,
    get_followers,
    get_following,
    get_pending_requests,
    reject_follow_request,
    unfollow_user,
)

router = APIRouter(prefix="/follows", tags=["follows"])


@router.get("/requests", response_model=FollowListResponse)
async def pending_requests_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> FollowListResponse:
    return FollowListResponse(items=get_pending_requests(db, user_id=current_user.id))


@router.post("/requests/{follower_id}/accept", response_model=FollowResponse)
async def accept_request_endpoint(
    follower_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> FollowResponse:
    edge = accept_follow_request(db, user=current_user, follower_id=follower_id)
    return FollowResponse.model_validate(edge)


@router.post("/requests/{follower_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
async def reject_request_endpoint(
    follower_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    reject_follow_request(db, user=current_user, follower_id=follower_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/status/{target_id}", response_model=FollowStatusResponse)
async def follow_status_endpoint(
    target_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> FollowStatusResponse:
    state = get_follow_status(db, viewer_id=current_user.id, target_id=target_id)
    return FollowStatusResponse(user_id=target_id, status=state)


@router.post("/{target_id}", response_model=FollowResponse, status_code=status.HTTP_201_CREATED)
async def follow_user_endpoint(
    target_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> FollowResponse:
    return FollowResponse.model_validate(follow_user(db, follower=current_user, target_id=target_id))


@router.delete("/{target_id}", response_model=FollowStatusResponse)
async def unfollow_user_endpoint(
    target_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> FollowStatusResponse:
    unfollow_user(db, follower=current_user, target_id=target_id)
    return FollowStatusResponse(user_id=target_id, status=FollowState.NOT_FOLLOWING)


@router.get("/{user_id}/followers", response_model=FollowListResponse)
async def followers_endpoint(user_id: UUID, db: Session = Depends(get_session)) -> FollowListResponse:
    return FollowListResponse(items=get_followers(db, user_id=user_id))


@router.get("/{user_id}/following", response_model=FollowListResponse)
async def following_endpoint(user_id: UUID, db: Session = Depends(get_session)) -> FollowListResponse:
    return FollowListResponse(items=get_following(db, user_id=user_id))
