"""Post, engagement and comment API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    PostCreate,
    PostFeedResponse,
    PostResponse,
    PostUpdate,
    ReactionListResponse,
    ReactionResponse,
    ReactionToggleRequest,
    ToggleResponse,
)
from ..services import (
    check_bookmark,
    check_like,
    create_comment,
    create_post,
    delete_post,
    edit_post,
    get_current_user,
    get_optional_user,
    get_post,
    list_bookmarks,
    list_comments,
    list_reactions,
    serialize_post,
    toggle_bookmark,
    toggle_like,
    toggle_reaction,
)
from ..services.hydration import load_profile_summaries

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    payload: PostCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostResponse:
    post = create_post(db, author=current_user, payload=payload)
    return serialize_post(db, post)


@router.get("/bookmarks", response_model=PostFeedResponse)
async def bookmarks_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostFeedResponse:
    return PostFeedResponse(items=list_bookmarks(db, user=current_user))


@router.get("/{post_id}", response_model=PostResponse)
async def get_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> PostResponse:
    post = get_post(db, post_id, viewer_id=viewer.id if viewer else None)
    return serialize_post(db, post)


@router.patch("/{post_id}", response_model=PostResponse)
async def edit_post_endpoint(
    post_id: UUID,
    payload: PostUpdate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostResponse:
    post = edit_post(db, editor=current_user, post_id=post_id, payload=payload)
    return serialize_post(db, post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    delete_post(db, actor=current_user, post_id=post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/like", response_model=ToggleResponse)
async def toggle_like_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ToggleResponse:
    return ToggleResponse(active=toggle_like(db, user=current_user, post_id=post_id))


@router.get("/{post_id}/like", response_model=ToggleResponse)
async def check_like_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ToggleResponse:
    return ToggleResponse(active=check_like(db, user_id=viewer.id if viewer else None, post_id=post_id))


@router.post("/{post_id}/reactions", response_model=ToggleResponse)
async def toggle_reaction_endpoint(
    post_id: UUID,
    payload: ReactionToggleRequest,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ToggleResponse:
    active = toggle_reaction(db, user=current_user, post_id=post_id, reaction_type=payload.reaction_type)
    return ToggleResponse(active=active)


@router.get("/{post_id}/reactions", response_model=ReactionListResponse)
async def list_reactions_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ReactionListResponse:
    reactions, counts = list_reactions(db, post_id=post_id, viewer_id=viewer.id if viewer else None)
    return ReactionListResponse(items=[ReactionResponse.model_validate(item) for item in reactions], counts=counts)


@router.post("/{post_id}/bookmark", response_model=ToggleResponse)
async def toggle_bookmark_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ToggleResponse:
    return ToggleResponse(active=toggle_bookmark(db, user=current_user, post_id=post_id))


@router.get("/{post_id}/bookmark", response_model=ToggleResponse)
async def check_bookmark_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ToggleResponse:
    return ToggleResponse(active=check_bookmark(db, user_id=viewer.id if viewer else None, post_id=post_id))


@router.get("/{post_id}/comments", response_model=CommentListResponse)
async def list_comments_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> CommentListResponse:
    return CommentListResponse(items=list_comments(db, post_id=post_id, viewer_id=viewer.id if viewer else None))


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment_endpoint(
    post_id: UUID,
    payload: CommentCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CommentResponse:
    comment = create_comment(
        db,
        author=current_user,
        post_id=post_id,
        content=payload.content,
        parent_id=payload.parent_id,
    )
    profile = load_profile_summaries(db, [comment.user_id]).get(comment.user_id)
    return CommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        user_id=comment.user_id,
        parent_id=comment.parent_id,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        profile=profile,
    )
