"""Chat group API routes and the live message socket."""
from __future__ import annotations

import json
import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from ..database import create_session, get_session
from ..models import User
from ..schemas import (
    GroupCreate,
    GroupListResponse,
    GroupMemberListResponse,
    GroupMemberResponse,
    GroupResponse,
    GroupUpdate,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
    RoleChangeRequest,
)
from ..services import (
    can_read_group,
    change_feed,
    change_role,
    create_group,
    delete_group,
    get_current_user,
    get_group,
    get_group_members,
    get_groups,
    get_message,
    get_messages,
    get_my_groups,
    get_optional_user,
    get_public_groups,
    join_group,
    leave_group,
    remove_member,
    resolve_websocket_user,
    send_message,
    update_group,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("", response_model=GroupListResponse)
async def list_groups_endpoint(
    public_only: bool = Query(default=False),
    db: Session = Depends(get_session),
) -> GroupListResponse:
    groups = get_public_groups(db) if public_only else get_groups(db)
    return GroupListResponse(items=[GroupResponse.model_validate(group) for group in groups])


@router.get("/mine", response_model=GroupListResponse)
async def my_groups_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> GroupListResponse:
    return GroupListResponse(items=[GroupResponse.model_validate(group) for group in get_my_groups(db, user=current_user)])


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group_endpoint(
    payload: GroupCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> GroupResponse:
    return GroupResponse.model_validate(create_group(db, creator=current_user, payload=payload))


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group_endpoint(group_id: UUID, db: Session = Depends(get_session)) -> GroupResponse:
    return GroupResponse.model_validate(get_group(db, group_id))


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group_endpoint(
    group_id: UUID,
    payload: GroupUpdate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> GroupResponse:
    return GroupResponse.model_validate(update_group(db, user=current_user, group_id=group_id, payload=payload))


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group_endpoint(
    group_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    delete_group(db, user=current_user, group_id=group_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{group_id}/members", response_model=GroupMemberListResponse)
async def list_members_endpoint(group_id: UUID, db: Session = Depends(get_session)) -> GroupMemberListResponse:
    return GroupMemberListResponse(items=get_group_members(db, group_id=group_id))


@router.post("/{group_id}/join", response_model=GroupMemberResponse, status_code=status.HTTP_201_CREATED)
async def join_group_endpoint(
    group_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> GroupMemberResponse:
    return GroupMemberResponse.model_validate(join_group(db, user=current_user, group_id=group_id))


@router.post("/{group_id}/leave", status_code=status.HTTP_204_NO_CONTENT)
async def leave_group_endpoint(
    group_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    leave_group(db, user=current_user, group_id=group_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{group_id}/members/{user_id}", response_model=GroupMemberResponse)
async def change_role_endpoint(
    group_id: UUID,
    user_id: UUID,
    payload: RoleChangeRequest,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> GroupMemberResponse:
    membership = change_role(db, actor=current_user, group_id=group_id, user_id=user_id, role=payload.role)
    return GroupMemberResponse.model_validate(membership)


@router.delete("/{group_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member_endpoint(
    group_id: UUID,
    user_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    remove_member(db, actor=current_user, group_id=group_id, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{group_id}/messages", response_model=MessageListResponse)
async def list_messages_endpoint(
    group_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> MessageListResponse:
    return MessageListResponse(items=get_messages(db, group_id=group_id, user=viewer))


@router.post("/{group_id}/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message_endpoint(
    group_id: UUID,
    payload: MessageCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    return send_message(db, sender=current_user, group_id=group_id, content=payload.content)


@router.websocket("/{group_id}/ws")
async def group_messages_socket(
    websocket: WebSocket,
    group_id: UUID,
    token: str = Query(..., alias="token"),
) -> None:
    with create_session() as db:
        user = resolve_websocket_user(db, token)
        try:
            messages = get_messages(db, group_id=group_id, user=user) if user is not None else None
        except HTTPException:
            messages = None
    if user is None or messages is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    user_id = user.id

    async def _deliver(record: dict[str, Any]) -> None:
        # Events carry ids only; re-read so the sender's profile is attached
        with create_session() as session:
            if not can_read_group(session, group_id, user_id):
                return
            try:
                message = get_message(session, UUID(record["id"]))
            except HTTPException:
                return
        await websocket.send_text(json.dumps({"type": "message", "message": message.model_dump(mode="json")}))

    subscription = await change_feed.subscribe("messages", group_id, _deliver)
    await websocket.send_text(json.dumps({"type": "ready", "group_id": str(group_id)}))
    try:
        while True:
            try:
                payload = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            if payload.strip().lower() == "ping":
                await websocket.send_text(json.dumps({"type": "pong", "group_id": str(group_id)}))
    finally:
        await change_feed.unsubscribe(subscription)
        logger.debug("Message socket for group %s closed", group_id)
