"""Notification summary and the live follow-request socket."""
from __future__ import annotations

import json
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from ..database import create_session, get_session
from ..models import User
from ..schemas import NotificationSummaryResponse
from ..services import (
    activity_feed,
    change_feed,
    get_current_user,
    get_pending_request,
    get_pending_requests,
    resolve_websocket_user,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/summary", response_model=NotificationSummaryResponse)
async def notification_summary_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationSummaryResponse:
    pending = get_pending_requests(db, user_id=current_user.id)
    return NotificationSummaryResponse(
        pending_requests=pending,
        activity=activity_feed(db, user=current_user),
        pending_count=len(pending),
    )


@router.websocket("/ws")
async def notifications_socket(
    websocket: WebSocket,
    token: str = Query(..., alias="token"),
) -> None:
    with create_session() as db:
        user = resolve_websocket_user(db, token)
        user_id = user.id if user is not None else None
    if user_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    async def _deliver(record: dict[str, Any]) -> None:
        with create_session() as session:
            request = get_pending_request(session, UUID(record["id"]))
        if request is None:
            return
        await websocket.send_text(json.dumps({"type": "follow_request", "request": request.model_dump(mode="json")}))

    subscription = await change_feed.subscribe("follows", user_id, _deliver)
    await websocket.send_text(json.dumps({"type": "ready"}))
    try:
        while True:
            try:
                payload = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            if payload.strip().lower() == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
    finally:
        await change_feed.unsubscribe(subscription)
