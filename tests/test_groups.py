"""Integration tests for chat groups, roles and messages."""
from __future__ import annotations

from uuid import UUID

import pytest
from fastapi import HTTPException
from starlette.websockets import WebSocketDisconnect

from portalhub.database import SessionLocal
from portalhub.models import GroupMember
from portalhub.services import create_access_token, join_group
from portalhub.services.group_service import LAST_ADMIN_DETAIL
from portalhub.services.realtime import change_feed


def _create_group(client, name: str = "Robotics", *, is_private: bool = False) -> dict:
    response = client.post("/groups", json={"name": name, "description": "Builders", "is_private": is_private})
    assert response.status_code == 201
    return response.json()


def test_creator_becomes_the_first_admin(authed_client, user_factory):
    creator = user_factory("jahan")
    group = _create_group(authed_client(creator))
    assert group["member_count"] == 1
    assert group["created_by"] == str(creator.id)

    members = authed_client(creator).get(f"/groups/{group['id']}/members").json()["items"]
    assert [(member["profile"]["username"], member["role"]) for member in members] == [("jahan", "admin")]
    assert [item["id"] for item in authed_client(creator).get("/groups/mine").json()["items"]] == [group["id"]]


def test_join_and_leave_public_group(authed_client, user_factory):
    creator = user_factory("khalid")
    member = user_factory("lina")
    group_id = _create_group(authed_client(creator))["id"]

    joined = authed_client(member).post(f"/groups/{group_id}/join")
    assert joined.status_code == 201
    assert joined.json()["role"] == "member"
    again = authed_client(member).post(f"/groups/{group_id}/join")
    assert again.status_code == 409
    assert again.json()["detail"] == "You are already a member of this group."
    assert authed_client(member).get(f"/groups/{group_id}").json()["member_count"] == 2

    assert authed_client(member).post(f"/groups/{group_id}/leave").status_code == 204
    assert authed_client(member).get(f"/groups/{group_id}").json()["member_count"] == 1
    assert authed_client(member).post(f"/groups/{group_id}/leave").status_code == 404


def test_private_groups_need_an_invitation(authed_client, user_factory):
    creator = user_factory("mustafa")
    outsider = user_factory("noor")
    group_id = _create_group(authed_client(creator), "Core team", is_private=True)["id"]

    response = authed_client(outsider).post(f"/groups/{group_id}/join")
    assert response.status_code == 403
    assert response.json()["detail"] == "This is a private group. You need an invitation to join."
    assert authed_client(outsider).get(f"/groups/{group_id}/messages").status_code == 403
    assert [g["id"] for g in authed_client(outsider).get("/groups", params={"public_only": True}).json()["items"]] == []


def test_last_admin_cannot_leave_or_be_demoted(authed_client, user_factory):
    admin = user_factory("owais")
    member = user_factory("parisa")
    group_id = _create_group(authed_client(admin))["id"]
    authed_client(member).post(f"/groups/{group_id}/join")

    leave = authed_client(admin).post(f"/groups/{group_id}/leave")
    assert leave.status_code == 400
    assert leave.json()["detail"] == LAST_ADMIN_DETAIL

    demote = authed_client(admin).patch(f"/groups/{group_id}/members/{admin.id}", json={"role": "member"})
    assert demote.status_code == 400

    promote = authed_client(admin).patch(f"/groups/{group_id}/members/{member.id}", json={"role": "admin"})
    assert promote.status_code == 200
    assert promote.json()["role"] == "admin"

    assert authed_client(admin).post(f"/groups/{group_id}/leave").status_code == 204
    members = authed_client(member).get(f"/groups/{group_id}/members").json()["items"]
    assert [(m["user_id"], m["role"]) for m in members] == [(str(member.id), "admin")]


def test_only_admins_manage_the_group(authed_client, user_factory):
    admin = user_factory("qudsia")
    member = user_factory("raheel")
    group_id = _create_group(authed_client(admin))["id"]
    authed_client(member).post(f"/groups/{group_id}/join")

    forbidden = authed_client(member).patch(f"/groups/{group_id}", json={"name": "Hijacked"})
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "Only group admins can do that"
    assert authed_client(member).delete(f"/groups/{group_id}/members/{admin.id}").status_code == 403

    renamed = authed_client(admin).patch(f"/groups/{group_id}", json={"name": "Robotics Society"})
    assert renamed.json()["name"] == "Robotics Society"

    assert authed_client(admin).delete(f"/groups/{group_id}/members/{member.id}").status_code == 204
    assert authed_client(admin).get(f"/groups/{group_id}").json()["member_count"] == 1

    assert authed_client(admin).delete(f"/groups/{group_id}").status_code == 204
    assert authed_client(admin).get(f"/groups/{group_id}").status_code == 404


def test_members_exchange_messages_and_inserts_are_published(authed_client, user_factory, monkeypatch):
    published: list[tuple[str, object]] = []
    monkeypatch.setattr(change_feed, "publish_insert", lambda table, key, record: published.append((table, key)) or True)

    admin = user_factory("sadia")
    member = user_factory("tahir")
    outsider = user_factory("uzma")
    group_id = _create_group(authed_client(admin))["id"]
    authed_client(member).post(f"/groups/{group_id}/join")

    sent = authed_client(member).post(f"/groups/{group_id}/messages", json={"content": "hello team"})
    assert sent.status_code == 201
    assert sent.json()["profile"]["username"] == "tahir"
    assert [table for table, _ in published] == ["messages"]
    assert str(published[0][1]) == group_id

    assert authed_client(outsider).post(f"/groups/{group_id}/messages", json={"content": "let me in"}).status_code == 403

    history = authed_client(outsider).get(f"/groups/{group_id}/messages").json()["items"]
    assert [message["content"] for message in history] == ["hello team"]


def test_message_socket_rejects_bad_tokens_and_outsiders(authed_client, user_factory):
    admin = user_factory("vajiha")
    outsider = user_factory("xara")
    client = authed_client(admin)
    group_id = _create_group(client, "Quiet room", is_private=True)["id"]

    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/groups/{group_id}/ws?token=not-a-jwt") as socket:
            socket.receive_json()

    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/groups/{group_id}/ws?token={create_access_token(outsider.id)}") as socket:
            socket.receive_json()


def test_message_socket_handshake_and_ping(authed_client, user_factory):
    admin = user_factory("waleed")
    client = authed_client(admin)
    group_id = _create_group(client)["id"]
    token = create_access_token(admin.id)

    with client.websocket_connect(f"/groups/{group_id}/ws?token={token}") as socket:
        assert socket.receive_json() == {"type": "ready", "group_id": group_id}
        assert change_feed.subscriber_count("messages", group_id) == 1
        socket.send_text("ping")
        assert socket.receive_json() == {"type": "pong", "group_id": group_id}


def test_message_socket_pushes_new_messages_with_sender_profile(authed_client, user_factory):
    admin = user_factory("yumna")
    member = user_factory("zohaib")
    group_id = _create_group(authed_client(admin), "Launch crew")["id"]
    assert authed_client(member).post(f"/groups/{group_id}/join").status_code == 201
    client = authed_client(admin)

    with client.websocket_connect(f"/groups/{group_id}/ws?token={create_access_token(member.id)}") as socket:
        assert socket.receive_json()["type"] == "ready"
        sent = client.post(f"/groups/{group_id}/messages", json={"content": "standup at ten"})
        assert sent.status_code == 201
        event = socket.receive_json()

    assert event["type"] == "message"
    assert event["message"]["id"] == sent.json()["id"]
    assert event["message"]["content"] == "standup at ten"
    assert event["message"]["profile"]["username"] == "yumna"


def test_removed_member_stops_receiving_private_messages(authed_client, user_factory):
    admin = user_factory("abida")
    member = user_factory("bilal")
    group_id = _create_group(authed_client(admin), "Core team")["id"]
    assert authed_client(member).post(f"/groups/{group_id}/join").status_code == 201
    client = authed_client(admin)
    assert client.patch(f"/groups/{group_id}", json={"is_private": True}).json()["is_private"] is True

    with client.websocket_connect(f"/groups/{group_id}/ws?token={create_access_token(member.id)}") as socket:
        assert socket.receive_json()["type"] == "ready"
        assert client.delete(f"/groups/{group_id}/members/{member.id}").status_code == 204
        assert client.post(f"/groups/{group_id}/messages", json={"content": "admins only now"}).status_code == 201

        socket.send_text("ping")
        assert socket.receive_json() == {"type": "pong", "group_id": group_id}


def test_duplicate_join_from_a_concurrent_writer_is_a_conflict(authed_client, user_factory):
    admin = user_factory("cyrus")
    member = user_factory("dua")
    group_id = UUID(_create_group(authed_client(admin), "Hackers")["id"])

    with SessionLocal() as session:
        session.add(GroupMember(group_id=group_id, user_id=member.id, role="member"))
        with pytest.raises(HTTPException) as caught:
            join_group(session, user=member, group_id=group_id)

    assert caught.value.status_code == 409
    assert authed_client(admin).get(f"/groups/{group_id}").json()["member_count"] == 1
