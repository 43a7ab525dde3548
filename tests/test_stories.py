"""Integration tests for stories and their advisory expiry."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from portalhub.database import SessionLocal
from portalhub.models import Story


def test_story_needs_exactly_one_body_field(authed_client, user_factory):
    client = authed_client(user_factory("umama"))
    assert client.post("/stories", json={}).status_code == 422
    assert client.post("/stories", json={"content": "hi", "image_url": "https://cdn.portal.io/x.png"}).status_code == 422

    created = client.post("/stories", json={"content": "  campus sunrise  "})
    assert created.status_code == 201
    body = created.json()
    assert body["content"] == "campus sunrise"
    assert body["is_active"] is True
    assert body["profile"]["username"] == "umama"


def test_expired_stories_are_kept_but_flagged(authed_client, user_factory):
    author = user_factory("vaneeza")
    client = authed_client(author)
    client.post("/stories", json={"content": "fresh"})

    with SessionLocal() as session:
        created = datetime.now(timezone.utc) - timedelta(hours=30)
        session.add(Story(user_id=author.id, content="stale", created_at=created, expires_at=created + timedelta(hours=24)))
        session.commit()

    everything = client.get("/stories").json()["items"]
    assert {(item["content"], item["is_active"]) for item in everything} == {("fresh", True), ("stale", False)}
    assert [item["content"] for item in client.get("/stories", params={"active_only": True}).json()["items"]] == ["fresh"]


def test_stories_filter_by_author(authed_client, user_factory):
    first = user_factory("wafa")
    second = user_factory("xavier")
    authed_client(first).post("/stories", json={"content": "from wafa"})
    authed_client(second).post("/stories", json={"content": "from xavier"})

    response = authed_client(first).get("/stories", params={"user_id": str(second.id)})
    assert [item["content"] for item in response.json()["items"]] == ["from xavier"]


def test_share_post_to_story_copies_media(authed_client, user_factory):
    author = user_factory("yahya")
    sharer = user_factory("zoya")
    post_id = authed_client(author).post(
        "/posts", json={"content": "look", "image_url": "https://cdn.portal.io/look.png"}
    ).json()["id"]

    shared = authed_client(sharer).post(f"/stories/share/{post_id}")
    assert shared.status_code == 201
    assert shared.json()["image_url"] == "https://cdn.portal.io/look.png"
    assert shared.json()["user_id"] == str(sharer.id)
    assert post_id in shared.json()["content"]

    hidden = authed_client(author).post("/posts", json={"content": "mine", "visibility": "private"}).json()["id"]
    assert authed_client(sharer).post(f"/stories/share/{hidden}").status_code == 404
