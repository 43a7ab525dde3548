"""Integration tests for post authoring, engagement and comments."""
from __future__ import annotations

from uuid import UUID

import pytest
from fastapi import HTTPException

from portalhub.database import SessionLocal
from portalhub.models import Post, PostLike
from portalhub.services import extract_hashtags, extract_mentions, toggle_like


def _likes(post_id: str) -> int:
    with SessionLocal() as session:
        return session.get(Post, UUID(post_id)).likes_count


def test_hashtags_and_mentions_are_extracted_in_order():
    content = "Shipping #fastapi with @ali and #python_3 today @sara!"
    assert extract_hashtags(content) == ["fastapi", "python_3"]
    assert extract_mentions(content) == ["ali", "sara"]
    assert extract_hashtags(None) == []


def test_create_post_derives_tags_and_defaults(authed_client, user_factory):
    author = user_factory("wajid")
    response = authed_client(author).post("/posts", json={"content": "Demo day #showcase with @yasir"})
    assert response.status_code == 201
    body = response.json()
    assert body["hashtags"] == ["showcase"]
    assert body["mentions"] == ["yasir"]
    assert body["visibility"] == "public"
    assert body["is_private"] is False
    assert body["likes_count"] == 0
    assert body["edit_history"] == []
    assert body["profile"]["username"] == "wajid"


def test_create_post_requires_a_body(authed_client, user_factory):
    client = authed_client(user_factory("xenia"))
    assert client.post("/posts", json={"content": "   "}).status_code == 422
    assert client.post("/posts", json={"image_url": "https://cdn.portal.io/a.png"}).status_code == 201


def test_legacy_private_flag_maps_to_private_visibility(authed_client, user_factory):
    response = authed_client(user_factory("yusra")).post("/posts", json={"content": "note", "is_private": True})
    assert response.json()["visibility"] == "private"
    assert response.json()["is_private"] is True


def test_edit_history_records_previous_versions(authed_client, user_factory):
    author = user_factory("zubair")
    client = authed_client(author)
    created = client.post("/posts", json={"content": "first #draft"}).json()

    first_edit = client.patch(f"/posts/{created['id']}", json={"content": "second #final"})
    assert first_edit.status_code == 200
    body = first_edit.json()
    assert body["content"] == "second #final"
    assert body["hashtags"] == ["final"]
    assert body["edited_at"] is not None
    assert [entry["content"] for entry in body["edit_history"]] == ["first #draft"]
    assert body["edit_history"][0]["visibility"] == "public"

    second_edit = client.patch(f"/posts/{created['id']}", json={"visibility": "followers-only"}).json()
    assert [entry["content"] for entry in second_edit["edit_history"]] == ["first #draft", "second #final"]
    assert second_edit["visibility"] == "followers-only"
    assert second_edit["content"] == "second #final"


def test_only_the_author_may_edit_or_delete(authed_client, user_factory):
    author = user_factory("amna")
    intruder = user_factory("bilal")
    post_id = authed_client(author).post("/posts", json={"content": "mine"}).json()["id"]

    edit = authed_client(intruder).patch(f"/posts/{post_id}", json={"content": "yours"})
    assert edit.status_code == 404
    assert edit.json()["detail"] == "Post not found or you do not have permission to edit"
    assert authed_client(intruder).delete(f"/posts/{post_id}").status_code == 403

    assert authed_client(author).delete(f"/posts/{post_id}").status_code == 204
    assert authed_client(author).get(f"/posts/{post_id}").status_code == 404


def test_edit_cannot_strip_the_last_body_field(authed_client, user_factory):
    client = authed_client(user_factory("danish"))
    post_id = client.post("/posts", json={"content": "only text"}).json()["id"]
    response = client.patch(f"/posts/{post_id}", json={"content": ""})
    assert response.status_code == 422
    assert client.get(f"/posts/{post_id}").json()["content"] == "only text"


def test_like_toggle_parity_keeps_counter_in_sync(authed_client, user_factory):
    author = user_factory("erum")
    fan = user_factory("faraz")
    post_id = authed_client(author).post("/posts", json={"content": "like me"}).json()["id"]
    client = authed_client(fan)

    for attempt in range(1, 6):
        state = client.post(f"/posts/{post_id}/like").json()["active"]
        assert state is (attempt % 2 == 1)
        assert _likes(post_id) == (1 if state else 0)
        assert client.get(f"/posts/{post_id}/like").json()["active"] is state


def test_private_posts_are_hidden_from_others(authed_client, user_factory):
    author = user_factory("ghazal")
    other = user_factory("haris")
    post_id = authed_client(author).post("/posts", json={"content": "secret", "visibility": "private"}).json()["id"]

    assert authed_client(author).get(f"/posts/{post_id}").status_code == 200
    assert authed_client(other).get(f"/posts/{post_id}").status_code == 404
    assert authed_client(other).post(f"/posts/{post_id}/like").status_code == 404


def test_reactions_toggle_per_type_and_are_counted(authed_client, user_factory):
    author = user_factory("irfan")
    fan = user_factory("jamila")
    post_id = authed_client(author).post("/posts", json={"content": "react"}).json()["id"]

    assert authed_client(fan).post(f"/posts/{post_id}/reactions", json={"reaction_type": "love"}).json()["active"] is True
    assert authed_client(fan).post(f"/posts/{post_id}/reactions", json={"reaction_type": "wow"}).json()["active"] is True
    assert authed_client(author).post(f"/posts/{post_id}/reactions", json={"reaction_type": "love"}).json()["active"] is True

    listing = authed_client(author).get(f"/posts/{post_id}/reactions").json()
    assert listing["counts"] == {"love": 2, "wow": 1}
    assert len(listing["items"]) == 3

    assert authed_client(fan).post(f"/posts/{post_id}/reactions", json={"reaction_type": "love"}).json()["active"] is False
    assert authed_client(author).get(f"/posts/{post_id}/reactions").json()["counts"] == {"love": 1, "wow": 1}

    assert authed_client(fan).post(f"/posts/{post_id}/reactions", json={"reaction_type": "meh"}).status_code == 422


def test_bookmarks_toggle_and_list(authed_client, user_factory):
    author = user_factory("kamal")
    reader = user_factory("lubna")
    first = authed_client(author).post("/posts", json={"content": "one"}).json()["id"]
    second = authed_client(author).post("/posts", json={"content": "two"}).json()["id"]
    client = authed_client(reader)

    assert client.post(f"/posts/{first}/bookmark").json()["active"] is True
    assert client.post(f"/posts/{second}/bookmark").json()["active"] is True
    assert client.get(f"/posts/{first}/bookmark").json()["active"] is True
    assert {item["id"] for item in client.get("/posts/bookmarks").json()["items"]} == {first, second}

    assert client.post(f"/posts/{first}/bookmark").json()["active"] is False
    assert [item["id"] for item in client.get("/posts/bookmarks").json()["items"]] == [second]


def test_comments_form_a_tree_and_bump_the_counter(authed_client, user_factory):
    author = user_factory("mehak")
    commenter = user_factory("naveed")
    post_id = authed_client(author).post("/posts", json={"content": "thread"}).json()["id"]
    client = authed_client(commenter)

    root = client.post(f"/posts/{post_id}/comments", json={"content": "first!"})
    assert root.status_code == 201
    assert root.json()["profile"]["username"] == "naveed"
    root_id = root.json()["id"]
    reply = client.post(f"/posts/{post_id}/comments", json={"content": "replying", "parent_id": root_id})
    assert reply.status_code == 201

    tree = client.get(f"/posts/{post_id}/comments").json()["items"]
    assert len(tree) == 1
    assert tree[0]["id"] == root_id
    assert [child["content"] for child in tree[0]["replies"]] == ["replying"]
    assert client.get(f"/posts/{post_id}").json()["comments_count"] == 2

    other_post = authed_client(author).post("/posts", json={"content": "elsewhere"}).json()["id"]
    stray = authed_client(commenter).post(f"/posts/{other_post}/comments", json={"content": "x", "parent_id": root_id})
    assert stray.status_code == 400
    assert stray.json()["detail"] == "Parent comment not found on this post"


def test_deleting_a_post_removes_its_engagement(authed_client, user_factory):
    author = user_factory("omer")
    fan = user_factory("pari")
    post_id = authed_client(author).post("/posts", json={"content": "short lived"}).json()["id"]
    authed_client(fan).post(f"/posts/{post_id}/like")
    authed_client(fan).post(f"/posts/{post_id}/bookmark")
    authed_client(fan).post(f"/posts/{post_id}/comments", json={"content": "bye"})

    assert authed_client(author).delete(f"/posts/{post_id}").status_code == 204
    assert authed_client(fan).get("/posts/bookmarks").json()["items"] == []


def test_duplicate_like_from_a_concurrent_writer_is_a_conflict(authed_client, user_factory):
    author = user_factory("shazia")
    fan = user_factory("tariq")
    post_id = authed_client(author).post("/posts", json={"content": "race me"}).json()["id"]

    with SessionLocal() as session:
        # A competing insert the existence check cannot see yet
        session.add(PostLike(post_id=UUID(post_id), user_id=fan.id))
        with pytest.raises(HTTPException) as caught:
            toggle_like(session, user=fan, post_id=UUID(post_id))

    assert caught.value.status_code == 409
    assert _likes(post_id) == 0
