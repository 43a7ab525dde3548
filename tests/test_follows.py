"""Integration tests for the follow state machine and its counters."""
from __future__ import annotations

from portalhub.database import SessionLocal
from portalhub.models import Profile
from portalhub.services.realtime import change_feed


def _counts(user_id) -> tuple[int, int]:
    with SessionLocal() as session:
        profile = session.get(Profile, user_id)
        return profile.followers_count, profile.following_count


def test_following_a_public_profile_is_immediate(authed_client, user_factory):
    follower = user_factory("maha")
    target = user_factory("nabeel")
    client = authed_client(follower)

    response = client.post(f"/follows/{target.id}")
    assert response.status_code == 201
    assert response.json()["status"] == "accepted"
    assert client.get(f"/follows/status/{target.id}").json()["status"] == "following"
    assert _counts(target.id) == (1, 0)
    assert _counts(follower.id) == (0, 1)

    followers = client.get(f"/follows/{target.id}/followers").json()["items"]
    assert [edge["profile"]["username"] for edge in followers] == ["maha"]

    unfollow = client.delete(f"/follows/{target.id}")
    assert unfollow.status_code == 200
    assert unfollow.json()["status"] == "not_following"
    assert _counts(target.id) == (0, 0)
    assert _counts(follower.id) == (0, 0)

    # Unfollowing again is a no-op
    assert client.delete(f"/follows/{target.id}").status_code == 200
    assert _counts(target.id) == (0, 0)


def test_private_profile_creates_pending_request_until_accepted(authed_client, user_factory, monkeypatch):
    published: list[tuple[str, object, dict]] = []
    monkeypatch.setattr(change_feed, "publish_insert", lambda table, key, record: published.append((table, key, record)) or True)

    follower = user_factory("omar")
    target = user_factory("parveen", is_private=True)

    response = authed_client(follower).post(f"/follows/{target.id}")
    assert response.status_code == 201
    assert response.json()["status"] == "pending"
    assert authed_client(follower).get(f"/follows/status/{target.id}").json()["status"] == "pending"
    assert _counts(target.id) == (0, 0)
    assert [(table, key) for table, key, _ in published] == [("follows", target.id)]
    assert published[0][2]["follower_id"] == str(follower.id)

    requests = authed_client(target).get("/follows/requests").json()["items"]
    assert [edge["profile"]["username"] for edge in requests] == ["omar"]

    accepted = authed_client(target).post(f"/follows/requests/{follower.id}/accept")
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"
    assert _counts(target.id) == (1, 0)
    assert _counts(follower.id) == (0, 1)
    assert authed_client(target).get("/follows/requests").json()["items"] == []

    # Accepting twice finds no pending request
    assert authed_client(target).post(f"/follows/requests/{follower.id}/accept").status_code == 404


def test_rejecting_a_request_removes_the_edge(authed_client, user_factory):
    follower = user_factory("qasim")
    target = user_factory("rabia", is_private=True)

    authed_client(follower).post(f"/follows/{target.id}")
    assert authed_client(target).post(f"/follows/requests/{follower.id}/reject").status_code == 204
    assert authed_client(follower).get(f"/follows/status/{target.id}").json()["status"] == "not_following"
    assert _counts(target.id) == (0, 0)

    # A rejected follower may ask again
    assert authed_client(follower).post(f"/follows/{target.id}").status_code == 201


def test_cancelling_a_pending_request_leaves_counters_untouched(authed_client, user_factory):
    follower = user_factory("saad")
    target = user_factory("tania", is_private=True)
    client = authed_client(follower)

    client.post(f"/follows/{target.id}")
    assert client.delete(f"/follows/{target.id}").status_code == 200
    assert _counts(target.id) == (0, 0)
    assert _counts(follower.id) == (0, 0)


def test_follow_rejects_self_unknown_and_duplicate_targets(authed_client, user_factory):
    follower = user_factory("umar")
    target = user_factory("vania")
    client = authed_client(follower)

    self_follow = client.post(f"/follows/{follower.id}")
    assert self_follow.status_code == 400
    assert self_follow.json()["detail"] == "Cannot follow yourself"

    assert client.post("/follows/00000000-0000-0000-0000-000000000000").status_code == 404

    assert client.post(f"/follows/{target.id}").status_code == 201
    duplicate = client.post(f"/follows/{target.id}")
    assert duplicate.status_code == 409
    assert _counts(target.id) == (1, 0)
