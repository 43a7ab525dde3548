"""Integration tests for feed composition and visibility rules."""
from __future__ import annotations


def _post(client, content: str, visibility: str = "public") -> str:
    response = client.post("/posts", json={"content": content, "visibility": visibility})
    assert response.status_code == 201
    return response.json()["id"]


def _contents(response) -> list[str]:
    assert response.status_code == 200
    return [item["content"] for item in response.json()["items"]]


def test_home_feed_only_shows_public_posts_newest_first(authed_client, user_factory):
    client = authed_client(user_factory("asad"))
    _post(client, "old public")
    _post(client, "followers only", "followers-only")
    _post(client, "hidden", "private")
    _post(client, "new public")

    assert _contents(client.get("/feeds/home")) == ["new public", "old public"]
    assert _contents(client.get("/feeds/home", params={"limit": 1})) == ["new public"]


def test_following_feed_uses_accepted_edges_only(authed_client, user_factory):
    viewer = user_factory("bushra")
    friend = user_factory("chand")
    locked = user_factory("dua", is_private=True)
    stranger = user_factory("ehsan")

    _post(authed_client(friend), "friend public")
    _post(authed_client(friend), "friend circle", "followers-only")
    _post(authed_client(friend), "friend diary", "private")
    _post(authed_client(locked), "locked post")
    _post(authed_client(stranger), "stranger post")

    client = authed_client(viewer)
    client.post(f"/follows/{friend.id}")
    client.post(f"/follows/{locked.id}")

    assert _contents(client.get("/feeds/following")) == ["friend circle", "friend public"]

    authed_client(locked).post(f"/follows/requests/{viewer.id}/accept")
    assert "locked post" in _contents(authed_client(viewer).get("/feeds/following"))


def test_following_feed_is_empty_without_follows(authed_client, user_factory):
    assert authed_client(user_factory("faiza")).get("/feeds/following").json() == {"items": []}


def test_profile_page_respects_profile_and_post_visibility(authed_client, user_factory):
    owner = user_factory("ghani")
    follower = user_factory("hina")
    stranger = user_factory("imran")

    owner_client = authed_client(owner)
    _post(owner_client, "everyone")
    _post(owner_client, "circle", "followers-only")
    _post(owner_client, "me only", "private")
    authed_client(follower).post(f"/follows/{owner.id}")

    assert set(_contents(authed_client(owner).get(f"/feeds/profile/{owner.id}"))) == {"everyone", "circle", "me only"}
    assert set(_contents(authed_client(follower).get(f"/feeds/profile/{owner.id}"))) == {"everyone", "circle"}
    assert _contents(authed_client(stranger).get(f"/feeds/profile/{owner.id}")) == ["everyone"]

    authed_client(owner).patch("/profiles/me", json={"is_private": True})
    assert _contents(authed_client(stranger).get(f"/feeds/profile/{owner.id}")) == []
    assert set(_contents(authed_client(follower).get("/profiles/username/ghani/posts"))) == {"everyone", "circle"}


def test_hashtag_and_mention_feeds_match_exact_tokens(authed_client, user_factory):
    client = authed_client(user_factory("javeria"))
    _post(client, "learning #python with @kashif")
    _post(client, "notes on #py")
    _post(client, "private #python", "private")

    assert _contents(client.get("/feeds/hashtag/python")) == ["learning #python with @kashif"]
    assert _contents(client.get("/feeds/hashtag/%23py")) == ["notes on #py"]
    assert _contents(client.get("/feeds/mention/kashif")) == ["learning #python with @kashif"]
    assert _contents(client.get("/feeds/mention/kash")) == []


def test_trending_orders_by_likes(authed_client, user_factory):
    author = user_factory("laiba")
    fans = [user_factory(f"fan{index}") for index in range(2)]
    quiet = _post(authed_client(author), "quiet")
    popular = _post(authed_client(author), "popular")
    warm = _post(authed_client(author), "warm")

    for fan in fans:
        authed_client(fan).post(f"/posts/{popular}/like")
    authed_client(fans[0]).post(f"/posts/{warm}/like")

    ranked = [item["id"] for item in authed_client(author).get("/feeds/trending").json()["items"]]
    assert ranked == [popular, warm, quiet]


def test_trending_hashtags_count_public_posts(authed_client, user_factory):
    client = authed_client(user_factory("mansoor"))
    _post(client, "#AI and #python")
    _post(client, "more #python")
    _post(client, "#python in private", "private")

    tags = client.get("/feeds/hashtags/trending").json()["items"]
    assert tags[0] == {"tag": "python", "count": 2}
    assert {"tag": "ai", "count": 1} in tags

    for item in tags:
        assert len(_contents(client.get(f"/feeds/hashtag/{item['tag']}"))) == item["count"]


def test_hashtag_feed_ignores_case(authed_client, user_factory):
    client = authed_client(user_factory("noman"))
    _post(client, "#AI rocks")
    _post(client, "more #ai")

    assert _contents(client.get("/feeds/hashtag/ai")) == ["more #ai", "#AI rocks"]
    assert _contents(client.get("/feeds/hashtag/AI")) == ["more #ai", "#AI rocks"]


def test_non_ascii_hashtags_and_mentions_are_found(authed_client, user_factory):
    client = authed_client(user_factory("orooj"))
    post_id = _post(client, "coffee #café with @zoë")
    assert client.get(f"/posts/{post_id}").json()["hashtags"] == ["café"]

    assert _contents(client.get("/feeds/hashtag/café")) == ["coffee #café with @zoë"]
    assert _contents(client.get("/feeds/hashtag/CAFÉ")) == ["coffee #café with @zoë"]
    assert _contents(client.get("/feeds/mention/zoë")) == ["coffee #café with @zoë"]
    assert _contents(client.get("/feeds/hashtag/cafe")) == []


def test_activity_collects_likes_comments_and_followers(authed_client, user_factory):
    owner = user_factory("nida")
    fan = user_factory("osama")
    post_id = _post(authed_client(owner), "activity target")

    authed_client(owner).post(f"/posts/{post_id}/like")
    authed_client(fan).post(f"/posts/{post_id}/like")
    authed_client(fan).post(f"/posts/{post_id}/comments", json={"content": "nice"})
    authed_client(fan).post(f"/follows/{owner.id}")

    items = authed_client(owner).get("/feeds/activity").json()["items"]
    assert sorted(item["type"] for item in items) == ["comment", "follow", "like"]
    assert all(item["actor"]["username"] == "osama" for item in items)
    comment = next(item for item in items if item["type"] == "comment")
    assert comment["comment"] == "nice"
    assert comment["post"]["id"] == post_id
    assert items[0]["type"] == "follow"


def test_search_returns_posts_and_users(authed_client, user_factory):
    client = authed_client(user_factory("qamar"))
    user_factory("robotics_club")
    _post(client, "Robotics meetup on friday")
    _post(client, "robotics secrets", "private")

    body = client.get("/feeds/search", params={"q": "robotics"}).json()
    assert [item["content"] for item in body["posts"]] == ["Robotics meetup on friday"]
    assert [item["username"] for item in body["users"]] == ["robotics_club"]
    assert client.get("/feeds/search", params={"q": " "}).json() == {"posts": [], "users": []}


def test_explore_bundles_discovery_sections(authed_client, user_factory):
    viewer = user_factory("sana")
    user_factory("talha")
    _post(authed_client(viewer), "explore me #campus")

    body = authed_client(viewer).get("/feeds/explore").json()
    assert [item["content"] for item in body["latest"]] == ["explore me #campus"]
    assert [item["content"] for item in body["trending"]] == ["explore me #campus"]
    assert [item["username"] for item in body["suggested_users"]] == ["talha"]
    assert body["trending_hashtags"] == [{"tag": "campus", "count": 1}]
