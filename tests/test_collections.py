"""Integration tests for saved-post collections."""
from __future__ import annotations


def test_collection_lifecycle(authed_client, user_factory):
    owner = user_factory("adeel")
    author = user_factory("beena")
    post_id = authed_client(author).post("/posts", json={"content": "save me"}).json()["id"]
    client = authed_client(owner)

    created = client.post("/collections", json={"name": "  Reading list  "})
    assert created.status_code == 201
    collection_id = created.json()["id"]
    assert created.json()["name"] == "Reading list"

    assert client.post(f"/collections/{collection_id}/items", json={"post_id": post_id}).status_code == 201
    duplicate = client.post(f"/collections/{collection_id}/items", json={"post_id": post_id})
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "Post already in collection"

    listing = client.get("/collections").json()["items"]
    assert [(item["name"], item["item_count"]) for item in listing] == [("Reading list", 1)]

    items = client.get(f"/collections/{collection_id}/items").json()["items"]
    assert [item["post"]["content"] for item in items] == ["save me"]
    assert items[0]["post"]["profile"]["username"] == "beena"

    assert client.delete(f"/collections/{collection_id}/items/{post_id}").status_code == 204
    assert client.get(f"/collections/{collection_id}/items").json()["items"] == []

    assert client.delete(f"/collections/{collection_id}").status_code == 204
    assert client.get("/collections").json()["items"] == []


def test_collections_are_private_to_their_owner(authed_client, user_factory):
    owner = user_factory("dawood")
    other = user_factory("emaan")
    collection_id = authed_client(owner).post("/collections", json={"name": "Mine"}).json()["id"]

    response = authed_client(other).get(f"/collections/{collection_id}/items")
    assert response.status_code == 404
    assert response.json()["detail"] == "Collection not found"
    assert authed_client(other).delete(f"/collections/{collection_id}").status_code == 404


def test_cannot_save_posts_the_owner_cannot_see(authed_client, user_factory):
    owner = user_factory("fahad")
    author = user_factory("gohar")
    hidden = authed_client(author).post("/posts", json={"content": "nope", "visibility": "private"}).json()["id"]
    collection_id = authed_client(owner).post("/collections", json={"name": "Stash"}).json()["id"]

    assert authed_client(owner).post(f"/collections/{collection_id}/items", json={"post_id": hidden}).status_code == 404


def test_deleted_posts_drop_out_of_collections(authed_client, user_factory):
    owner = user_factory("haleema")
    author = user_factory("ibrahim")
    post_id = authed_client(author).post("/posts", json={"content": "fleeting"}).json()["id"]
    collection_id = authed_client(owner).post("/collections", json={"name": "Temp"}).json()["id"]
    authed_client(owner).post(f"/collections/{collection_id}/items", json={"post_id": post_id})

    authed_client(author).delete(f"/posts/{post_id}")
    assert authed_client(owner).get(f"/collections/{collection_id}/items").json()["items"] == []
    assert authed_client(owner).get("/collections").json()["items"][0]["item_count"] == 0
