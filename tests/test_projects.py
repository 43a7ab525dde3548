"""Integration tests for the project showcase."""
from __future__ import annotations

from typing import Iterator

import pytest

from portalhub.services import project_service
from portalhub.services.storage_service import StorageUploadResult, resolve_bucket


@pytest.fixture
def fake_storage(monkeypatch) -> Iterator[dict[str, list]]:
    calls: dict[str, list] = {"uploads": [], "deletes": []}

    async def _fake_upload(file, *, bucket, user_id, key=None, client=None):
        bucket_name = resolve_bucket(bucket).value
        object_name = key or f"{user_id}/{file.filename}"
        file.file.seek(0)
        calls["uploads"].append((bucket_name, object_name, file.file.read()))
        return StorageUploadResult(
            url=f"https://cdn.portal.io/{bucket_name}/{object_name}",
            key=object_name,
            bucket=bucket_name,
            content_type=file.content_type or "application/octet-stream",
        )

    def _fake_delete(bucket, key, *, client=None):
        calls["deletes"].append((resolve_bucket(bucket).value, key))

    monkeypatch.setattr(project_service, "upload_file", _fake_upload)
    monkeypatch.setattr(project_service, "delete_object", _fake_delete)
    yield calls


def _create(client, title: str = "Campus Map", **extra) -> dict:
    payload = {"title": title, "technologies": ["React", "Python"], **extra}
    response = client.post("/projects", json=payload)
    assert response.status_code == 201
    return response.json()


def test_create_project_applies_defaults(authed_client, user_factory):
    owner = user_factory("yasmin")
    project = _create(authed_client(owner))
    assert project["license"] == "MIT"
    assert project["visibility"] == "public"
    assert project["is_private"] is False
    assert project["stars_count"] == 0
    assert project["profile"]["username"] == "yasmin"


def test_non_public_projects_are_hidden_from_others(authed_client, user_factory):
    owner = user_factory("zaid")
    other = user_factory("aleena")
    private = _create(authed_client(owner), "Private tool", visibility="private")
    internal = _create(authed_client(owner), "Internal tool", visibility="internal")
    assert private["is_private"] is True
    assert internal["is_private"] is True
    public = _create(authed_client(owner), "Open tool")

    assert authed_client(other).get(f"/projects/{private['id']}").status_code == 404
    assert authed_client(other).get(f"/projects/{internal['id']}").status_code == 404
    assert authed_client(owner).get(f"/projects/{private['id']}").status_code == 200

    assert [item["id"] for item in authed_client(other).get("/projects").json()["items"]] == [public["id"]]
    mine = authed_client(owner).get("/projects", params={"mine": True}).json()["items"]
    assert {item["title"] for item in mine} == {"Private tool", "Internal tool", "Open tool"}


def test_filter_projects_by_technology(authed_client, user_factory):
    client = authed_client(user_factory("babar"))
    _create(client, "Web app", technologies=["React", "TypeScript"])
    _create(client, "Script", technologies=["Python"])
    _create(client, "Bot", technologies=["Élixir"])

    titles = [item["title"] for item in client.get("/projects", params={"technology": "Python"}).json()["items"]]
    assert titles == ["Script"]
    assert client.get("/projects", params={"technology": "Type"}).json()["items"] == []
    assert [item["title"] for item in client.get("/projects", params={"technology": "Élixir"}).json()["items"]] == ["Bot"]


def test_only_the_owner_can_update_or_delete(authed_client, user_factory):
    owner = user_factory("daniyal")
    other = user_factory("esha")
    project_id = _create(authed_client(owner))["id"]

    forbidden = authed_client(other).patch(f"/projects/{project_id}", json={"title": "Mine now"})
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "Only the project owner can do that"

    updated = authed_client(owner).patch(f"/projects/{project_id}", json={"visibility": "private", "license": "GPL-3.0"})
    assert updated.json()["is_private"] is True
    assert updated.json()["license"] == "GPL-3.0"

    assert authed_client(other).delete(f"/projects/{project_id}").status_code == 403
    assert authed_client(owner).delete(f"/projects/{project_id}").status_code == 204


def test_star_toggle_and_fork(authed_client, user_factory):
    owner = user_factory("faisal")
    fan = user_factory("gulnaz")
    project_id = _create(authed_client(owner), readme_content="# Campus Map")["id"]
    client = authed_client(fan)

    assert client.post(f"/projects/{project_id}/star").json()["active"] is True
    assert client.get(f"/projects/{project_id}/star").json()["active"] is True
    assert client.get(f"/projects/{project_id}").json()["stars_count"] == 1
    assert client.post(f"/projects/{project_id}/star").json()["active"] is False
    assert client.get(f"/projects/{project_id}").json()["stars_count"] == 0

    fork = client.post(f"/projects/{project_id}/fork")
    assert fork.status_code == 201
    assert fork.json()["title"] == "Campus Map (Fork)"
    assert fork.json()["forked_from"] == project_id
    assert fork.json()["user_id"] == str(fan.id)
    assert client.get(f"/projects/{project_id}").json()["forks_count"] == 1


def test_downloads_are_counted(authed_client, user_factory):
    owner = user_factory("hassan")
    visitor = user_factory("huma")
    project_id = _create(authed_client(owner))["id"]
    client = authed_client(visitor)

    first = client.post(f"/projects/{project_id}/downloads", headers={"User-Agent": "pytest"})
    assert first.status_code == 200
    assert first.json()["downloads_count"] == 1
    assert client.post(f"/projects/{project_id}/downloads").json()["downloads_count"] == 2


def test_project_files_upload_list_and_delete(authed_client, user_factory, fake_storage):
    owner = user_factory("iman")
    other = user_factory("junaid")
    project_id = _create(authed_client(owner))["id"]
    client = authed_client(owner)

    uploaded = client.post(
        f"/projects/{project_id}/files",
        files={"file": ("main.py", b"print('hi')", "text/x-python")},
        data={"file_path": "src/../src/main.py"},
    )
    assert uploaded.status_code == 201
    body = uploaded.json()
    assert body["file_path"] == "src/src/main.py"
    assert body["file_type"] == "text"
    assert body["file_size"] == len(b"print('hi')")
    assert fake_storage["uploads"] == [("project-files", f"{project_id}/src/src/main.py", b"print('hi')")]

    assert authed_client(other).post(
        f"/projects/{project_id}/files", files={"file": ("x.txt", b"x", "text/plain")}
    ).status_code == 403

    files = authed_client(other).get(f"/projects/{project_id}/files").json()["items"]
    assert [item["file_name"] for item in files] == ["main.py"]

    assert authed_client(other).delete(f"/projects/files/{body['id']}").status_code == 403
    assert authed_client(owner).delete(f"/projects/files/{body['id']}").status_code == 204
    assert fake_storage["deletes"] == [("project-files", f"{project_id}/src/src/main.py")]
    assert authed_client(owner).get(f"/projects/{project_id}/files").json()["items"] == []


def test_project_image_upload(authed_client, user_factory, fake_storage):
    owner = user_factory("kinza")
    response = authed_client(owner).post("/projects/images", files={"file": ("cover.png", b"png", "image/png")})
    assert response.status_code == 201
    assert response.json()["bucket"] == "project-images"
    assert response.json()["key"] == f"{owner.id}/cover.png"


def test_technology_catalogue(anonymous):
    names = [item["name"] for item in anonymous.get("/projects/technologies").json()["items"]]
    assert names == ["React", "TypeScript", "JavaScript", "Node.js", "Python"]
