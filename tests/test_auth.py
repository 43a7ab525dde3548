"""Integration tests for account sign-up, sign-in and password recovery."""
from __future__ import annotations

from urllib.parse import parse_qs, urlparse

from portalhub.services import auth_service


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_sign_up_then_sign_in_reports_profile_state(anonymous):
    response = anonymous.post("/auth/sign-up", json={"email": "Ana@Portal.io", "password": "secret123"})
    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["has_profile"] is False

    me = anonymous.get("/auth/me", headers=_bearer(body["access_token"]))
    assert me.status_code == 200
    assert me.json()["email"] == "ana@portal.io"

    setup = anonymous.post(
        "/profiles",
        json={"username": "ana_dev", "full_name": "Ana Developer", "display_name": "Ana"},
        headers=_bearer(body["access_token"]),
    )
    assert setup.status_code == 201

    sign_in = anonymous.post("/auth/sign-in", json={"email": "ana@portal.io", "password": "secret123"})
    assert sign_in.status_code == 200
    assert sign_in.json()["has_profile"] is True
    assert sign_in.json()["user_id"] == body["user_id"]


def test_duplicate_email_and_bad_credentials_are_rejected(anonymous):
    assert anonymous.post("/auth/sign-up", json={"email": "bo@portal.io", "password": "secret123"}).status_code == 201

    duplicate = anonymous.post("/auth/sign-up", json={"email": "BO@portal.io", "password": "another1"})
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "Email already registered"

    wrong = anonymous.post("/auth/sign-in", json={"email": "bo@portal.io", "password": "nope-nope"})
    assert wrong.status_code == 401
    assert wrong.json()["detail"] == "Invalid credentials"


def test_protected_routes_require_a_token(anonymous):
    assert anonymous.get("/auth/me").status_code == 401
    assert anonymous.get("/auth/me", headers=_bearer("not-a-jwt")).status_code == 401


def test_password_reset_link_works_exactly_once(anonymous, monkeypatch):
    sent: list[tuple[str, str]] = []
    monkeypatch.setattr(auth_service, "send_password_reset_email", lambda to, link: sent.append((to, link)))

    anonymous.post("/auth/sign-up", json={"email": "cy@portal.io", "password": "secret123"})
    response = anonymous.post("/auth/password-reset", json={"email": "cy@portal.io"})
    assert response.status_code == 202
    assert len(sent) == 1
    recipient, link = sent[0]
    assert recipient == "cy@portal.io"
    assert "/auth/reset-password?" in link
    token = parse_qs(urlparse(link).query)["token"][0]

    confirm = anonymous.post("/auth/password-reset/confirm", json={"token": token, "new_password": "fresh-pass"})
    assert confirm.status_code == 200

    assert anonymous.post("/auth/sign-in", json={"email": "cy@portal.io", "password": "secret123"}).status_code == 401
    assert anonymous.post("/auth/sign-in", json={"email": "cy@portal.io", "password": "fresh-pass"}).status_code == 200

    reused = anonymous.post("/auth/password-reset/confirm", json={"token": token, "new_password": "third-pass"})
    assert reused.status_code == 401


def test_password_reset_for_unknown_email_is_silent(anonymous, monkeypatch):
    sent: list[str] = []
    monkeypatch.setattr(auth_service, "send_password_reset_email", lambda to, link: sent.append(to))

    response = anonymous.post("/auth/password-reset", json={"email": "ghost@portal.io"})
    assert response.status_code == 202
    assert response.json() == {"status": "accepted"}
    assert sent == []


def test_access_token_cannot_be_used_as_reset_token(anonymous):
    signed_up = anonymous.post("/auth/sign-up", json={"email": "di@portal.io", "password": "secret123"}).json()
    response = anonymous.post(
        "/auth/password-reset/confirm",
        json={"token": signed_up["access_token"], "new_password": "hijacked1"},
    )
    assert response.status_code == 401


def test_update_password_for_signed_in_user(anonymous):
    anonymous.post("/auth/sign-up", json={"email": "ed@portal.io", "password": "secret123"})
    token = anonymous.post("/auth/sign-in", json={"email": "ed@portal.io", "password": "secret123"}).json()["access_token"]

    response = anonymous.post("/auth/password", json={"new_password": "rotated-1"}, headers=_bearer(token))
    assert response.status_code == 200
    assert anonymous.post("/auth/sign-in", json={"email": "ed@portal.io", "password": "rotated-1"}).status_code == 200
