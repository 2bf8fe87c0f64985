"""Forgot/reset password flow."""

from datetime import datetime, timedelta

import pytest

from app.core.security import verify_password
from app.services import password_reset

from conftest import PASSWORD

GENERIC_MESSAGE = {"message": "If that email exists, a reset link has been sent."}
INVALID_TOKEN = {"error": "Invalid or expired token."}


@pytest.fixture
def sent_emails(monkeypatch):
    outbox = []
    monkeypatch.setattr(password_reset, "send_email_safely", lambda **kwargs: outbox.append(kwargs))
    return outbox


def request_token(client, db, user):
    resp = client.post("/api/auth/forgot-password", json={"email": user.email})
    assert resp.status_code == 200
    db.refresh(user)
    return user.reset_token


def test_forgot_password_response_does_not_leak_existence(client, author, sent_emails):
    known = client.post("/api/auth/forgot-password", json={"email": author.email})
    unknown = client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json() == GENERIC_MESSAGE
    assert len(sent_emails) == 1


def test_forgot_password_stores_token_and_mails_link(client, db, author, sent_emails):
    token = request_token(client, db, author)

    assert token and len(token) == 64
    remaining = author.reset_token_expires_at - datetime.utcnow()
    assert timedelta(minutes=14) < remaining <= timedelta(minutes=15)

    assert sent_emails[0]["to_email"] == author.email
    assert token in sent_emails[0]["html_content"]


def test_reset_link_encodes_email(client, db, make_user, sent_emails):
    user = make_user(email="dev+forum&co@example.com")
    token = request_token(client, db, user)

    html = sent_emails[0]["html_content"]
    assert f"/reset-password?token={token}&email=dev%2Bforum%26co%40example.com" in html
    assert "dev+forum&co@example.com" not in sent_emails[0]["text_content"]


def test_forgot_password_without_email_is_still_generic(client):
    resp = client.post("/api/auth/forgot-password", json={})
    assert resp.status_code == 200
    assert resp.json() == GENERIC_MESSAGE


def test_forgot_password_survives_unconfigured_smtp(client, db, author):
    resp = client.post("/api/auth/forgot-password", json={"email": author.email})
    assert resp.json() == GENERIC_MESSAGE


def test_reset_password_with_valid_token(client, db, author, sent_emails):
    token = request_token(client, db, author)

    resp = client.post("/api/auth/reset-password", json={
        "email": author.email,
        "resetToken": token,
        "newPassword": "a-much-better-password",
    })
    assert resp.status_code == 200
    assert resp.json() == {"message": "Password has been reset."}

    db.refresh(author)
    assert verify_password("a-much-better-password", author.password_hash)
    assert author.reset_token is None
    assert author.reset_token_expires_at is None


def test_reset_token_is_single_use(client, db, author, sent_emails):
    token = request_token(client, db, author)
    payload = {"email": author.email, "resetToken": token, "newPassword": "first-new-password"}

    assert client.post("/api/auth/reset-password", json=payload).status_code == 200
    second = client.post("/api/auth/reset-password", json={**payload, "newPassword": "second-password"})
    assert second.status_code == 400
    assert second.json() == INVALID_TOKEN


def test_reset_password_accepts_snake_case(client, db, author, sent_emails):
    token = request_token(client, db, author)
    resp = client.post("/api/auth/reset-password", json={
        "email": author.email,
        "reset_token": token,
        "new_password": "snake-case-password",
    })
    assert resp.status_code == 200


@pytest.mark.parametrize("case", ["wrong_token", "expired", "unknown_email"])
def test_reset_password_failures_are_indistinguishable(client, db, author, sent_emails, case):
    token = request_token(client, db, author)
    email = author.email

    if case == "wrong_token":
        token = "0" * 64
    elif case == "expired":
        author.reset_token_expires_at = datetime.utcnow() - timedelta(minutes=1)
        db.commit()
    else:
        email = "nobody@example.com"

    resp = client.post("/api/auth/reset-password", json={
        "email": email,
        "resetToken": token,
        "newPassword": "attacker-password",
    })
    assert resp.status_code == 400
    assert resp.json() == INVALID_TOKEN

    db.refresh(author)
    assert verify_password(PASSWORD, author.password_hash)


def test_reset_password_requires_all_fields(client):
    resp = client.post("/api/auth/reset-password", json={"email": "a@example.com"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Email, token, and new password are required."}


def test_reset_password_enforces_min_length(client, db, author, sent_emails):
    token = request_token(client, db, author)
    resp = client.post("/api/auth/reset-password", json={
        "email": author.email,
        "resetToken": token,
        "newPassword": "short",
    })
    assert resp.status_code == 400
    db.refresh(author)
    assert author.reset_token == token
