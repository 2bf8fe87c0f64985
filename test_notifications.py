"""Notification endpoints and the delivery outbox."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.crud import crud_notification
from app.models import Notification
from app.services.notification_service import NotificationOutbox

from conftest import bearer, create_post


@pytest.fixture
def liked_post(client, author, reader):
    post = create_post(client, author)
    client.post(f"/api/posts/{post['id']}/like", headers=bearer(reader))
    client.post(f"/api/posts/{post['id']}/helpful", headers=bearer(reader))
    return post


def test_anonymous_reads_degrade_gracefully(client):
    assert client.get("/api/notifications").json() == []
    assert client.get("/api/notifications/unread-count").json() == {"unread_count": 0}
    assert client.post("/api/notifications/mark-all-read").json() == {"success": True, "read_count": 0}


def test_list_notifications_newest_first(client, author, reader, liked_post):
    resp = client.get("/api/notifications", headers=bearer(author))
    assert resp.status_code == 200
    body = resp.json()
    assert [n["notification_type"] for n in body] == ["helpful", "like"]
    assert body[0]["from_user"]["name"] == "Alan Turing"
    assert body[0]["is_read"] is False

    assert client.get("/api/notifications", headers=bearer(reader)).json() == []


def test_list_notifications_degrades_on_query_failure(client, monkeypatch, author, liked_post):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is gone"))

    monkeypatch.setattr(crud_notification, "get_by_user", broken)
    monkeypatch.setattr(crud_notification, "get_unread_count", broken)

    assert client.get("/api/notifications", headers=bearer(author)).json() == []
    assert client.get("/api/notifications/unread-count", headers=bearer(author)).json() == {"unread_count": 0}


def test_mark_one_read_is_strict(client, author, reader, liked_post):
    notification_id = client.get("/api/notifications", headers=bearer(author)).json()[0]["id"]
    url = f"/api/notifications/{notification_id}/read"

    assert client.patch(url).status_code == 401
    assert client.patch(url, headers=bearer(reader)).status_code == 403
    assert client.patch("/api/notifications/999/read", headers=bearer(author)).status_code == 404

    resp = client.patch(url, headers=bearer(author))
    assert resp.status_code == 200
    assert resp.json()["is_read"] is True
    assert resp.json()["read_at"] is not None
    assert client.get("/api/notifications/unread-count", headers=bearer(author)).json() == {"unread_count": 1}


def test_mark_all_read(client, author, liked_post):
    assert client.get("/api/notifications/unread-count", headers=bearer(author)).json() == {"unread_count": 2}

    resp = client.post("/api/notifications/mark-all-read", headers=bearer(author))
    assert resp.json() == {"success": True, "read_count": 2}
    assert client.get("/api/notifications/unread-count", headers=bearer(author)).json() == {"unread_count": 0}
    assert client.get("/api/notifications?unread_only=true", headers=bearer(author)).json() == []


def test_outbox_skips_self_notification(db, author):
    outbox = NotificationOutbox()
    queued = outbox.enqueue(
        recipient_user_id=author.id,
        actor_user_id=author.id,
        notification_type="like",
        message="You liked your own post.",
    )
    assert queued is False
    assert outbox.flush() == 0
    assert db.scalars(select(Notification)).all() == []


def test_outbox_retries_then_delivers(db, monkeypatch, author, reader):
    real_create = crud_notification.create
    calls = {"n": 0}

    def flaky_create(db, *, obj_in):
        calls["n"] += 1
        if calls["n"] < 3:
            raise OperationalError("INSERT", {}, Exception("database is locked"))
        return real_create(db, obj_in=obj_in)

    monkeypatch.setattr(crud_notification, "create", flaky_create)

    outbox = NotificationOutbox(max_attempts=3)
    outbox.enqueue(
        recipient_user_id=author.id,
        actor_user_id=reader.id,
        notification_type="comment",
        message="Alan Turing commented on your post.",
    )
    assert outbox.flush() == 1
    assert calls["n"] == 3
    assert len(db.scalars(select(Notification)).all()) == 1


def test_outbox_gives_up_without_raising(db, monkeypatch, author, reader):
    def always_fails(db, *, obj_in):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(crud_notification, "create", always_fails)

    outbox = NotificationOutbox(max_attempts=2)
    outbox.enqueue(
        recipient_user_id=author.id,
        actor_user_id=reader.id,
        notification_type="like",
        message="Alan Turing liked your post.",
    )
    assert outbox.flush() == 0
    assert outbox.pending == []


def test_failed_request_delivers_nothing(client, db, reader):
    resp = client.post("/api/posts/424242/like", headers=bearer(reader))
    assert resp.status_code == 404
    assert db.scalars(select(Notification)).all() == []
