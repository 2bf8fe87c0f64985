"""Reporting posts and the admin review queue."""

import pytest

from app.crud import DuplicatePendingReport, crud_report

from conftest import bearer, create_post

DUPLICATE = {"error": "You have already reported this post."}


def test_report_post(client, author, reader):
    post = create_post(client, author)
    resp = client.post(f"/api/posts/{post['id']}/report", json={"reason": "spam"}, headers=bearer(reader))
    assert resp.status_code == 201
    body = resp.json()
    assert body["reported"] is True
    assert body["report"]["status"] == "pending"
    assert body["report"]["reason"] == "spam"
    assert body["report"]["user_id"] == reader.id


def test_report_without_body(client, author, reader):
    post = create_post(client, author)
    resp = client.post(f"/api/posts/{post['id']}/report", headers=bearer(reader))
    assert resp.status_code == 201
    assert resp.json()["report"]["reason"] is None


def test_duplicate_pending_report_rejected_until_reviewed(client, author, reader, admin):
    post = create_post(client, author)
    url = f"/api/posts/{post['id']}/report"

    first = client.post(url, json={"reason": "spam"}, headers=bearer(reader))
    second = client.post(url, json={"reason": "still spam"}, headers=bearer(reader))
    assert second.status_code == 400
    assert second.json() == DUPLICATE

    report_id = first.json()["report"]["id"]
    resp = client.patch(f"/api/reports/{report_id}", json={"status": "resolved"}, headers=bearer(admin))
    assert resp.status_code == 200
    assert resp.json()["status"] == "resolved"

    third = client.post(url, json={"reason": "spam again"}, headers=bearer(reader))
    assert third.status_code == 201


def test_reopening_report_conflicts_with_newer_pending_one(client, author, reader, admin):
    post = create_post(client, author)
    url = f"/api/posts/{post['id']}/report"

    first = client.post(url, json={"reason": "spam"}, headers=bearer(reader)).json()["report"]
    client.patch(f"/api/reports/{first['id']}", json={"status": "resolved"}, headers=bearer(admin))
    newer = client.post(url, json={"reason": "spam again"}, headers=bearer(reader))
    assert newer.status_code == 201

    resp = client.patch(f"/api/reports/{first['id']}", json={"status": "pending"}, headers=bearer(admin))
    assert resp.status_code == 400
    assert resp.json() == DUPLICATE

    detail = client.get(f"/api/reports/{first['id']}", headers=bearer(admin))
    assert detail.json()["status"] == "resolved"


def test_create_report_with_camel_case_post_id(client, author, reader):
    post = create_post(client, author)
    resp = client.post("/api/reports", json={"postId": post["id"], "reason": "off topic"}, headers=bearer(reader))
    assert resp.status_code == 201
    assert resp.json()["post_id"] == post["id"]

    again = client.post("/api/reports", json={"post_id": post["id"]}, headers=bearer(reader))
    assert again.json() == DUPLICATE


def test_report_unknown_post(client, reader):
    resp = client.post("/api/posts/999/report", json={"reason": "x"}, headers=bearer(reader))
    assert resp.status_code == 404


def test_pending_index_backs_up_the_check(db, monkeypatch, author, reader, client):
    post = create_post(client, author)
    crud_report.create_report(db, user_id=reader.id, post_id=post["id"], reason="first")

    monkeypatch.setattr(crud_report, "get_pending", lambda db, **kwargs: None)
    with pytest.raises(DuplicatePendingReport):
        crud_report.create_report(db, user_id=reader.id, post_id=post["id"], reason="racing")


def test_admin_endpoints_require_admin(client, author, reader, admin):
    post = create_post(client, author)
    report = client.post(f"/api/posts/{post['id']}/report", json={"reason": "spam"}, headers=bearer(reader)).json()["report"]

    assert client.get("/api/reports").status_code == 401
    assert client.get("/api/reports", headers=bearer(reader)).status_code == 403
    assert client.get(f"/api/reports/{report['id']}", headers=bearer(reader)).status_code == 403
    assert client.patch(
        f"/api/reports/{report['id']}", json={"status": "ignored"}, headers=bearer(reader)
    ).status_code == 403

    listed = client.get("/api/reports", headers=bearer(admin)).json()
    assert len(listed) == 1
    assert listed[0]["post"]["title"] == post["title"]
    assert listed[0]["post"]["author"]["id"] == author.id
    assert listed[0]["user"]["id"] == reader.id

    detail = client.get(f"/api/reports/{report['id']}", headers=bearer(admin))
    assert detail.status_code == 200
    assert client.get("/api/reports/999", headers=bearer(admin)).status_code == 404


def test_invalid_report_status(client, author, reader, admin):
    post = create_post(client, author)
    report = client.post(f"/api/posts/{post['id']}/report", headers=bearer(reader)).json()["report"]
    resp = client.patch(f"/api/reports/{report['id']}", json={"status": "deleted"}, headers=bearer(admin))
    assert resp.status_code == 400
