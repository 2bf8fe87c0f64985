"""Comment endpoints."""

from sqlalchemy import select

from app.models import Notification

from conftest import bearer, create_comment, create_post


def test_create_comment_notifies_post_author(client, db, author, reader):
    post = create_post(client, author)
    comment = create_comment(client, reader, post["id"], content="  Worked for me  ")

    assert comment["content"] == "Worked for me"
    assert comment["author"]["id"] == reader.id
    assert comment["parent_comment_id"] is None

    note = db.scalars(select(Notification)).one()
    assert note.user_id == author.id
    assert note.notification_type == "comment"
    assert note.comment_id == comment["id"]


def test_comment_on_own_post_does_not_notify(client, db, author):
    post = create_post(client, author)
    create_comment(client, author, post["id"])
    assert db.scalars(select(Notification)).all() == []


def test_create_comment_validation(client, author):
    post = create_post(client, author)

    resp = client.post(f"/api/comments/post/{post['id']}", data={"content": "   "}, headers=bearer(author))
    assert resp.status_code == 400

    resp = client.post("/api/comments/post/999", data={"content": "hi"}, headers=bearer(author))
    assert resp.status_code == 404

    resp = client.post(f"/api/comments/post/{post['id']}", data={"content": "hi"})
    assert resp.status_code == 401


def test_reply_parent_must_belong_to_same_post(client, author, reader):
    post_a = create_post(client, author, headline="A")
    post_b = create_post(client, author, headline="B")
    parent = create_comment(client, reader, post_a["id"])

    resp = client.post(
        f"/api/comments/post/{post_b['id']}",
        data={"content": "wrong thread", "parentId": str(parent["id"])},
        headers=bearer(reader),
    )
    assert resp.status_code == 404
    assert resp.json() == {"error": "Parent comment not found"}


def test_list_comments_top_level_first(client, author, reader):
    post = create_post(client, author)
    first = create_comment(client, reader, post["id"], content="first")
    reply = create_comment(client, author, post["id"], content="reply", parent_id=first["id"])
    second = create_comment(client, author, post["id"], content="second")

    resp = client.get(f"/api/comments/post/{post['id']}")
    assert resp.status_code == 200
    assert [c["id"] for c in resp.json()] == [first["id"], second["id"], reply["id"]]
    assert resp.json()[2]["parent_comment_id"] == first["id"]


def test_comment_like_and_helpful_toggles(client, db, author, reader):
    post = create_post(client, author)
    comment = create_comment(client, author, post["id"])
    like_url = f"/api/comments/{comment['id']}/like"
    helpful_url = f"/api/comments/{comment['id']}/helpful"

    assert client.post(like_url, headers=bearer(reader)).json() == {"liked": True, "likeCount": 1}
    assert client.post(like_url, headers=bearer(reader)).json() == {"liked": False, "likeCount": 0}
    assert client.post(helpful_url, headers=bearer(reader)).json() == {"helpful": True, "helpfulCount": 1}

    listed = client.get(f"/api/comments/post/{post['id']}", headers=bearer(reader)).json()
    assert listed[0]["helpful"] is True and listed[0]["helpfulCount"] == 1
    assert listed[0]["liked"] is False

    types = sorted(n.notification_type for n in db.scalars(select(Notification)).all())
    assert types == ["comment_helpful", "comment_like", "comment_like"]


def test_update_comment(client, author, reader):
    post = create_post(client, author)
    comment = create_comment(client, reader, post["id"])
    url = f"/api/comments/{comment['id']}"

    assert client.put(url, json={"content": "edited"}, headers=bearer(author)).status_code == 403

    resp = client.put(url, json={"content": "edited", "imageUrl": "https://img.example.com/x.png"}, headers=bearer(reader))
    assert resp.status_code == 200
    assert resp.json()["content"] == "edited"
    assert resp.json()["image_url"] == "https://img.example.com/x.png"

    assert client.put(url, json={"content": ""}, headers=bearer(reader)).status_code == 400
    assert client.put("/api/comments/999", json={"content": "x"}, headers=bearer(reader)).status_code == 404


def test_delete_comment_removes_replies(client, author, reader):
    post = create_post(client, author)
    parent = create_comment(client, reader, post["id"])
    reply = create_comment(client, author, post["id"], parent_id=parent["id"])
    create_comment(client, reader, post["id"], content="nested", parent_id=reply["id"])
    client.post(f"/api/comments/{reply['id']}/like", headers=bearer(reader))

    assert client.delete(f"/api/comments/{parent['id']}", headers=bearer(author)).status_code == 403

    resp = client.delete(f"/api/comments/{parent['id']}", headers=bearer(reader))
    assert resp.status_code == 204
    assert client.get(f"/api/comments/post/{post['id']}").json() == []
