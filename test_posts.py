"""Post endpoints, toggles, saves and the notifications they produce."""

from sqlalchemy import func, select

from app.crud import crud_post_like
from app.database import SessionLocal
from app.models import Comment, Notification, PostLike

from conftest import PNG_BYTES, bearer, create_comment, create_post


def notifications_for(db, user):
    return list(db.scalars(select(Notification).where(Notification.user_id == user.id)).all())


def test_create_post_maps_form_fields(client, author):
    post = create_post(client, author)
    assert post["title"] == "KeyError when reading settings"
    assert post["description"] == "KeyError: 'DATABASE_URL'"
    assert post["content"] == "Export the variable before starting the server."
    assert post["code_snippet"] == "os.environ['DATABASE_URL']"
    assert post["tags"] == ["python", "config"]
    assert post["author"]["name"] == "Grace Hopper"
    assert post["likes"] == 0 and post["liked"] is False
    assert post["helpfulCount"] == 0 and post["comment_count"] == 0


def test_create_post_requires_headline_and_solution(client, author):
    resp = client.post("/api/posts", data={"headline": "Only a headline"}, headers=bearer(author))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Headline and solution are required."}


def test_create_post_rejects_bad_tags(client, author):
    resp = client.post(
        "/api/posts",
        data={"headline": "h", "solution": "s", "tags": "python, config"},
        headers=bearer(author),
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Tags must be a JSON array of strings."}


def test_create_post_requires_login(client):
    resp = client.post("/api/posts", data={"headline": "h", "solution": "s"})
    assert resp.status_code == 401


def test_create_post_with_screenshot_is_served(client, author):
    resp = client.post(
        "/api/posts",
        data={"headline": "Broken layout", "solution": "Clear the cache."},
        files={"screenshot": ("shot.png", PNG_BYTES, "image/png")},
        headers=bearer(author),
    )
    assert resp.status_code == 201
    image_url = resp.json()["image_url"]
    assert image_url.startswith("/uploads/posts/") and image_url.endswith(".png")

    served = client.get(image_url)
    assert served.status_code == 200
    assert served.headers["content-type"] == "image/png"
    assert served.content == PNG_BYTES


def test_create_post_rejects_fake_image(client, author):
    resp = client.post(
        "/api/posts",
        data={"headline": "h", "solution": "s"},
        files={"screenshot": ("shot.png", b"definitely not a png", "image/png")},
        headers=bearer(author),
    )
    assert resp.status_code == 400


def test_list_posts_newest_first_with_viewer_flags(client, author, reader):
    first = create_post(client, author, headline="First")
    second = create_post(client, author, headline="Second")
    client.post(f"/api/posts/{first['id']}/like", headers=bearer(reader))
    client.post(f"/api/posts/{first['id']}/save", headers=bearer(reader))
    create_comment(client, reader, first["id"])

    anonymous = client.get("/api/posts").json()
    assert [p["id"] for p in anonymous] == [second["id"], first["id"]]
    assert anonymous[1]["likes"] == 1
    assert anonymous[1]["comment_count"] == 1
    assert anonymous[1]["liked"] is False and anonymous[1]["saved"] is False

    as_reader = client.get("/api/posts", headers=bearer(reader)).json()
    assert as_reader[1]["liked"] is True
    assert as_reader[1]["saved"] is True
    assert as_reader[0]["liked"] is False


def test_like_toggles_and_counts(client, author, reader):
    post = create_post(client, author)
    url = f"/api/posts/{post['id']}/like"

    assert client.post(url, headers=bearer(reader)).json() == {"liked": True, "likes": 1}
    assert client.post(url, headers=bearer(author)).json() == {"liked": True, "likes": 2}
    assert client.post(url, headers=bearer(reader)).json() == {"liked": False, "likes": 1}
    assert client.post(url, headers=bearer(reader)).json() == {"liked": True, "likes": 2}


def test_like_toggle_keeps_row_inserted_by_concurrent_request(client, db, monkeypatch, author, reader):
    post_id = create_post(client, author)["id"]
    reader_id = reader.id
    real_add = db.add

    def add_after_concurrent_like(instance, *args, **kwargs):
        # Another request wins the race between the delete and the insert.
        other = SessionLocal()
        try:
            other.add(PostLike(user_id=reader_id, post_id=post_id))
            other.commit()
        finally:
            other.close()
        real_add(instance, *args, **kwargs)

    monkeypatch.setattr(db, "add", add_after_concurrent_like)
    assert crud_post_like.toggle(db, user_id=reader_id, target_id=post_id) == (True, 1)
    monkeypatch.undo()

    rows = db.scalars(select(PostLike).where(PostLike.post_id == post_id)).all()
    assert [row.user_id for row in rows] == [reader_id]


def test_like_unknown_post_is_404(client, reader):
    resp = client.post("/api/posts/999/like", headers=bearer(reader))
    assert resp.status_code == 404
    assert resp.json() == {"error": "Post not found"}


def test_helpful_toggle(client, author, reader):
    post = create_post(client, author)
    url = f"/api/posts/{post['id']}/helpful"

    assert client.post(url, headers=bearer(reader)).json() == {"helpful": True, "helpfulCount": 1}
    assert client.post(url, headers=bearer(reader)).json() == {"helpful": False, "helpfulCount": 0}


def test_like_notifies_author_but_not_self(client, db, author, reader):
    post = create_post(client, author)

    client.post(f"/api/posts/{post['id']}/like", headers=bearer(author))
    assert notifications_for(db, author) == []

    client.post(f"/api/posts/{post['id']}/like", headers=bearer(reader))
    notes = notifications_for(db, author)
    assert len(notes) == 1
    assert notes[0].notification_type == "like"
    assert notes[0].from_user_id == reader.id
    assert notes[0].post_id == post["id"]
    assert "Alan Turing" in notes[0].message


def test_save_and_unsave_are_idempotent(client, author, reader):
    post = create_post(client, author)
    save_url = f"/api/posts/{post['id']}/save"
    unsave_url = f"/api/posts/{post['id']}/unsave"

    assert client.post(save_url, headers=bearer(reader)).json() == {"saved": True}
    assert client.post(save_url, headers=bearer(reader)).json() == {"saved": True}

    saved = client.get("/api/users/me/saved-posts", headers=bearer(reader)).json()
    assert [p["id"] for p in saved] == [post["id"]]
    assert saved[0]["saved"] is True

    assert client.post(unsave_url, headers=bearer(reader)).json() == {"saved": False}
    assert client.post(unsave_url, headers=bearer(reader)).json() == {"saved": False}
    assert client.get("/api/users/me/saved-posts", headers=bearer(reader)).json() == []


def test_get_post_detail(client, author):
    post = create_post(client, author)
    resp = client.get(f"/api/posts/{post['id']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == post["id"]
    assert client.get("/api/posts/12345").status_code == 404


def test_update_post_by_author(client, author):
    post = create_post(client, author)
    resp = client.put(
        f"/api/posts/{post['id']}",
        data={"headline": "Updated headline", "tags": '["fastapi"]'},
        headers=bearer(author),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Updated headline"
    assert body["tags"] == ["fastapi"]
    assert body["content"] == post["content"]


def test_update_post_blank_image_url_removes_screenshot(client, author):
    resp = client.post(
        "/api/posts",
        data={"headline": "Broken layout", "solution": "Clear the cache."},
        files={"screenshot": ("shot.png", PNG_BYTES, "image/png")},
        headers=bearer(author),
    )
    post = resp.json()
    image_url = post["image_url"]

    resp = client.put(f"/api/posts/{post['id']}", data={"headline": "Still broken"}, headers=bearer(author))
    assert resp.json()["image_url"] == image_url

    resp = client.put(f"/api/posts/{post['id']}", data={"imageUrl": ""}, headers=bearer(author))
    assert resp.status_code == 200
    assert resp.json()["image_url"] is None
    assert client.get(image_url).status_code == 404


def test_only_author_can_update_or_delete(client, author, reader):
    post = create_post(client, author)

    resp = client.put(f"/api/posts/{post['id']}", data={"headline": "Hijacked"}, headers=bearer(reader))
    assert resp.status_code == 403
    assert client.delete(f"/api/posts/{post['id']}", headers=bearer(reader)).status_code == 403


def test_delete_post_cascades(client, db, author, reader):
    post = create_post(client, author)
    create_comment(client, reader, post["id"])
    client.post(f"/api/posts/{post['id']}/like", headers=bearer(reader))

    resp = client.delete(f"/api/posts/{post['id']}", headers=bearer(author))
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    assert client.get(f"/api/posts/{post['id']}").status_code == 404
    assert db.scalar(select(func.count()).select_from(Comment)) == 0
    assert db.scalar(select(func.count()).select_from(PostLike)) == 0
    assert db.scalar(select(func.count()).select_from(Notification)) == 0
