"""Post authoring lifecycle: draft, content, publish, trash, delete."""

from __future__ import annotations

import base64
import uuid

from sqlalchemy.orm import Session

from conftest import SAMPLE_CONTENT, auth_headers
from inkwell import models

# 1x1 transparent PNG
PNG_1X1 = base64.b64encode(
    bytes.fromhex(
        "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
        "1f15c4890000000d49444154789c6300010000050001"
        "0d0a2db40000000049454e44ae426082"
    )
).decode()


def _create(client, headers, category_id, **overrides):
    payload = {
        "title": "My first essay",
        "summary": "What this is about",
        "categoryId": str(category_id),
        "tags": ["Essays", " essays ", "Life"],
    }
    payload.update(overrides)
    return client.post("/posts", json=payload, headers=headers)


def test_create_draft(client, make_user, category):
    headers = auth_headers(make_user())

    response = _create(client, headers, category.id)

    assert response.status_code == 201
    body = response.json()
    assert body["published"] is False
    assert body["publishedAt"] is None
    assert body["content"] is None
    assert body["tags"] == ["essays", "life"]
    assert body["slug"].startswith("my-first-essay-")


def test_create_with_unknown_category_is_not_found(client, make_user):
    response = _create(client, auth_headers(make_user()), uuid.uuid4())

    assert response.status_code == 404
    assert response.json()["message"] == "Category not found"


def test_invalid_payload_is_bad_request(client, make_user, category):
    response = _create(client, auth_headers(make_user()), category.id, title="abc")

    assert response.status_code == 400
    assert response.json()["status"] == "error"
    assert response.json()["message"].startswith("title")


def test_publish_cycle_keeps_first_published_at(client, make_user, category):
    headers = auth_headers(make_user())
    post_id = _create(client, headers, category.id).json()["id"]

    saved = client.put(f"/posts/{post_id}/content", json=SAMPLE_CONTENT, headers=headers)
    assert saved.status_code == 200
    assert saved.json()["readTime"] == 1

    first = client.post(f"/posts/{post_id}/publish", headers=headers).json()
    assert first["published"] is True
    published_at = first["publishedAt"]
    assert published_at is not None

    unpublished = client.post(f"/posts/{post_id}/publish", headers=headers).json()
    assert unpublished["published"] is False
    assert unpublished["publishedAt"] == published_at

    again = client.post(f"/posts/{post_id}/publish", headers=headers).json()
    assert again["published"] is True
    assert again["publishedAt"] == published_at


def test_content_must_be_a_valid_document(client, make_user, category):
    headers = auth_headers(make_user())
    post_id = _create(client, headers, category.id).json()["id"]
    bad = {"time": 1, "version": "2", "blocks": [{"type": "header", "data": {"text": "x", "level": 9}}]}

    response = client.put(f"/posts/{post_id}/content", json=bad, headers=headers)

    assert response.status_code == 400


def test_title_change_regenerates_slug(client, make_user, category):
    headers = auth_headers(make_user())
    created = _create(client, headers, category.id).json()

    updated = client.patch(f"/posts/{created['id']}", json={"title": "A better title"}, headers=headers).json()

    assert updated["title"] == "A better title"
    assert updated["slug"].startswith("a-better-title-")
    assert updated["tags"] == ["essays", "life"]


def test_only_the_author_can_edit(client, make_user, make_post):
    post = make_post(make_user())

    response = client.patch(f"/posts/{post.id}", json={"title": "Hijacked title"}, headers=auth_headers(make_user()))

    assert response.status_code == 403


def test_trash_unpublishes_and_blocks_publishing(client, db: Session, make_user, make_post):
    author = make_user()
    post = make_post(author)
    headers = auth_headers(author)

    trashed = client.post(f"/posts/{post.id}/trash", headers=headers).json()
    assert trashed["isDeleted"] is True
    assert trashed["published"] is False

    publish = client.post(f"/posts/{post.id}/publish", headers=headers)
    assert publish.status_code == 403
    assert publish.json()["message"] == "Trashed posts cannot be published"

    restored = client.post(f"/posts/{post.id}/trash", headers=headers).json()
    assert restored["isDeleted"] is False
    assert restored["published"] is False


def test_permanent_delete_requires_trash(client, db: Session, make_user, make_post):
    author = make_user()
    post_id = make_post(author).id
    db.add(models.PostLike(user_id=make_user().id, post_id=post_id))
    db.commit()
    headers = auth_headers(author)

    refused = client.delete(f"/posts/{post_id}", headers=headers)
    assert refused.status_code == 400

    client.post(f"/posts/{post_id}/trash", headers=headers)
    assert client.delete(f"/posts/{post_id}", headers=headers).status_code == 204

    db.expire_all()
    assert db.get(models.Post, post_id) is None
    assert db.query(models.PostLike).count() == 0


def test_suspended_post_cannot_be_republished(client, make_user, make_post):
    author = make_user()
    post = make_post(author, published=False, suspended=True)

    response = client.post(f"/posts/{post.id}/publish", headers=auth_headers(author))

    assert response.status_code == 403


def test_my_posts_include_drafts_and_trash(client, make_user, make_post):
    author = make_user()
    make_post(author)
    make_post(author, published=False)
    make_post(author, published=False, is_deleted=True)
    make_post(make_user())

    posts = client.get("/posts/mine", headers=auth_headers(author)).json()

    assert len(posts) == 3
    assert sorted(post["isDeleted"] for post in posts) == [False, False, True]


def test_cover_upload_and_removal(client, make_user, category):
    headers = auth_headers(make_user())

    created = _create(client, headers, category.id, coverImage=f"data:image/png;base64,{PNG_1X1}").json()
    assert created["coverUrl"].startswith("/api/vault/posts/")

    removed = client.delete(f"/posts/{created['id']}/cover", headers=headers).json()
    assert removed["coverUrl"] is None


def test_rejects_non_image_upload(client, make_user):
    payload = {"image": base64.b64encode(b"definitely not an image").decode()}

    response = client.post("/posts/images", json=payload, headers=auth_headers(make_user()))

    assert response.status_code == 400
