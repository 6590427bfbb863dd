"""Likes, subscriptions, blocks and comments."""

from __future__ import annotations

from sqlalchemy.orm import Session

from conftest import auth_headers
from inkwell import models
from inkwell.services import interactions


def test_post_like_toggles(client, db: Session, make_user, make_post):
    post = make_post(make_user())
    reader = make_user()
    headers = auth_headers(reader)

    first = client.post(f"/posts/{post.id}/like", headers=headers)
    second = client.post(f"/posts/{post.id}/like", headers=headers)
    third = client.post(f"/posts/{post.id}/like", headers=headers)

    assert first.json() == {"liked": True, "likeCount": 1}
    assert second.json() == {"liked": False, "likeCount": 0}
    assert third.json() == {"liked": True, "likeCount": 1}
    assert db.query(models.PostLike).count() == 1


def test_cannot_like_hidden_post(client, make_user, make_post):
    draft = make_post(make_user(), published=False)

    response = client.post(f"/posts/{draft.id}/like", headers=auth_headers(make_user()))

    assert response.status_code == 404


def test_blocked_reader_cannot_like(client, db: Session, make_user, make_post):
    author = make_user()
    reader = make_user()
    post = make_post(author)
    db.add(models.Block(blocker_id=author.id, blocked_id=reader.id))
    db.commit()

    response = client.post(f"/posts/{post.id}/like", headers=auth_headers(reader))

    assert response.status_code == 403
    assert db.query(models.PostLike).count() == 0


def test_subscription_toggles_and_counts(client, make_user):
    author = make_user()
    reader = make_user()
    headers = auth_headers(reader)

    on = client.post(f"/users/{author.id}/subscription", headers=headers)
    off = client.post(f"/users/{author.id}/subscription", headers=headers)

    assert on.json() == {"subscribed": True, "subscribers": 1}
    assert off.json() == {"subscribed": False, "subscribers": 0}


def test_cannot_subscribe_to_self(client, make_user):
    user = make_user()

    response = client.post(f"/users/{user.id}/subscription", headers=auth_headers(user))

    assert response.status_code == 403
    assert response.json()["message"] == "You cannot subscribe to yourself"


def test_block_removes_subscriptions_both_ways(client, db: Session, make_user):
    alice = make_user()
    bob = make_user()
    db.add_all(
        [
            models.Subscription(subscriber_id=alice.id, subscribed_id=bob.id),
            models.Subscription(subscriber_id=bob.id, subscribed_id=alice.id),
        ]
    )
    db.commit()

    response = client.post(f"/users/{bob.id}/block", headers=auth_headers(alice))

    assert response.json() == {"blocked": True}
    assert db.query(models.Subscription).count() == 0
    blocks = client.get("/users/me/blocks", headers=auth_headers(alice)).json()
    assert [user["id"] for user in blocks] == [str(bob.id)]

    # The blocked user cannot re-subscribe
    again = client.post(f"/users/{alice.id}/subscription", headers=auth_headers(bob))
    assert again.status_code == 403

    unblock = client.post(f"/users/{bob.id}/block", headers=auth_headers(alice))
    assert unblock.json() == {"blocked": False}
    assert db.query(models.Block).count() == 0


def test_suspended_user_mutations_leave_no_trace(client, db: Session, make_user, make_post):
    author = make_user()
    post = make_post(author)
    suspended = make_user(suspended=True)
    headers = auth_headers(suspended)

    responses = [
        client.post(f"/posts/{post.id}/like", headers=headers),
        client.post(f"/users/{author.id}/subscription", headers=headers),
        client.post(f"/users/{author.id}/block", headers=headers),
        client.post("/comments", json={"postId": str(post.id), "content": "hi"}, headers=headers),
        client.post(
            "/reports",
            json={"reportedUserId": str(author.id), "reason": "SPAM"},
            headers=headers,
        ),
    ]

    assert [response.status_code for response in responses] == [403] * 5
    assert all(response.json()["message"] == "Your account has been suspended" for response in responses)
    for model in (models.PostLike, models.Subscription, models.Block, models.Comment, models.Report):
        assert db.query(model).count() == 0


def test_comment_lifecycle(client, db: Session, make_user, make_post):
    post = make_post(make_user())
    reader = make_user()
    headers = auth_headers(reader)

    created = client.post("/comments", json={"postId": str(post.id), "content": "  Nice post  "}, headers=headers)
    assert created.status_code == 201
    comment_id = created.json()["id"]
    assert created.json()["content"] == "Nice post"

    edited = client.patch(f"/comments/{comment_id}", json={"content": "Great post"}, headers=headers)
    assert edited.json()["isEdited"] is True

    liked = client.post(f"/comments/{comment_id}/like", headers=auth_headers(make_user()))
    assert liked.json() == {"liked": True, "likeCount": 1}

    assert client.delete(f"/comments/{comment_id}", headers=headers).status_code == 204
    detail = client.get(f"/posts/by-slug/{post.slug}").json()
    assert detail["comments"] == []
    assert detail["commentCount"] == 0


def test_cannot_edit_someone_elses_comment(client, db: Session, make_user, make_post):
    post = make_post(make_user())
    owner = make_user()
    comment = models.Comment(content="mine", author_id=owner.id, post_id=post.id)
    db.add(comment)
    db.commit()

    response = client.patch(f"/comments/{comment.id}", json={"content": "yours"}, headers=auth_headers(make_user()))

    assert response.status_code == 403


def test_duplicate_like_from_a_concurrent_request_counts_once(db: Session, session_factory, make_user, make_post):
    post = make_post(make_user())
    reader = make_user()
    db.add(models.PostLike(user_id=reader.id, post_id=post.id))
    db.commit()

    # A second request that missed the existing row inserts the same like
    racer = session_factory()
    try:
        interactions._insert_or_already_on(racer, models.PostLike(user_id=reader.id, post_id=post.id))
    finally:
        racer.close()

    assert db.query(models.PostLike).count() == 1


def test_cannot_comment_across_a_block(client, db: Session, make_user, make_post):
    author = make_user()
    reader = make_user()
    post = make_post(author)
    db.add(models.Block(blocker_id=reader.id, blocked_id=author.id))
    db.commit()

    response = client.post("/comments", json={"postId": str(post.id), "content": "Hello"}, headers=auth_headers(reader))

    assert response.status_code == 403
    assert db.query(models.Comment).count() == 0
