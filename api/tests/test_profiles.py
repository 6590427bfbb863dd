"""Public profiles."""

from __future__ import annotations

from sqlalchemy.orm import Session

from conftest import auth_headers
from inkwell import models


def test_public_profile_for_anonymous_viewer(client, db: Session, make_user, make_post):
    author = make_user("profile_owner", bio="Hello there")
    follower = make_user()
    for _ in range(6):
        make_post(author)
    make_post(author, published=False)
    db.add(models.Subscription(subscriber_id=follower.id, subscribed_id=author.id))
    db.commit()

    response = client.get("/profiles/Profile_Owner")

    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "profile_owner"
    assert body["bio"] == "Hello there"
    assert body["stats"] == {"posts": 6, "subscribers": 1, "subscribing": 0}
    assert len(body["latestPosts"]) == 5
    assert body["isMe"] is False
    assert body["isFollowing"] is False


def test_profile_flags_for_signed_in_viewer(client, db: Session, make_user):
    author = make_user()
    viewer = make_user()
    db.add(models.Subscription(subscriber_id=viewer.id, subscribed_id=author.id))
    db.commit()

    other = client.get(f"/profiles/{author.username}", headers=auth_headers(viewer)).json()
    own = client.get(f"/profiles/{author.username}", headers=auth_headers(author)).json()

    assert other["isFollowing"] is True
    assert other["isMe"] is False
    assert own["isMe"] is True
    assert own["isFollowing"] is False


def test_blocked_profile_resolves_without_posts(client, db: Session, make_user, make_post):
    author = make_user()
    viewer = make_user()
    make_post(author)
    db.add(models.Block(blocker_id=author.id, blocked_id=viewer.id))
    db.commit()

    response = client.get(f"/profiles/{author.username}", headers=auth_headers(viewer))

    assert response.status_code == 200
    body = response.json()
    assert body["isBlocked"] is True
    assert body["latestPosts"] == []
    assert body["stats"]["posts"] == 1


def test_suspended_or_missing_user_is_not_found(client, make_user):
    suspended = make_user(suspended=True)

    for username in (suspended.username, "nobody_here"):
        response = client.get(f"/profiles/{username}")
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"


def test_latest_posts_do_not_count_comments_from_blocked_users(client, db: Session, make_user, make_post):
    author = make_user()
    viewer = make_user()
    heckler = make_user()
    post = make_post(author)
    db.add_all(
        [
            models.Comment(content="Nice one", author_id=make_user().id, post_id=post.id),
            models.Comment(content="Boo", author_id=heckler.id, post_id=post.id),
            models.Block(blocker_id=viewer.id, blocked_id=heckler.id),
        ]
    )
    db.commit()

    anonymous = client.get(f"/profiles/{author.username}").json()
    signed_in = client.get(f"/profiles/{author.username}", headers=auth_headers(viewer)).json()

    assert anonymous["latestPosts"][0]["commentCount"] == 2
    assert signed_in["latestPosts"][0]["commentCount"] == 1
