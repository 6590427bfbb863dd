"""Private and public feeds."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from conftest import auth_headers
from inkwell import models


@pytest.fixture
def world(db: Session, make_user, make_post):
    """
    viewer follows alice; bob has a featured post; carol is popular.
    viewer liked bob's post.
    """
    viewer = make_user("viewer_account")
    alice = make_user("alice_writer")
    bob = make_user("bob_writer")
    carol = make_user("carol_writer")

    a1 = make_post(alice, title="Alice first")
    a2 = make_post(alice, title="Alice second")
    b1 = make_post(bob, title="Bob featured", is_featured=True)
    c1 = make_post(carol, title="Carol popular", views=50)
    c2 = make_post(carol, title="Carol less popular", views=5)

    db.add(models.Subscription(subscriber_id=viewer.id, subscribed_id=alice.id))
    db.add(models.PostLike(user_id=viewer.id, post_id=b1.id))
    db.commit()
    return {
        "viewer": viewer,
        "alice": alice,
        "bob": bob,
        "carol": carol,
        "posts": {"a1": a1, "a2": a2, "b1": b1, "c1": c1, "c2": c2},
    }


def test_private_feed_concatenates_pools_in_order(client, world):
    posts = world["posts"]

    response = client.get("/feed", headers=auth_headers(world["viewer"]))

    assert response.status_code == 200
    feed = response.json()["feed"]
    assert [(item["id"], item["source"]) for item in feed] == [
        (str(posts["a2"].id), "subscribed"),
        (str(posts["a1"].id), "subscribed"),
        (str(posts["b1"].id), "featured"),
        (str(posts["c1"].id), "popular"),
        (str(posts["c2"].id), "popular"),
        (str(posts["b1"].id), "popular"),
    ]
    assert [item["isSubscribedAuthor"] for item in feed[:3]] == [True, True, False]


def test_private_feed_annotates_likes(client, world):
    feed = client.get("/feed", headers=auth_headers(world["viewer"])).json()["feed"]

    bob_items = [item for item in feed if item["id"] == str(world["posts"]["b1"].id)]
    assert bob_items
    assert all(item["isLiked"] and item["likeCount"] == 1 for item in bob_items)
    assert all(not item["isLiked"] for item in feed if item["author"]["username"] != "bob_writer")


def test_popular_users_ranked_by_score(client, world):
    body = client.get("/feed", headers=auth_headers(world["viewer"])).json()

    ranked = [(user["username"], user["score"]) for user in body["popularUsers"]]
    # bob: 1 post + 2 x 1 like; alice and carol tie on 2 posts, broken by username
    assert ranked == [("bob_writer", 3), ("alice_writer", 2), ("carol_writer", 2), ("viewer_account", 0)]


def test_popular_users_include_members_without_posts(client, make_user, make_post):
    viewer = make_user("quiet_viewer")
    make_post(make_user("busy_writer"))
    make_user("silent_reader")
    make_user("gone_reader", suspended=True)

    body = client.get("/feed", headers=auth_headers(viewer)).json()

    ranked = [(user["username"], user["score"], user["postsCount"]) for user in body["popularUsers"]]
    assert ranked == [("busy_writer", 1, 1), ("quiet_viewer", 0, 0), ("silent_reader", 0, 0)]


def test_followed_featured_post_appears_in_both_pools(client, db: Session, world):
    db.add(models.Subscription(subscriber_id=world["viewer"].id, subscribed_id=world["bob"].id))
    db.commit()

    feed = client.get("/feed", headers=auth_headers(world["viewer"])).json()["feed"]

    bob_post = str(world["posts"]["b1"].id)
    hits = [(item["source"], item["isSubscribedAuthor"]) for item in feed if item["id"] == bob_post]
    assert ("subscribed", True) in hits
    assert ("featured", True) in hits
    assert ("popular", True) not in hits


def test_blocked_author_disappears_from_every_pool(client, db: Session, world):
    db.add(models.Block(blocker_id=world["carol"].id, blocked_id=world["viewer"].id))
    db.commit()

    body = client.get("/feed", headers=auth_headers(world["viewer"])).json()

    assert all(item["author"]["username"] != "carol_writer" for item in body["feed"])
    assert "carol_writer" not in [user["username"] for user in body["popularUsers"]]


def test_suspended_author_disappears_from_feed(client, db: Session, world):
    alice = db.get(models.User, world["alice"].id)
    alice.suspended = True
    db.commit()

    feed = client.get("/feed", headers=auth_headers(world["viewer"])).json()["feed"]

    assert [item["source"] for item in feed].count("subscribed") == 0
    assert all(item["author"]["username"] != "alice_writer" for item in feed)


def test_suspended_viewer_gets_forbidden(client, make_user):
    viewer = make_user(suspended=True)

    response = client.get("/feed", headers=auth_headers(viewer))

    assert response.status_code == 403
    assert response.json() == {
        "status": "error",
        "message": "Your account has been suspended",
        "logout": False,
    }


def test_private_feed_requires_token(client):
    response = client.get("/feed")

    assert response.status_code == 401
    assert response.json() == {"status": "error", "message": "No token provided", "logout": True}


def test_public_feed_lists_featured_and_busiest_categories(client, make_user, make_post, make_category):
    author = make_user()
    quiet = make_category("Quiet corner")
    busy = make_category("Busy street")
    featured = make_post(author, is_featured=True, post_category=busy)
    make_post(author, post_category=busy)
    make_post(author, post_category=quiet, published=False)

    response = client.get("/feed/public")

    assert response.status_code == 200
    body = response.json()
    assert [post["id"] for post in body["featured"]] == [str(featured.id)]
    counts = {category["name"]: category["postCount"] for category in body["categories"]}
    assert counts["Busy street"] == 2
    assert counts["Quiet corner"] == 0
    assert body["categories"][0]["name"] == "Busy street"
