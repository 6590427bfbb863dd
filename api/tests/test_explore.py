"""Explore search."""

from __future__ import annotations

from conftest import auth_headers
from inkwell import models
from inkwell.services.explore import explore


def test_blank_query_returns_nothing_without_touching_the_database():
    # db=None would fail on first use
    result = explore(None, "   ", "popular")

    assert result.posts == []
    assert result.users == []


def test_blank_query_over_http(client):
    response = client.get("/explore", params={"q": ""})

    assert response.status_code == 200
    assert response.json() == {"posts": [], "users": []}


def test_matches_title_category_and_exact_tag(client, make_user, make_post, make_category):
    author = make_user()
    python_category = make_category("Python Corner")
    by_title = make_post(author, title="Learning python slowly")
    by_category = make_post(author, title="Unrelated words", post_category=python_category)
    by_tag = make_post(author, title="Snakes and more", tags=["python"])
    make_post(author, title="Partial tag only", tags=["pythonic"])

    response = client.get("/explore", params={"q": "Python"})

    assert response.status_code == 200
    ids = {post["id"] for post in response.json()["posts"]}
    assert ids == {str(by_title.id), str(by_category.id), str(by_tag.id)}


def test_hidden_posts_are_not_found(client, make_user, make_post):
    author = make_user()
    make_post(author, title="Draft about gardening", published=False)
    make_post(author, title="Suspended gardening", suspended=True)
    make_post(make_user(suspended=True), title="Gardening by suspended user")
    visible = make_post(author, title="Gardening for all")

    posts = client.get("/explore", params={"q": "gardening"}).json()["posts"]

    assert [post["id"] for post in posts] == [str(visible.id)]


def test_sort_modes(client, db, make_user, make_post):
    author = make_user()
    older_viewed = make_post(author, title="Cooking one", views=100)
    newer = make_post(author, title="Cooking two", views=1)
    commented = make_post(author, title="Cooking three", views=0)
    db.add_all(
        [models.Comment(content="yum", author_id=author.id, post_id=commented.id) for _ in range(2)]
    )
    db.commit()

    def ids(sort: str) -> list[str]:
        return [post["id"] for post in client.get("/explore", params={"q": "cooking", "sort": sort}).json()["posts"]]

    assert ids("latest") == [str(commented.id), str(newer.id), str(older_viewed.id)]
    assert ids("popular") == [str(older_viewed.id), str(newer.id), str(commented.id)]
    assert ids("trending")[0] == str(commented.id)
    assert ids("bogus") == ids("latest")


def test_users_ranked_by_published_posts(client, make_user, make_post):
    quiet = make_user("writer_quiet")
    busy = make_user("writer_busy")
    make_user("writer_gone", suspended=True)
    make_post(busy)
    make_post(busy)
    make_post(quiet)

    users = client.get("/explore", params={"q": "writer_"}).json()["users"]

    assert [(user["username"], user["publishedPosts"]) for user in users] == [
        ("writer_busy", 2),
        ("writer_quiet", 1),
    ]


def test_blocked_users_and_their_posts_are_excluded(client, db, make_user, make_post):
    viewer = make_user("viewer_account")
    other = make_user("hiker_blocked")
    make_post(other, title="Hiking trails")
    db.add(models.Block(blocker_id=viewer.id, blocked_id=other.id))
    db.commit()

    body = client.get("/explore", params={"q": "hik"}, headers=auth_headers(viewer)).json()

    assert body["posts"] == []
    assert body["users"] == []
