"""Visibility rule and its SQL counterpart."""

from __future__ import annotations

from sqlalchemy.orm import Session

from inkwell import models
from inkwell.utils.visibility import is_visible, visible_post_criteria


def test_published_post_is_visible_to_anyone(make_user, make_post):
    author = make_user()
    post = make_post(author)

    assert is_visible(None, "post", post)
    assert is_visible(make_user().id, "post", post)


def test_draft_is_visible_only_to_its_author(make_user, make_post):
    author = make_user()
    draft = make_post(author, published=False)

    assert is_visible(author.id, "post", draft)
    assert not is_visible(None, "post", draft)
    assert not is_visible(make_user().id, "post", draft)


def test_suspended_or_trashed_post_is_hidden_even_from_author(make_user, make_post):
    author = make_user()
    suspended = make_post(author, suspended=True)
    trashed = make_post(author, is_deleted=True, published=False)

    for post in (suspended, trashed):
        assert not is_visible(author.id, "post", post)
        assert not is_visible(None, "post", post)


def test_suspended_author_hides_posts_comments_and_profile(db: Session, make_user, make_post):
    author = make_user(suspended=True)
    post = make_post(author)
    comment = models.Comment(content="hi", author_id=author.id, post_id=post.id)
    db.add(comment)
    db.commit()
    db.refresh(comment)

    assert not is_visible(None, "post", post)
    assert not is_visible(author.id, "post", post)
    assert not is_visible(None, "comment", comment)
    assert not is_visible(None, "user", author)


def test_blocked_owner_is_hidden_from_viewer(make_user, make_post):
    author = make_user()
    viewer = make_user()
    post = make_post(author)

    assert not is_visible(viewer.id, "post", post, {author.id})
    assert not is_visible(viewer.id, "user", author, {author.id})
    # An owner never hides from itself
    assert is_visible(author.id, "user", author, {author.id})


def test_deleted_comment_and_inactive_user_are_hidden(db: Session, make_user, make_post):
    author = make_user()
    post = make_post(author)
    comment = models.Comment(content="gone", author_id=author.id, post_id=post.id, is_deleted=True)
    db.add(comment)
    db.commit()

    assert not is_visible(None, "comment", comment)
    assert not is_visible(None, "user", make_user(is_active=False))


def test_sql_criteria_agree_with_predicate(db: Session, make_user, make_post):
    author = make_user()
    suspended_author = make_user(suspended=True)
    blocked_author = make_user()
    posts = [
        make_post(author),
        make_post(author, published=False),
        make_post(author, suspended=True),
        make_post(author, is_deleted=True, published=False),
        make_post(suspended_author),
        make_post(blocked_author),
    ]
    viewer = make_user()
    blocked = {blocked_author.id}

    expected = {post.id for post in posts if is_visible(viewer.id, "post", post, blocked)}
    actual = {post.id for post in db.query(models.Post).filter(*visible_post_criteria(blocked)).all()}

    assert actual == expected == {posts[0].id}


def test_sql_criteria_leave_out_posts_without_content(db: Session, make_user, make_post):
    author = make_user()
    make_post(author, content=None)

    assert db.query(models.Post).filter(*visible_post_criteria()).count() == 0
