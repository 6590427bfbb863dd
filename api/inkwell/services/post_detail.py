"""Single-post views: the public detail, the author's preview, and view counting."""

from __future__ import annotations

from typing import Any, Collection
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from .. import models, schemas
from ..errors import NotFoundError
from ..utils.visibility import is_visible, visible_comment_criteria
from .post_stats import annotate_comments_with_likes, annotate_posts_with_counts, card_load_options
from .relationships import blocked_user_ids, is_subscribed

POST_NOT_FOUND = "Post not found"


def has_content(content: dict[str, Any] | None) -> bool:
    return bool(content) and bool(content.get("blocks"))


def _load_by_slug(db: Session, slug: str) -> models.Post | None:
    return (
        db.query(models.Post)
        .options(*card_load_options())
        .filter(models.Post.slug == slug)
        .first()
    )


def _visible_comments(
    db: Session, post_id: UUID, viewer_id: UUID | None, blocked: Collection[UUID]
) -> list[models.Comment]:
    comments = (
        db.query(models.Comment)
        .options(joinedload(models.Comment.author).joinedload(models.User.profile))
        .filter(models.Comment.post_id == post_id, *visible_comment_criteria(blocked))
        .order_by(models.Comment.created_at.asc(), models.Comment.id)
        .all()
    )
    return annotate_comments_with_likes(db, comments, viewer_id)


def _compose(
    db: Session, post: models.Post, viewer_id: UUID | None, blocked: Collection[UUID]
) -> schemas.PostDetail:
    annotate_posts_with_counts(db, [post], viewer_id, blocked)
    comments = _visible_comments(db, post.id, viewer_id, blocked)

    card = schemas.PostCard.model_validate(post)
    author = schemas.AuthorDetail(
        **card.author.model_dump(),
        bio=post.author.profile.bio if post.author.profile else None,
        is_following=viewer_id is not None
        and viewer_id != post.author_id
        and is_subscribed(db, viewer_id, post.author_id),
    )
    return schemas.PostDetail(
        **card.model_dump(exclude={"author"}),
        author=author,
        content=post.content,
        updated_at=post.updated_at,
        comments=[schemas.CommentView.model_validate(comment) for comment in comments],
    )


def get_post_detail(db: Session, slug: str, viewer_id: UUID | None = None) -> schemas.PostDetail:
    """
    Post by slug for a reader.

    Missing, blocked, suspended, unpublished and content-less posts all raise
    the same NotFoundError so callers cannot tell them apart.
    """
    post = _load_by_slug(db, slug)
    blocked = blocked_user_ids(db, viewer_id)
    if post is None or not is_visible(viewer_id, "post", post, blocked) or not has_content(post.content):
        raise NotFoundError(POST_NOT_FOUND)
    return _compose(db, post, viewer_id, blocked)


def get_post_for_author_view(db: Session, slug: str, author_id: UUID) -> schemas.PostDetail:
    """
    Post by slug for its author's preview. Unpublished and suspended posts are
    included; trashed and content-less ones are not.
    """
    post = _load_by_slug(db, slug)
    if (
        post is None
        or post.author_id != author_id
        or post.is_deleted
        or not has_content(post.content)
    ):
        raise NotFoundError(POST_NOT_FOUND)
    return _compose(db, post, author_id, blocked_user_ids(db, author_id))


def increment_view(db: Session, slug: str, viewer_id: UUID | None = None) -> int:
    """
    Count one view of a visible post.

    Reads never count views; the client calls this once per page view.
    The increment is done in SQL so concurrent views are not lost.

    Returns:
        The post's view count after the increment
    """
    post = _load_by_slug(db, slug)
    blocked = blocked_user_ids(db, viewer_id)
    if post is None or not is_visible(viewer_id, "post", post, blocked) or not has_content(post.content):
        raise NotFoundError(POST_NOT_FOUND)

    db.query(models.Post).filter(models.Post.id == post.id).update(
        # updated_at tracks edits, not views
        {models.Post.views: models.Post.views + 1, models.Post.updated_at: models.Post.updated_at},
        synchronize_session=False,
    )
    db.commit()
    db.refresh(post)
    return post.views
