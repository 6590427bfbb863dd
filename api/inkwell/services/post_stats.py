"""
Post statistics service for efficiently adding counts to posts and comments.

Provides batch queries that add like_count, comment_count and is_liked to many
posts (or like_count and is_liked to many comments) with one GROUP BY per
statistic, plus correlated count expressions for ORDER BY clauses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Collection
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload, selectinload

from .. import models
from ..utils.visibility import visible_comment_criteria

if TYPE_CHECKING:
    from ..models import Comment, Post


def card_load_options() -> list:
    """Eager loads needed to render a post card without extra queries."""
    return [
        joinedload(models.Post.author).joinedload(models.User.profile),
        joinedload(models.Post.category),
        selectinload(models.Post.tag_rows),
    ]


def like_count_expr():
    """Correlated like count of the outer Post row, for ORDER BY."""
    return (
        select(func.count(models.PostLike.id))
        .where(models.PostLike.post_id == models.Post.id)
        .correlate(models.Post)
        .scalar_subquery()
    )


def comment_count_expr():
    """Correlated count of non-deleted comments of the outer Post row, for ORDER BY."""
    return (
        select(func.count(models.Comment.id))
        .where(models.Comment.post_id == models.Post.id, models.Comment.is_deleted.is_(False))
        .correlate(models.Post)
        .scalar_subquery()
    )


def get_user_liked_post_ids(db: Session, post_ids: list[UUID], user_id: UUID | None) -> set[UUID]:
    """
    Get the set of post IDs that a user has liked.

    Args:
        db: Database session
        post_ids: List of post IDs to check
        user_id: UUID of the user (None for anonymous)

    Returns:
        Set of post IDs that the user has liked
    """
    if not post_ids or not user_id:
        return set()

    rows = (
        db.query(models.PostLike.post_id)
        .filter(models.PostLike.post_id.in_(post_ids), models.PostLike.user_id == user_id)
        .all()
    )
    return {row[0] for row in rows}


def annotate_posts_with_counts(
    db: Session,
    posts: list["Post"],
    current_user_id: UUID | None = None,
    blocked_user_ids: Collection[UUID] = frozenset(),
) -> list["Post"]:
    """
    Add like_count, comment_count, and is_liked to posts.

    comment_count only counts comments the viewer could see.

    Args:
        db: Database session
        posts: List of Post ORM objects to annotate
        current_user_id: UUID of the current user (optional, for is_liked)
        blocked_user_ids: Viewer's block set, used to hide blocked commenters

    Returns:
        Same list of posts with the attributes added
    """
    if not posts:
        return posts

    post_ids = list({post.id for post in posts})

    like_counts = (
        db.query(models.PostLike.post_id, func.count(models.PostLike.id).label("count"))
        .filter(models.PostLike.post_id.in_(post_ids))
        .group_by(models.PostLike.post_id)
        .all()
    )
    comment_counts = (
        db.query(models.Comment.post_id, func.count(models.Comment.id).label("count"))
        .filter(models.Comment.post_id.in_(post_ids), *visible_comment_criteria(blocked_user_ids))
        .group_by(models.Comment.post_id)
        .all()
    )
    liked = get_user_liked_post_ids(db, post_ids, current_user_id)

    like_count_map = {post_id: count for post_id, count in like_counts}
    comment_count_map = {post_id: count for post_id, count in comment_counts}

    for post in posts:
        post.like_count = like_count_map.get(post.id, 0)
        post.comment_count = comment_count_map.get(post.id, 0)
        post.is_liked = post.id in liked

    return posts


def annotate_comments_with_likes(
    db: Session,
    comments: list["Comment"],
    current_user_id: UUID | None = None,
) -> list["Comment"]:
    """Add like_count and is_liked to comments."""
    if not comments:
        return comments

    comment_ids = [comment.id for comment in comments]
    counts = (
        db.query(models.CommentLike.comment_id, func.count(models.CommentLike.id))
        .filter(models.CommentLike.comment_id.in_(comment_ids))
        .group_by(models.CommentLike.comment_id)
        .all()
    )
    liked: set[UUID] = set()
    if current_user_id:
        rows = (
            db.query(models.CommentLike.comment_id)
            .filter(
                models.CommentLike.comment_id.in_(comment_ids),
                models.CommentLike.user_id == current_user_id,
            )
            .all()
        )
        liked = {row[0] for row in rows}

    count_map = {comment_id: count for comment_id, count in counts}
    for comment in comments:
        comment.like_count = count_map.get(comment.id, 0)
        comment.is_liked = comment.id in liked
    return comments
