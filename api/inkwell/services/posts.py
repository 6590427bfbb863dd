"""
Post authoring: drafts, details, content, publishing and the trash.

Lifecycle: created as an unpublished draft without content, content saved
(read time recalculated each time), published and unpublished any number of
times, moved to the trash (always unpublished) and restored, and finally
deleted for good, which is only allowed from the trash.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from .. import image_store, models, schemas
from ..auth import ensure_can_mutate
from ..errors import BadRequestError, ForbiddenError, NotFoundError
from ..utils.read_time import calculate_read_time
from ..utils.slugs import post_slug
from .post_stats import annotate_posts_with_counts, card_load_options

logger = logging.getLogger(__name__)


def _get_category(db: Session, category_id: UUID) -> models.Category:
    category = db.query(models.Category).filter(models.Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def get_owned_post(db: Session, author: models.User, post_id: UUID) -> models.Post:
    """
    Load a post for a write by its author.

    Raises:
        NotFoundError: no such post
        ForbiddenError: the post belongs to someone else
    """
    post = db.query(models.Post).filter(models.Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")
    if post.author_id != author.id:
        raise ForbiddenError("You do not have permission to modify this post")
    return post


def create_post(db: Session, author: models.User, data: schemas.PostCreate) -> models.Post:
    ensure_can_mutate(author)
    _get_category(db, data.category_id)

    post = models.Post(
        title=data.title,
        slug=post_slug(data.title),
        summary=data.summary,
        category_id=data.category_id,
        author_id=author.id,
        tags=data.tags,
    )
    if data.cover_image:
        cover = image_store.upload_image(data.cover_image, "posts")
        post.cover_url, post.cover_path = cover.url, cover.path

    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info(f"User {author.username} created post {post.id}")
    return post


def update_post_details(
    db: Session, author: models.User, post_id: UUID, patch: schemas.PostUpdate
) -> models.Post:
    """
    Apply the fields present in the patch. A new title gets a new slug; a new
    cover replaces the old one, whose file is deleted.
    """
    ensure_can_mutate(author)
    post = get_owned_post(db, author, post_id)
    changes = patch.model_dump(exclude_unset=True)

    if changes.get("category_id") is not None:
        _get_category(db, changes["category_id"])
        post.category_id = changes["category_id"]
    if changes.get("title") is not None and changes["title"] != post.title:
        post.title = changes["title"]
        post.slug = post_slug(changes["title"])
    if "summary" in changes:
        post.summary = changes["summary"]
    if changes.get("tags") is not None:
        post.tags = changes["tags"]

    old_cover_path = None
    if changes.get("cover_image"):
        cover = image_store.upload_image(changes["cover_image"], "posts")
        old_cover_path = post.cover_path
        post.cover_url, post.cover_path = cover.url, cover.path

    db.commit()
    db.refresh(post)
    if old_cover_path:
        image_store.delete_image(old_cover_path)
    return post


def remove_cover_image(db: Session, author: models.User, post_id: UUID) -> models.Post:
    ensure_can_mutate(author)
    post = get_owned_post(db, author, post_id)
    old_cover_path = post.cover_path
    post.cover_url = None
    post.cover_path = None
    db.commit()
    db.refresh(post)
    image_store.delete_image(old_cover_path)
    return post


def get_post_for_editing(db: Session, author: models.User, post_id: UUID) -> models.Post:
    """The author's own non-trashed post, whatever its publication state."""
    post = (
        db.query(models.Post)
        .filter(
            models.Post.id == post_id,
            models.Post.author_id == author.id,
            models.Post.is_deleted.is_(False),
        )
        .first()
    )
    if not post:
        raise NotFoundError("Post not found")
    return post


def list_author_posts(db: Session, author: models.User) -> list[models.Post]:
    """All of the author's posts, drafts and trash included, newest first."""
    posts = (
        db.query(models.Post)
        .options(*card_load_options())
        .filter(models.Post.author_id == author.id)
        .order_by(models.Post.created_at.desc(), models.Post.id)
        .all()
    )
    return annotate_posts_with_counts(db, posts, author.id)


def upload_post_image(author: models.User, image: str) -> image_store.StoredImage:
    """Inline image for the editor. The returned URL goes into an image block."""
    ensure_can_mutate(author)
    return image_store.upload_image(image, "posts")


def update_content(
    db: Session, author: models.User, post_id: UUID, document: schemas.EditorDocument
) -> models.Post:
    ensure_can_mutate(author)
    post = get_owned_post(db, author, post_id)
    if post.is_deleted:
        raise NotFoundError("Post not found")

    content = document.model_dump(mode="json", by_alias=True, exclude_none=True)
    post.content = content
    post.read_time = calculate_read_time(content)
    db.commit()
    db.refresh(post)
    return post


def toggle_publish(db: Session, author: models.User, post_id: UUID) -> models.Post:
    """
    Publish or unpublish. publishedAt is stamped on the first publish only.

    Raises:
        ForbiddenError: the post is in the trash or suspended by moderation
    """
    ensure_can_mutate(author)
    post = get_owned_post(db, author, post_id)
    if post.is_deleted:
        raise ForbiddenError("Trashed posts cannot be published")
    if post.suspended and not post.published:
        raise ForbiddenError("Suspended posts cannot be published")

    post.published = not post.published
    if post.published and post.published_at is None:
        post.published_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(post)
    logger.info(f"Post {post.id} {'published' if post.published else 'unpublished'}")
    return post


def toggle_trash(db: Session, author: models.User, post_id: UUID) -> models.Post:
    """Move to or restore from the trash. Either way the post ends up unpublished."""
    ensure_can_mutate(author)
    post = get_owned_post(db, author, post_id)
    post.is_deleted = not post.is_deleted
    post.published = False
    db.commit()
    db.refresh(post)
    logger.info(f"Post {post.id} {'moved to trash' if post.is_deleted else 'restored'}")
    return post


def delete_post_permanently(db: Session, author: models.User, post_id: UUID) -> None:
    """
    Raises:
        BadRequestError: the post is not in the trash
    """
    ensure_can_mutate(author)
    post = get_owned_post(db, author, post_id)
    if not post.is_deleted:
        raise BadRequestError("Move post to trash before deleting permanently")

    cover_path = post.cover_path
    db.delete(post)
    db.commit()
    image_store.delete_image(cover_path)
    logger.info(f"Post {post_id} deleted permanently")
