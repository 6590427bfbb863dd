"""Visibility rules for posts, comments and users.

is_visible() is the single rule; the *_criteria() helpers express the same
rule as SQL filters so list queries drop invisible rows in the database.
"""

from __future__ import annotations

from typing import Any, Collection, Literal
from uuid import UUID

from .. import models

TargetKind = Literal["post", "comment", "user"]


def owner_of(target_kind: TargetKind, target: Any) -> "models.User | None":
    if target_kind == "user":
        return target
    return getattr(target, "author", None)


def is_visible(
    viewer_id: UUID | None,
    target_kind: TargetKind,
    target: Any,
    blocked_user_ids: Collection[UUID] = frozenset(),
) -> bool:
    """
    Check whether a viewer may see a post, comment or user.

    All of the following must hold:
    - the owning user (author, commenter, or the user itself) is not suspended
    - a post is not suspended, not deleted, and published unless the viewer owns it
    - a comment is not deleted
    - a user account is active
    - the owning user is not in the viewer's block set (blocks in either direction)

    Args:
        viewer_id: The viewer, or None for anonymous
        target_kind: "post", "comment" or "user"
        target: ORM object of that kind
        blocked_user_ids: Users the viewer blocked or was blocked by

    Returns:
        True if visible. Never raises.
    """
    owner = owner_of(target_kind, target)
    if owner is None or owner.suspended:
        return False

    if target_kind == "post":
        if target.suspended or target.is_deleted:
            return False
        if not target.published and owner.id != viewer_id:
            return False
    elif target_kind == "comment":
        if target.is_deleted:
            return False
    elif not owner.is_active:
        return False

    if viewer_id is not None and owner.id != viewer_id and owner.id in blocked_user_ids:
        return False
    return True


def visible_post_criteria(blocked_user_ids: Collection[UUID] = frozenset()) -> list:
    """
    SQL filters for posts any non-owner may see in lists.

    Posts without saved content are left out as well: they cannot be opened.
    """
    criteria = [
        models.Post.is_deleted.is_(False),
        models.Post.suspended.is_(False),
        models.Post.published.is_(True),
        models.Post.content.is_not(None),
        models.Post.author.has(models.User.suspended.is_(False)),
    ]
    if blocked_user_ids:
        criteria.append(models.Post.author_id.notin_(list(blocked_user_ids)))
    return criteria


def visible_comment_criteria(blocked_user_ids: Collection[UUID] = frozenset()) -> list:
    criteria = [
        models.Comment.is_deleted.is_(False),
        models.Comment.author.has(models.User.suspended.is_(False)),
    ]
    if blocked_user_ids:
        criteria.append(models.Comment.author_id.notin_(list(blocked_user_ids)))
    return criteria


def visible_user_criteria(blocked_user_ids: Collection[UUID] = frozenset()) -> list:
    criteria = [
        models.User.is_active.is_(True),
        models.User.suspended.is_(False),
    ]
    if blocked_user_ids:
        criteria.append(models.User.id.notin_(list(blocked_user_ids)))
    return criteria
