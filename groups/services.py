# groups/services.py
"""
Membership, posting and like bookkeeping for groups.

Counters are denormalized onto the parent rows.  ``member_count`` and the
like counts are recomputed from their sets; ``post_count`` and
``comment_count`` move with ``F()`` updates and never go below zero.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import F
from rest_framework.exceptions import PermissionDenied, ValidationError

from .models import Comment, Group, GroupMembership, Post

logger = logging.getLogger(__name__)


@transaction.atomic
def create_group(creator, **fields) -> Group:
    name = fields.get("name", "")
    if Group.objects.filter(name__iexact=name).exists():
        raise ValidationError("Group name already exists")
    group = Group.objects.create(creator=creator, **fields)
    GroupMembership.objects.create(group=group, user=creator, role=GroupMembership.ROLE_ADMIN)
    group.refresh_member_count()
    logger.info("Group %s created by user %s", group.pk, creator.pk)
    return group


@transaction.atomic
def join_group(group: Group, user) -> Group:
    group = Group.objects.select_for_update().get(pk=group.pk)
    if group.is_member(user):
        raise ValidationError("Already a member of this group")
    GroupMembership.objects.create(group=group, user=user, role=GroupMembership.ROLE_MEMBER)
    group.refresh_member_count()
    return group


@transaction.atomic
def leave_group(group: Group, user) -> Group:
    group = Group.objects.select_for_update().get(pk=group.pk)
    if group.creator_id == user.pk:
        raise ValidationError("Creator cannot leave the group. Delete it instead.")
    # removes both the member and, if present, the admin role
    GroupMembership.objects.filter(group=group, user=user).delete()
    group.refresh_member_count()
    return group


@transaction.atomic
def create_post(group: Group, author, content: str, image: str = "") -> Post:
    if not group.is_member(author):
        raise PermissionDenied("Must be a member to post")
    post = Post.objects.create(group=group, author=author, content=content, image=image or "")
    Group.objects.filter(pk=group.pk).update(post_count=F("post_count") + 1)
    return post


@transaction.atomic
def delete_post(post: Post, user) -> None:
    if post.author_id != user.pk and not post.group.is_admin(user):
        raise PermissionDenied("Not authorized")
    group_id = post.group_id
    post.delete()  # comments cascade
    Group.objects.filter(pk=group_id, post_count__gt=0).update(post_count=F("post_count") - 1)


@transaction.atomic
def create_comment(post: Post, author, content: str) -> Comment:
    comment = Comment.objects.create(post=post, author=author, content=content)
    Post.objects.filter(pk=post.pk).update(comment_count=F("comment_count") + 1)
    return comment


@transaction.atomic
def delete_comment(comment: Comment, user) -> None:
    if comment.author_id != user.pk and not comment.post.group.is_admin(user):
        raise PermissionDenied("Not authorized")
    post_id = comment.post_id
    comment.delete()
    Post.objects.filter(pk=post_id, comment_count__gt=0).update(comment_count=F("comment_count") - 1)


def _toggle_like(model, pk, user):
    with transaction.atomic():
        obj = model.objects.select_for_update().get(pk=pk)
        if obj.likes.filter(pk=user.pk).exists():
            obj.likes.remove(user)
            liked = False
        else:
            obj.likes.add(user)
            liked = True
        obj.like_count = obj.likes.count()
        obj.save(update_fields=["like_count", "updated_at"])
    return liked, obj.like_count


def toggle_post_like(post: Post, user):
    """Returns (liked, like_count)."""
    return _toggle_like(Post, post.pk, user)


def toggle_comment_like(comment: Comment, user):
    return _toggle_like(Comment, comment.pk, user)
