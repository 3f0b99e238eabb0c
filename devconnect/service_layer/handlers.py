from __future__ import annotations

import logging

from devconnect.domain import commands, events, exceptions, model
from devconnect.service_layer import unit_of_work
from devconnect.validation import validate_post_input

logger = logging.getLogger(__name__)


# --- Command handlers ---


def create_post(cmd: commands.CreatePost, uow: unit_of_work.AbstractUnitOfWork) -> model.PostAggregate:
    result = validate_post_input(cmd)
    if not result.is_valid:
        raise exceptions.ValidationFailed(result.errors)

    with uow:
        post = model.PostAggregate.create(
            author=cmd.user_id,
            text=cmd.text,
            name=cmd.name,
            avatar=cmd.avatar,
        )
        uow.posts.add(post)
        post.events.append(events.PostCreated(post_id=post.id, author=post.author))
        uow.commit()
    return post


def delete_post(cmd: commands.DeletePost, uow: unit_of_work.AbstractUnitOfWork) -> int:
    with uow:
        post = _get_post(uow, cmd.post_id)
        if not post.can_be_deleted_by(cmd.user_id):
            raise exceptions.Unauthorized(f"User {cmd.user_id} does not own post {cmd.post_id}")
        uow.posts.delete(post)
        post.events.append(events.PostDeleted(post_id=post.id, author=post.author))
        uow.commit()
    return cmd.post_id


def like_post(cmd: commands.LikePost, uow: unit_of_work.AbstractUnitOfWork) -> model.PostAggregate:
    with uow:
        _require_profile(uow, cmd.user_id)
        post = _get_post(uow, cmd.post_id)
        post.like(cmd.user_id)
        uow.posts.save(post)
        uow.commit()
    return post


def unlike_post(cmd: commands.UnlikePost, uow: unit_of_work.AbstractUnitOfWork) -> model.PostAggregate:
    with uow:
        _require_profile(uow, cmd.user_id)
        post = _get_post(uow, cmd.post_id)
        post.unlike(cmd.user_id)
        uow.posts.save(post)
        uow.commit()
    return post


def add_comment(cmd: commands.AddComment, uow: unit_of_work.AbstractUnitOfWork) -> model.PostAggregate:
    result = validate_post_input(cmd)
    if not result.is_valid:
        raise exceptions.ValidationFailed(result.errors)

    with uow:
        post = _get_post(uow, cmd.post_id)
        post.add_comment(author=cmd.user_id, text=cmd.text, name=cmd.name, avatar=cmd.avatar)
        uow.posts.save(post)
        uow.commit()
    return post


def remove_comment(
    cmd: commands.RemoveComment,
    uow: unit_of_work.AbstractUnitOfWork,
    policy: model.CommentRemovalPolicy = model.CommentRemovalPolicy.anyone,
) -> model.PostAggregate:
    with uow:
        post = _get_post(uow, cmd.post_id)
        comment = post.find_comment(cmd.comment_id)
        if comment is None:
            raise exceptions.CommentNotFound(f"Comment {cmd.comment_id} not found on post {cmd.post_id}")
        if not post.can_remove_comment(cmd.user_id, comment, policy):
            raise exceptions.Unauthorized(
                f"User {cmd.user_id} may not remove comment {cmd.comment_id}"
            )
        post.remove_comment(cmd.comment_id, removed_by=cmd.user_id)
        uow.posts.save(post)
        uow.commit()
    return post


# --- Event handlers ---


def log_post_event(event: events.Event, uow: unit_of_work.AbstractUnitOfWork):
    logger.info("%s: %s", type(event).__name__, event)


# --- Helpers ---


def _get_post(uow: unit_of_work.AbstractUnitOfWork, post_id: int) -> model.PostAggregate:
    post = uow.posts.get(post_id)
    if not post:
        raise exceptions.PostNotFound(f"Post {post_id} not found")
    return post


def _require_profile(uow: unit_of_work.AbstractUnitOfWork, user_id: str) -> model.Profile:
    profile = uow.profiles.get_by_user(user_id)
    if not profile:
        raise exceptions.NoProfile(f"User {user_id} has no profile")
    return profile
