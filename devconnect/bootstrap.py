from __future__ import annotations

from functools import partial
from typing import Callable, Dict, List, Type

from devconnect.config import config
from devconnect.domain import commands, events, model
from devconnect.service_layer import handlers, unit_of_work
from devconnect.service_layer.messagebus import MessageBus
from devconnect.service_layer.unit_of_work import SqlAlchemyUnitOfWork


def bootstrap(
    uow: unit_of_work.AbstractUnitOfWork | None = None,
    uow_factory: Callable[[], unit_of_work.AbstractUnitOfWork] | None = None,
    comment_removal_policy: model.CommentRemovalPolicy | None = None,
) -> MessageBus:
    if uow_factory is None:
        # a fixed uow is only meant for tests running against fakes
        uow_factory = (lambda: uow) if uow is not None else SqlAlchemyUnitOfWork
    policy = comment_removal_policy or model.CommentRemovalPolicy(config.COMMENT_REMOVAL_POLICY)

    command_handlers: Dict[Type[commands.Command], callable] = {
        commands.CreatePost: handlers.create_post,
        commands.DeletePost: handlers.delete_post,
        commands.LikePost: handlers.like_post,
        commands.UnlikePost: handlers.unlike_post,
        commands.AddComment: handlers.add_comment,
        commands.RemoveComment: partial(handlers.remove_comment, policy=policy),
    }

    event_handlers: Dict[Type[events.Event], List[callable]] = {
        events.PostCreated: [handlers.log_post_event],
        events.PostDeleted: [handlers.log_post_event],
        events.PostLiked: [handlers.log_post_event],
        events.PostUnliked: [handlers.log_post_event],
        events.CommentAdded: [handlers.log_post_event],
        events.CommentRemoved: [handlers.log_post_event],
    }

    return MessageBus(uow_factory=uow_factory, event_handlers=event_handlers, command_handlers=command_handlers)
